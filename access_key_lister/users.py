"""User Enumerator: every IAM user of one account becomes one work item."""

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from .errors import ListingError
from .models import ScopedSession, WorkItem
from .pagination import collect_pages


def list_users(session: ScopedSession, logger: Optional[logging.Logger] = None) -> list:
    """Get the names of all IAM users in the session's account."""
    logger = logger or logging.getLogger(__name__)
    logger.debug(f"listing users account_id={session.account_id}")

    paginator = session.iam_client.get_paginator("list_users")
    try:
        users = collect_pages(paginator.paginate(), "Users")
    except (ClientError, BotoCoreError) as e:
        raise ListingError(
            "error when listing users",
            account_id=session.account_id,
            role_name=session.role_name,
            cause=e,
        ) from e

    return [user["UserName"] for user in users]


def build_work_items(session: ScopedSession, logger: Optional[logging.Logger] = None) -> list:
    return [
        WorkItem(account_id=session.account_id, user_name=user_name, session=session)
        for user_name in list_users(session, logger)
    ]
