"""
Orchestrator

Enumerates the users of every account first, then lists all of their access
keys through the worker pool in a single fan-out.
"""

import logging
from typing import Optional

from .aggregator import ResultAggregator
from .sessions import DEFAULT_REGION, ROLE_SESSION_NAME, assume_role_session
from .users import build_work_items
from .workers import DEFAULT_WORKERS, AccessKeyWorkerPool


class AccessKeyLister:
    """Lists access keys for all IAM users across a set of accounts."""

    def __init__(
        self,
        sts_client,
        workers: int = DEFAULT_WORKERS,
        logger: Optional[logging.Logger] = None,
        region: str = DEFAULT_REGION,
        session_name: str = ROLE_SESSION_NAME,
    ):
        self.sts_client = sts_client
        self.logger = logger or logging.getLogger(__name__)
        self.pool = AccessKeyWorkerPool(workers, self.logger)
        self.region = region
        self.session_name = session_name
        self.aggregator = None

    def enumerate_accounts(self, entries: list) -> list:
        """Assume each role in input order and collect one work item per user.

        The first session or listing error aborts the enumeration.
        """
        work_items = []
        for i, entry in enumerate(entries, 1):
            self.logger.info(f"[{i}/{len(entries)}] processing account account_id={entry.account_id}")
            session = assume_role_session(
                self.sts_client,
                entry,
                session_name=self.session_name,
                region=self.region,
                logger=self.logger,
            )
            items = build_work_items(session, self.logger)
            self.logger.info(f"  Found {len(items)} user(s) account_id={entry.account_id}")
            work_items.extend(items)

        return work_items

    def run(self, entries: list) -> list:
        """Return the Found outcomes for all accounts, in outcome arrival order."""
        work_items = self.enumerate_accounts(entries)

        self.aggregator = ResultAggregator(len(work_items), self.logger)
        return self.pool.run(work_items, self.aggregator)
