"""
Role Session Provider

Builds the base boto3 session from an AWS CLI profile and exchanges it for a
scoped IAM client in each target account through sts:AssumeRole.
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    ProfileNotFound,
    SSOTokenLoadError,
    TokenRetrievalError,
)

from .errors import SessionError
from .models import AccountRoleEntry, ScopedSession

DEFAULT_REGION = "us-east-1"
ROLE_SESSION_NAME = "aws-access-key-lister"


def create_sts_client(profile_name: str, region: str = DEFAULT_REGION):
    """Create the STS client whose credentials are used to assume every role."""
    try:
        session = boto3.Session(profile_name=profile_name, region_name=region)
        return session.client("sts")
    except ProfileNotFound as e:
        raise SessionError(f"AWS profile '{profile_name}' not found", cause=e) from e
    except BotoCoreError as e:
        raise SessionError(f"error when loading config for profile '{profile_name}'", cause=e) from e


def assume_role_session(
    sts_client,
    entry: AccountRoleEntry,
    session_name: str = ROLE_SESSION_NAME,
    region: str = DEFAULT_REGION,
    logger: Optional[logging.Logger] = None,
) -> ScopedSession:
    """Assume entry's role and return an IAM client bound to the temporary credentials."""
    logger = logger or logging.getLogger(__name__)
    role_arn = entry.role_arn

    logger.debug(f"assuming role role_arn={role_arn}")
    try:
        response = sts_client.assume_role(RoleArn=role_arn, RoleSessionName=session_name)
    except (NoCredentialsError, TokenRetrievalError, SSOTokenLoadError) as e:
        raise SessionError(
            "base credentials unavailable (run 'aws sso login' or check the profile)",
            account_id=entry.account_id,
            role_name=entry.role_name,
            cause=e,
        ) from e
    except (ClientError, BotoCoreError) as e:
        raise SessionError(
            f"error when doing assume role {role_arn}",
            account_id=entry.account_id,
            role_name=entry.role_name,
            cause=e,
        ) from e

    credentials = response["Credentials"]
    session = boto3.Session(
        aws_access_key_id=credentials["AccessKeyId"],
        aws_secret_access_key=credentials["SecretAccessKey"],
        aws_session_token=credentials["SessionToken"],
        region_name=region,
    )

    return ScopedSession(
        account_id=entry.account_id,
        role_name=entry.role_name,
        iam_client=session.client("iam"),
    )
