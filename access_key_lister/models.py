"""Data passed between the lister's components."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union

ROLE_ARN_FORMAT = "arn:aws:iam::{account_id}:role/{role_name}"


@dataclass(frozen=True)
class AccountRoleEntry:
    """One row of the account list: the account to scan and the role to assume."""

    account_id: str
    role_name: str

    @property
    def role_arn(self) -> str:
        return ROLE_ARN_FORMAT.format(account_id=self.account_id, role_name=self.role_name)


@dataclass(frozen=True)
class ScopedSession:
    """IAM client authorized in one account through an assumed role."""

    account_id: str
    role_name: str
    iam_client: Any = field(repr=False, compare=False)


@dataclass(frozen=True)
class WorkItem:
    """One user whose access keys still need listing."""

    account_id: str
    user_name: str
    session: ScopedSession = field(repr=False, compare=False)


@dataclass(frozen=True)
class AccessKeyRecord:
    key_id: str
    created_date: str

    @classmethod
    def from_metadata(cls, metadata: dict) -> "AccessKeyRecord":
        """Build a record from an IAM AccessKeyMetadata entry."""
        return cls(
            key_id=metadata["AccessKeyId"],
            created_date=format_timestamp(metadata["CreateDate"]),
        )


@dataclass(frozen=True)
class Found:
    user_name: str
    account_id: str
    keys: tuple

    def __post_init__(self):
        if not self.keys:
            raise ValueError(f"Found outcome for {self.user_name} must carry at least one key")

    def to_row(self) -> list:
        """Flatten to account, user, then one (key id, created date) pair per key."""
        row = [self.account_id, self.user_name]
        for key in self.keys:
            row.extend([key.key_id, key.created_date])
        return row


@dataclass(frozen=True)
class Empty:
    """The user exists but has no access keys."""

    user_name: str
    account_id: str


WorkOutcome = Union[Found, Empty]


def format_timestamp(value: Union[datetime, str]) -> str:
    """Render a timestamp as ISO-8601 with offset, e.g. 2024-01-01T00:00:00+00:00."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")
