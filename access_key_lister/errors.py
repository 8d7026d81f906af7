"""
Error kinds raised by the access key lister.

Every failure the lister reports is one of the subclasses below, each carrying
the account, role and user it relates to so callers can branch on the kind
instead of parsing messages.
"""

from typing import Optional


class AccessKeyListerError(Exception):
    """Base class for all lister failures."""

    kind = "error"

    def __init__(
        self,
        message: str,
        account_id: Optional[str] = None,
        role_name: Optional[str] = None,
        user_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.account_id = account_id
        self.role_name = role_name
        self.user_name = user_name
        self.cause = cause

    @property
    def context(self) -> dict:
        """Non-empty context fields, in a stable order."""
        fields = {
            "account_id": self.account_id,
            "role_name": self.role_name,
            "user_name": self.user_name,
        }
        return {key: value for key, value in fields.items() if value}

    def __str__(self) -> str:
        parts = [self.message]
        parts.extend(f"{key}={value}" for key, value in self.context.items())
        if self.cause is not None:
            parts.append(f"cause={self.cause}")
        return " | ".join(parts)


class ValidationError(AccessKeyListerError):
    """Malformed account/role input or invalid configuration."""

    kind = "validation"


class SessionError(AccessKeyListerError):
    """Base credentials or role assumption failed."""

    kind = "session"


class ListingError(AccessKeyListerError):
    """A page fetch failed while listing users or access keys."""

    kind = "listing"


class OutputError(AccessKeyListerError):
    """Writing the report failed."""

    kind = "output"
