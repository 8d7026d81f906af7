"""In-memory stand-ins for the STS and IAM clients."""

from __future__ import annotations

import dataclasses
import threading
import time
from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError

from access_key_lister import sessions
from access_key_lister.models import ScopedSession


def access_denied(operation_name: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "User is not authorized"}},
        operation_name,
    )


def key_metadata(user_name: str, key_id: str, created: datetime | None = None) -> dict:
    return {
        "UserName": user_name,
        "AccessKeyId": key_id,
        "Status": "Active",
        "CreateDate": created or datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


def iam_page(result_key: str, items: list, page: int, total_pages: int) -> dict:
    response = {result_key: items, "IsTruncated": page + 1 < total_pages}
    if response["IsTruncated"]:
        response["Marker"] = str(page + 1)
    return response


class FakePaginator:
    """Follows Marker while IsTruncated, fetching each page only when it is consumed."""

    def __init__(self, operation) -> None:
        self.operation = operation

    def paginate(self, **params):
        marker = None
        while True:
            if marker is None:
                response = self.operation(**params)
            else:
                response = self.operation(Marker=marker, **params)
            yield response
            if not response.get("IsTruncated"):
                return
            marker = response["Marker"]


class FakeIAMClient:
    """Serves list_users / list_access_keys from fixed pages.

    user_pages is a list of pages of user names. key_pages maps a user name to
    its pages of access key metadata; users missing from it have one empty page.
    """

    def __init__(
        self,
        user_pages: list | None = None,
        key_pages: dict | None = None,
        failing_users: tuple = (),
        delay: float = 0,
    ) -> None:
        self.user_pages = user_pages if user_pages is not None else [[]]
        self.key_pages = key_pages or {}
        self.failing_users = set(failing_users)
        self.delay = delay
        self.calls: list[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def list_users(self, Marker=None):
        page = int(Marker or 0)
        with self._lock:
            self.calls.append(("list_users", Marker))
        users = [{"UserName": name} for name in self.user_pages[page]]
        return iam_page("Users", users, page, len(self.user_pages))

    def list_access_keys(self, UserName, Marker=None):
        page = int(Marker or 0)
        with self._lock:
            self.calls.append(("list_access_keys", UserName, Marker))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if UserName in self.failing_users:
                raise access_denied("ListAccessKeys")
            pages = self.key_pages.get(UserName, [[]])
            return iam_page("AccessKeyMetadata", pages[page], page, len(pages))
        finally:
            with self._lock:
                self.in_flight -= 1

    def get_paginator(self, operation_name: str) -> FakePaginator:
        return FakePaginator(getattr(self, operation_name))

    def key_calls(self, user_name: str) -> list:
        return [call for call in self.calls if call[0] == "list_access_keys" and call[1] == user_name]


class FakeSTSClient:
    def __init__(self, failing_accounts: tuple = ()) -> None:
        self.failing_accounts = set(failing_accounts)
        self.calls: list[str] = []

    def assume_role(self, RoleArn, RoleSessionName):
        self.calls.append(RoleArn)
        account_id = RoleArn.split(":")[4]
        if account_id in self.failing_accounts:
            raise access_denied("AssumeRole")
        return {
            "Credentials": {
                "AccessKeyId": "ASIATESTTESTTEST0001",
                "SecretAccessKey": "secret",
                "SessionToken": "token",
            }
        }


@pytest.fixture()
def make_session():
    def factory(iam_client, account_id: str = "111111111111", role_name: str = "ReadOnly") -> ScopedSession:
        return ScopedSession(account_id=account_id, role_name=role_name, iam_client=iam_client)

    return factory


@pytest.fixture()
def fake_accounts(monkeypatch):
    """Route each assumed role's IAM calls to a per-account FakeIAMClient.

    Role assumption itself still runs through assume_role_session, so STS
    failures surface the way they do in production. Returns the dict to fill
    with account id -> FakeIAMClient.
    """
    clients: dict[str, FakeIAMClient] = {}

    def assume_role_with_fake_iam(sts_client, entry, **kwargs):
        session = sessions.assume_role_session(sts_client, entry, **kwargs)
        return dataclasses.replace(session, iam_client=clients[entry.account_id])

    monkeypatch.setattr("access_key_lister.orchestrator.assume_role_session", assume_role_with_fake_iam)
    return clients
