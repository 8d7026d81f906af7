"""Tests for role assumption against a stubbed STS client."""

from __future__ import annotations

from datetime import datetime, timezone

import boto3
import pytest
from botocore.stub import Stubber

from access_key_lister.errors import SessionError
from access_key_lister.models import AccountRoleEntry
from access_key_lister.sessions import ROLE_SESSION_NAME, assume_role_session, create_sts_client

ENTRY = AccountRoleEntry(account_id="111111111111", role_name="ReadOnly")


@pytest.fixture()
def sts_client():
    return boto3.client(
        "sts",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


def test_role_arn_shape():
    assert ENTRY.role_arn == "arn:aws:iam::111111111111:role/ReadOnly"


def test_assume_role_returns_scoped_iam_client(sts_client):
    with Stubber(sts_client) as stubber:
        stubber.add_response(
            "assume_role",
            {
                "Credentials": {
                    "AccessKeyId": "ASIATESTTESTTEST0001",
                    "SecretAccessKey": "secret",
                    "SessionToken": "token",
                    "Expiration": datetime(2030, 1, 1, tzinfo=timezone.utc),
                }
            },
            {"RoleArn": ENTRY.role_arn, "RoleSessionName": ROLE_SESSION_NAME},
        )

        session = assume_role_session(sts_client, ENTRY)
        stubber.assert_no_pending_responses()

    assert session.account_id == "111111111111"
    assert session.role_name == "ReadOnly"
    assert session.iam_client.meta.service_model.service_name == "iam"
    assert "iam.amazonaws.com" in session.iam_client.meta.endpoint_url


def test_assume_role_failure_is_session_error(sts_client):
    with Stubber(sts_client) as stubber:
        stubber.add_client_error("assume_role", service_error_code="AccessDenied", http_status_code=403)

        with pytest.raises(SessionError) as exc_info:
            assume_role_session(sts_client, ENTRY)

    error = exc_info.value
    assert error.kind == "session"
    assert error.account_id == "111111111111"
    assert error.role_name == "ReadOnly"
    assert "arn:aws:iam::111111111111:role/ReadOnly" in str(error)


def test_unknown_profile_is_session_error(tmp_path, monkeypatch):
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))

    with pytest.raises(SessionError, match="no-such-profile"):
        create_sts_client("no-such-profile")
