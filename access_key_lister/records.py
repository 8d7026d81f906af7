"""Reading the account list CSV and writing the access key report CSV."""

import csv

from .errors import OutputError, ValidationError
from .models import AccountRoleEntry

ACCOUNT_ID_LENGTH = 12


def validate_account_role_row(row: list) -> AccountRoleEntry:
    """Check one account list row: exactly two columns and a 12 character account id."""
    if not row:
        raise ValidationError("account role must contain some data")

    account_id = row[0]
    if len(row) != 2:
        raise ValidationError(
            f"validation failed for account {account_id}, the number of data for this account is not 2 columns",
            account_id=account_id,
        )
    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise ValidationError(
            f"validation failed for account {account_id}, the account id must be {ACCOUNT_ID_LENGTH} characters",
            account_id=account_id,
        )

    return AccountRoleEntry(account_id=account_id, role_name=row[1])


def parse_account_roles(lines) -> list:
    """Parse and validate account list rows from any iterable of CSV lines.

    Blank lines are skipped. The first invalid row fails the whole list.
    """
    entries = []
    reader = csv.reader(lines)
    try:
        for row in reader:
            if not row:
                continue
            entries.append(validate_account_role_row(row))
    except csv.Error as e:
        raise ValidationError(f"error when parsing csv in line {reader.line_num}", cause=e) from e

    return entries


def read_account_roles(filepath: str) -> list:
    """Read the account list file."""
    try:
        with open(filepath, newline="") as f:
            return parse_account_roles(f)
    except OSError as e:
        raise ValidationError(f"error when reading account list file {filepath}", cause=e) from e


def write_report(filepath: str, rows: list) -> None:
    """Write one CSV row per user: account id, user name, then key id / created date pairs."""
    try:
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerows(rows)
    except OSError as e:
        raise OutputError(f"error when writing records to CSV file {filepath}", cause=e) from e
