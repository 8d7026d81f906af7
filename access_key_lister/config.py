"""Command line and environment configuration."""

import argparse
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import ValidationError
from .sessions import DEFAULT_REGION
from .workers import DEFAULT_WORKERS

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    aws_profile: str = "default"
    account_list_file: str = "accountlist.csv"
    output_file: str = "output.csv"
    workers: int = DEFAULT_WORKERS
    debug: bool = False
    region: str = DEFAULT_REGION


def env_workers() -> int:
    """Worker count from LISTER_WORKERS, or the default."""
    value = os.getenv("LISTER_WORKERS")
    if not value:
        return DEFAULT_WORKERS
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(f"LISTER_WORKERS must be an integer, got '{value}'", cause=e) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List IAM access keys for every user across multiple AWS accounts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --account-list-file accounts.csv
  %(prog)s --aws-profile security-audit --workers 20 --output-file keys.csv
  %(prog)s --debug

The account list file has one "account_id,role_name" row per account.
        """
    )
    parser.add_argument(
        "--aws-profile",
        default=os.getenv("AWS_PROFILE", "default"),
        help="AWS CLI profile name used to assume the roles (default: default)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.getenv("LISTER_DEBUG", "").lower() in TRUE_VALUES,
        help="Whether to show debug logs"
    )
    parser.add_argument(
        "--account-list-file",
        default=os.getenv("ACCOUNT_LIST_FILE", "accountlist.csv"),
        help="Account list file name (default: accountlist.csv)"
    )
    parser.add_argument(
        "--output-file",
        default=os.getenv("OUTPUT_FILE", "output.csv"),
        help="Name of the output CSV file (default: output.csv)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=env_workers(),
        help=f"Number of workers to use (default: {DEFAULT_WORKERS})"
    )
    parser.add_argument(
        "--region",
        default=os.getenv("AWS_REGION", DEFAULT_REGION),
        help=f"Region for the STS and IAM clients (default: {DEFAULT_REGION})"
    )
    return parser


def load_settings(argv: Optional[list] = None) -> Settings:
    """Load .env, then parse arguments; flags win over environment variables."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    if args.workers < 1:
        raise ValidationError(f"Number of workers must be at least 1, got {args.workers}")

    return Settings(
        aws_profile=args.aws_profile,
        account_list_file=args.account_list_file,
        output_file=args.output_file,
        workers=args.workers,
        debug=args.debug,
        region=args.region,
    )
