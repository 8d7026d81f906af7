#!/usr/bin/env python3
"""
AWS Access Key Lister

Assumes a role in every account of the account list, enumerates all IAM users
and writes one CSV row per user holding at least one access key.
"""

import logging
import sys
from typing import Optional

from .config import load_settings
from .errors import AccessKeyListerError
from .log import create_logger
from .orchestrator import AccessKeyLister
from .records import read_account_roles, write_report
from .sessions import create_sts_client


def log_summary(logger: logging.Logger, entries: list, lister: AccessKeyLister, output_file: str) -> None:
    aggregator = lister.aggregator
    total_keys = sum(len(outcome.keys) for outcome in aggregator.found)

    logger.info("=" * 60)
    logger.info("SCAN COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Accounts scanned: {len(entries)}")
    logger.info(f"Users scanned: {aggregator.received}")
    logger.info(f"Users with access keys: {len(aggregator.found)}")
    logger.info(f"Users without access keys: {aggregator.empty}")
    logger.info(f"Total access keys: {total_keys}")
    logger.info(f"CSV report saved to: {output_file}")


def main(argv: Optional[list] = None):
    try:
        settings = load_settings(argv)
    except AccessKeyListerError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger = create_logger(settings.debug)

    try:
        # The whole list is validated before any AWS call is made.
        entries = read_account_roles(settings.account_list_file)
        logger.info(f"Found {len(entries)} account(s) in {settings.account_list_file}")

        sts_client = create_sts_client(settings.aws_profile, settings.region)
        lister = AccessKeyLister(
            sts_client,
            workers=settings.workers,
            logger=logger,
            region=settings.region,
        )
        lister.run(entries)

        write_report(settings.output_file, lister.aggregator.rows)
        log_summary(logger, entries, lister, settings.output_file)
    except AccessKeyListerError as e:
        logger.error(f"{e.kind} error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Operation cancelled by user.")
        sys.exit(130)
    finally:
        logging.shutdown()

    sys.exit(0)


if __name__ == "__main__":
    main()
