import argparse
import logging
import sys
from typing import List, Optional

from csv_io import write_accounts, write_failures
from errors import MalformedRecordError
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="payments-ledger",
        description="Apply a CSV transaction log to client accounts and print the final balances.",
    )
    parser.add_argument("input", help="CSV file with type, client, tx, amount columns")
    parser.add_argument(
        "--failed-output",
        metavar="PATH",
        help="write rejected transactions and their reasons to this CSV file",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="stderr log level (default: WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine()
    try:
        snapshots = engine.process_file(args.input)
    except FileNotFoundError:
        logger.error(f"Input file not found: {args.input}")
        return 1
    except MalformedRecordError as e:
        logger.error(f"Malformed input in {args.input}: {e}")
        return 1

    write_accounts(snapshots, sys.stdout)

    failures = engine.failures.drain()
    if args.failed_output:
        with open(args.failed_output, "w", newline="") as f:
            write_failures(failures, f)

    print(
        f"Accounts: {len(snapshots)}, "
        f"Processed: {engine.stats.processed}, "
        f"Failed: {engine.stats.failed}",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
