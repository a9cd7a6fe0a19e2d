import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional, TextIO

from errors import MalformedRecordError
from models import FOUR_PLACES, AccountSnapshot, FailureRecord, Transaction, TransactionType, make_transaction

logger = logging.getLogger(__name__)

FUNDS_TYPES = {TransactionType.DEPOSIT, TransactionType.WITHDRAWAL}

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

ACCOUNT_HEADER = ["client", "available", "held", "total", "locked"]
FAILURE_HEADER = ["type", "client", "tx", "amount", "reason"]


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """
    Lazily read a CSV file of transactions.
    Raises MalformedRecordError on the first row that cannot be parsed.
    """
    with open(filepath, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                yield parse_row(row)
            except ValueError as e:
                raise MalformedRecordError(reader.line_num, str(e)) from e


def parse_row(row: Dict[Optional[str], object]) -> Transaction:
    """Parse CSV row into Transaction."""
    if None in row:
        raise ValueError(f"unexpected extra fields {row[None]}")

    normalized = {k.strip(): (v or "").strip() for k, v in row.items()}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID)
        transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID)
    except KeyError as e:
        raise ValueError(f"missing field {e}") from e

    amount_str = normalized.get("amount", "")
    if transaction_type not in FUNDS_TYPES:
        if amount_str:
            raise ValueError(f"{transaction_type.value} tx {transaction_id}: amount is not allowed")
        return make_transaction(transaction_type, client_id, transaction_id)

    return make_transaction(transaction_type, client_id, transaction_id, _parse_amount(amount_str))


def _parse_amount(amount_str: str) -> Decimal:
    """Missing or unparseable amounts become NaN, which the processor rejects as invalid_amount."""
    if not amount_str:
        logger.warning("Missing amount, treating as invalid")
        return Decimal("NaN")
    try:
        return Decimal(amount_str)
    except InvalidOperation:
        logger.warning(f"Unparseable amount {amount_str!r}, treating as invalid")
        return Decimal("NaN")


def _parse_id(value: str, name: str, maximum: int) -> int:
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise ValueError(f"{name} {parsed} out of range 0..{maximum}")
    return parsed


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(FOUR_PLACES):f}"


def write_accounts(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(ACCOUNT_HEADER)
    for snapshot in snapshots:
        writer.writerow([
            snapshot.client_id,
            format_amount(snapshot.available),
            format_amount(snapshot.held),
            format_amount(snapshot.total),
            str(snapshot.locked).lower(),
        ])


def write_failures(records: Iterable[FailureRecord], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(FAILURE_HEADER)
    for record in records:
        transaction = record.transaction
        writer.writerow([
            transaction.transaction_type.value,
            transaction.client_id,
            transaction.transaction_id,
            "" if transaction.amount is None else f"{transaction.amount:f}",
            record.reason,
        ])
