import logging
from decimal import Decimal, getcontext

from accounts import AccountTable
from errors import ClientMismatchError, LedgerError, UnknownTransactionError
from ledger import LedgerStore
from models import (
    Chargeback,
    Deposit,
    Dispute,
    LedgerEntry,
    ProcessingResult,
    Resolve,
    Transaction,
    TransactionType,
    Withdrawal,
)

logger = logging.getLogger(__name__)

MAX_FRACTIONAL_DIGITS = 4
# uint32 transaction ids allow fewer than 10**10 balance changes per account
BALANCE_HEADROOM_DIGITS = 10


def is_valid_amount(amount: Decimal) -> bool:
    """
    Finite, strictly positive, at most four fractional digits, and small enough
    that any balance built from such amounts stays exact in the decimal context.
    """
    if not amount.is_finite() or amount <= 0:
        return False
    if amount.adjusted() >= getcontext().prec - MAX_FRACTIONAL_DIGITS - BALANCE_HEADROOM_DIGITS:
        return False
    return amount.normalize().as_tuple().exponent >= -MAX_FRACTIONAL_DIGITS


class TransactionProcessor:
    """
    Applies transactions to the ledger store and account table.
    Returns ProcessingResult to indicate success or the rejection reason.
    A rejected transaction leaves both tables exactly as they were.
    """

    def __init__(self, ledger: LedgerStore, accounts: AccountTable):
        self._ledger = ledger
        self._accounts = accounts

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied
            anything else: Rejected, with the member naming the reason
        """
        account = self._accounts.get(transaction.client_id)

        if account is not None and account.locked:
            logger.warning(f"{transaction!r}: account {transaction.client_id} is locked")
            return ProcessingResult.ACCOUNT_LOCKED

        try:
            match transaction:
                case Deposit():
                    return self._handle_deposit(transaction)
                case Withdrawal():
                    return self._handle_withdrawal(transaction)
                case Dispute():
                    return self._handle_dispute(transaction)
                case Resolve():
                    return self._handle_resolve(transaction)
                case Chargeback():
                    return self._handle_chargeback(transaction)
                case _:
                    raise TypeError(f"Unsupported transaction {transaction!r}")
        except LedgerError as error:
            log = logger.error if isinstance(error, ClientMismatchError) else logger.warning
            log(f"{transaction!r} rejected: {error}")
            return error.result

    def _handle_deposit(self, transaction: Deposit) -> ProcessingResult:
        # deposits and withdrawals open the account even when rejected;
        # the dispute family only ever touches accounts that own a ledger entry
        self._accounts.get_or_create(transaction.client_id)

        if not is_valid_amount(transaction.amount):
            logger.warning(f"Deposit tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        self._ledger.record(
            transaction.transaction_id,
            transaction.client_id,
            TransactionType.DEPOSIT,
            transaction.amount,
        )
        self._accounts.apply_deposit(transaction.client_id, transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Withdrawal) -> ProcessingResult:
        account = self._accounts.get_or_create(transaction.client_id)

        if not is_valid_amount(transaction.amount):
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        if transaction.transaction_id in self._ledger:
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: transaction id already used")
            return ProcessingResult.DUPLICATE_TRANSACTION_ID

        # a failed withdrawal must never reach the ledger
        if account.available < transaction.amount:
            logger.warning(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
                f"(available {account.available}, requested {transaction.amount})"
            )
            return ProcessingResult.INSUFFICIENT_FUNDS

        self._ledger.record(
            transaction.transaction_id,
            transaction.client_id,
            TransactionType.WITHDRAWAL,
            transaction.amount,
        )
        self._accounts.apply_withdrawal(transaction.client_id, transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Dispute) -> ProcessingResult:
        # disputed withdrawals are held the same way as deposits, by stored amount
        entry = self._owned_entry(transaction)
        self._ledger.mark_disputed(entry.transaction_id)
        self._accounts.apply_dispute_hold(entry.client_id, entry.amount)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, transaction: Resolve) -> ProcessingResult:
        entry = self._owned_entry(transaction)
        self._ledger.mark_resolved(entry.transaction_id)
        self._accounts.apply_resolve_release(entry.client_id, entry.amount)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, transaction: Chargeback) -> ProcessingResult:
        entry = self._owned_entry(transaction)
        self._ledger.mark_chargedback(entry.transaction_id)
        self._accounts.apply_chargeback(entry.client_id, entry.amount)
        return ProcessingResult.SUCCESS

    def _owned_entry(self, transaction: Transaction) -> LedgerEntry:
        """Ledger entry the dispute-family transaction refers to, owned by the same client."""
        entry = self._ledger.lookup(transaction.transaction_id)
        if entry is None:
            raise UnknownTransactionError(transaction.transaction_id)
        if entry.client_id != transaction.client_id:
            raise ClientMismatchError(entry.transaction_id, entry.client_id, transaction.client_id)
        return entry
