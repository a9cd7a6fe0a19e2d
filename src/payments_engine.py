import logging
from typing import Iterable, List

from accounts import AccountTable
from csv_io import read_transactions
from failure_sink import FailureSink
from ledger import LedgerStore
from models import AccountSnapshot, ProcessingStats, Transaction
from snapshot import SnapshotEmitter
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Orchestrates a single sequential pass over a transaction stream.
    Rejected transactions go to the failure sink; the run never stops on them.
    """

    def __init__(self):
        self._ledger = LedgerStore()
        self._accounts = AccountTable()
        self._failures = FailureSink()
        self._processor = TransactionProcessor(self._ledger, self._accounts)
        self._stats = ProcessingStats()

    @property
    def failures(self) -> FailureSink:
        return self._failures

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> List[AccountSnapshot]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        return self.process(read_transactions(filepath))

    def process(self, transactions: Iterable[Transaction]) -> List[AccountSnapshot]:
        """Apply every transaction in arrival order, then snapshot the accounts once."""
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)

            if result.is_success:
                self._stats.record_success()
            else:
                self._stats.record_failure(result.value)
                self._failures.record(transaction, result.value)

        snapshots = SnapshotEmitter(self._accounts).emit()
        logger.info(
            f"Processing complete: {len(snapshots)} accounts, "
            f"{self._stats.processed} applied, {self._stats.failed} rejected, "
            f"{len(self._ledger)} ledger entries"
        )
        if self._stats.failures_by_reason:
            logger.info(f"Rejections by reason: {self._stats.failures_by_reason}")
        return snapshots
