from typing import List

from models import FailureRecord, Transaction


class FailureSink:
    """
    Append-only audit trail of rejected transactions.
    Records keep arrival order; drain() hands them over and empties the sink.
    """

    def __init__(self):
        self._records: List[FailureRecord] = []

    def record(self, transaction: Transaction, reason: str) -> None:
        """Append a rejected transaction with its reason tag."""
        self._records.append(FailureRecord(transaction=transaction, reason=reason))

    def drain(self) -> List[FailureRecord]:
        """
        Return all collected records in arrival order.
        Called after main processing is complete.
        """
        records, self._records = self._records, []
        return records

    def __len__(self) -> int:
        return len(self._records)
