from decimal import Decimal
from typing import Dict, Optional

from errors import DuplicateTransactionIdError, InvalidStateTransitionError, UnknownTransactionError
from models import DisputeState, LedgerEntry, TransactionType

# (current state, action) -> next state
_TRANSITIONS = {
    (DisputeState.CLEAN, "dispute"): DisputeState.DISPUTED,
    (DisputeState.DISPUTED, "resolve"): DisputeState.CLEAN,
    (DisputeState.DISPUTED, "chargeback"): DisputeState.CHARGED_BACK,
}


class LedgerStore:
    """
    History of applied deposits and withdrawals, keyed by transaction id.
    Entries are never removed; a charged back entry stays in its terminal state.
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def record(
        self,
        transaction_id: int,
        client_id: int,
        transaction_type: TransactionType,
        amount: Decimal,
    ) -> LedgerEntry:
        """Store a new clean entry. Raises DuplicateTransactionIdError if the id is taken."""
        if transaction_id in self._entries:
            raise DuplicateTransactionIdError(transaction_id)
        entry = LedgerEntry(
            transaction_id=transaction_id,
            client_id=client_id,
            transaction_type=transaction_type,
            amount=amount,
        )
        self._entries[transaction_id] = entry
        return entry

    def lookup(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Retrieve stored entry by ID."""
        return self._entries.get(transaction_id)

    def mark_disputed(self, transaction_id: int) -> LedgerEntry:
        return self._transition(transaction_id, "dispute")

    def mark_resolved(self, transaction_id: int) -> LedgerEntry:
        return self._transition(transaction_id, "resolve")

    def mark_chargedback(self, transaction_id: int) -> LedgerEntry:
        return self._transition(transaction_id, "chargeback")

    def _transition(self, transaction_id: int, action: str) -> LedgerEntry:
        entry = self._entries.get(transaction_id)
        if entry is None:
            raise UnknownTransactionError(transaction_id)
        try:
            entry.state = _TRANSITIONS[(entry.state, action)]
        except KeyError as exc:
            raise InvalidStateTransitionError(transaction_id, entry.state, action) from exc
        return entry
