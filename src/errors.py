from models import ProcessingResult, DisputeState


class LedgerError(Exception):
    """
    Contract violation raised by the ledger store or account table.
    Carries the ProcessingResult the processor reports for it.
    """

    result: ProcessingResult


class DuplicateTransactionIdError(LedgerError):
    result = ProcessingResult.DUPLICATE_TRANSACTION_ID

    def __init__(self, transaction_id: int):
        super().__init__(f"tx {transaction_id} already recorded")
        self.transaction_id = transaction_id


class UnknownTransactionError(LedgerError):
    result = ProcessingResult.UNKNOWN_TRANSACTION

    def __init__(self, transaction_id: int):
        super().__init__(f"tx {transaction_id} not found")
        self.transaction_id = transaction_id


class ClientMismatchError(LedgerError):
    result = ProcessingResult.CLIENT_MISMATCH

    def __init__(self, transaction_id: int, owner_id: int, client_id: int):
        super().__init__(f"tx {transaction_id} belongs to client {owner_id}, not client {client_id}")
        self.transaction_id = transaction_id


class InsufficientFundsError(LedgerError):
    result = ProcessingResult.INSUFFICIENT_FUNDS

    def __init__(self, client_id: int, available, requested):
        super().__init__(f"client {client_id}: available {available} is less than {requested}")
        self.client_id = client_id


class InvalidStateTransitionError(LedgerError):
    result = ProcessingResult.INVALID_STATE_TRANSITION

    def __init__(self, transaction_id: int, current: DisputeState, action: str):
        super().__init__(f"tx {transaction_id}: cannot {action} from state {current.value}")
        self.transaction_id = transaction_id
        self.current = current


class MalformedRecordError(ValueError):
    """Raised by the record source for a row that cannot become a Transaction."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
