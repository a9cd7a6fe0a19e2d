from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Dict, Optional, Union

FOUR_PLACES = Decimal("0.0001")


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    SUCCESS = "success"
    DUPLICATE_TRANSACTION_ID = "duplicate_transaction_id"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_STATE_TRANSITION = "invalid_state_transition"
    ACCOUNT_LOCKED = "account_locked"
    INVALID_AMOUNT = "invalid_amount"

    @property
    def is_success(self) -> bool:
        return self is ProcessingResult.SUCCESS


class DisputeState(Enum):
    CLEAN = "clean"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


@dataclass(frozen=True)
class _FundsTransaction:
    """Deposit or withdrawal: always carries an amount."""

    client_id: int
    transaction_id: int
    amount: Decimal

    transaction_type: ClassVar[TransactionType]

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            raise TypeError(
                f"{self.transaction_type.value} tx {self.transaction_id}: amount must be a Decimal, got {self.amount!r}"
            )

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class _DisputeTransaction:
    """Dispute, resolve or chargeback: refers to a prior transaction and has no amount."""

    client_id: int
    transaction_id: int

    transaction_type: ClassVar[TransactionType]

    @property
    def amount(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id})"


@dataclass(frozen=True, repr=False)
class Deposit(_FundsTransaction):
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT


@dataclass(frozen=True, repr=False)
class Withdrawal(_FundsTransaction):
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL


@dataclass(frozen=True, repr=False)
class Dispute(_DisputeTransaction):
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE


@dataclass(frozen=True, repr=False)
class Resolve(_DisputeTransaction):
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE


@dataclass(frozen=True, repr=False)
class Chargeback(_DisputeTransaction):
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK


Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

_VARIANTS = {
    TransactionType.DEPOSIT: Deposit,
    TransactionType.WITHDRAWAL: Withdrawal,
    TransactionType.DISPUTE: Dispute,
    TransactionType.RESOLVE: Resolve,
    TransactionType.CHARGEBACK: Chargeback,
}


def make_transaction(
    transaction_type: TransactionType,
    client_id: int,
    transaction_id: int,
    amount: Optional[Decimal] = None,
) -> Transaction:
    """
    Build the variant for transaction_type.
    Raises ValueError if the amount is missing on a deposit/withdrawal or present on the dispute family.
    """
    variant = _VARIANTS[transaction_type]
    if issubclass(variant, _FundsTransaction):
        if amount is None:
            raise ValueError(f"{transaction_type.value} tx {transaction_id}: amount is required")
        return variant(client_id=client_id, transaction_id=transaction_id, amount=amount)

    if amount is not None:
        raise ValueError(f"{transaction_type.value} tx {transaction_id}: amount is not allowed")
    return variant(client_id=client_id, transaction_id=transaction_id)


@dataclass
class LedgerEntry:
    transaction_id: int
    client_id: int
    transaction_type: TransactionType
    amount: Decimal
    state: DisputeState = DisputeState.CLEAN


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount


@dataclass(frozen=True)
class FailureRecord:
    transaction: Transaction
    reason: str


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: ClientAccount) -> "AccountSnapshot":
        available = account.available.quantize(FOUR_PLACES)
        held = account.held.quantize(FOUR_PLACES)
        return cls(
            client_id=account.client_id,
            available=available,
            held=held,
            total=available + held,
            locked=account.locked,
        )


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    processed: int = 0
    failed: int = 0
    failures_by_reason: Dict[str, int] = field(default_factory=dict)

    def record_success(self):
        self.processed += 1

    def record_failure(self, reason: str):
        self.failed += 1
        self.failures_by_reason[reason] = self.failures_by_reason.get(reason, 0) + 1
