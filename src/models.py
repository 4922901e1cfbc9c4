from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeStatus(Enum):
    CLEAN = "clean"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    APPLIED = "applied"
    REJECTED = "rejected"


class RejectionReason(Enum):
    MALFORMED_RECORD = "malformed_record"
    DUPLICATE_TRANSACTION_ID = "duplicate_transaction_id"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_REFERENCED_TRANSACTION = "unknown_referenced_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"
    ACCOUNT_LOCKED = "account_locked"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class MalformedRecord:
    """An input line that could not be turned into a Transaction."""

    line_number: int
    raw: str
    error: str


Record = Union[Transaction, MalformedRecord]


@dataclass
class StoredTransaction:
    """
    A deposit or withdrawal kept for later dispute lookups.
    Only dispute_status changes after the record is stored.
    """

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Decimal
    dispute_status: DisputeStatus = DisputeStatus.CLEAN

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "StoredTransaction":
        return cls(
            transaction_type=transaction.transaction_type,
            client_id=transaction.client_id,
            transaction_id=transaction.transaction_id,
            amount=transaction.amount,
        )


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

    def lock(self) -> None:
        self.locked = True


@dataclass(frozen=True)
class ProcessingOutcome:
    result: ProcessingResult
    reason: Optional[RejectionReason] = None
    detail: str = ""

    @classmethod
    def applied(cls) -> "ProcessingOutcome":
        return cls(ProcessingResult.APPLIED)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: str) -> "ProcessingOutcome":
        return cls(ProcessingResult.REJECTED, reason, detail)

    @property
    def is_applied(self) -> bool:
        return self.result == ProcessingResult.APPLIED


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    processed: int = 0
    rejected: int = 0
    rejections_by_reason: Counter = field(default_factory=Counter)

    def record(self, outcome: ProcessingOutcome) -> None:
        if outcome.is_applied:
            self.processed += 1
        else:
            self.rejected += 1
            self.rejections_by_reason[outcome.reason] += 1

    def summary(self) -> str:
        return f"Processed: {self.processed}, Rejected: {self.rejected}"
