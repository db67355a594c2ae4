import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from errors import AccountError, FrozenAccount, Overflow, Underflow
from number import ZERO, add, checked_add, checked_sub, subtract

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class Operation(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class TransactionState(Enum):
    OK = "ok"
    DISPUTED = "disputed"
    CHARGEDBACK = "chargedback"


@dataclass(frozen=True)
class TransactionRecord:
    """An incoming transaction, as decoded from the input. Keyed by its transaction id."""

    operation: Operation
    client_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"TransactionRecord({self.operation.value}, client={self.client_id}, amount={self.amount})"


@dataclass
class Transaction:
    """
    History entry for an accepted deposit or withdrawal.
    Only `state` changes after creation.
    """

    client_id: int
    amount: Decimal
    operation: Operation
    state: TransactionState = TransactionState.OK


@dataclass
class Account:
    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return add(self.available, self.held)

    def snapshot(self) -> "Account":
        return dataclasses.replace(self)

    def deposit(self, amount: Decimal) -> Optional[AccountError]:
        available = checked_add(self.available, amount)
        if available is None:
            return self._overflow(amount)

        self.available = available
        return None

    def withdraw(self, amount: Decimal) -> Optional[AccountError]:
        if self.locked:
            return FrozenAccount(self.snapshot())

        # Unlike disputes, withdrawals never take the balance below zero.
        if self.available < amount:
            return self._underflow(amount)

        self.available = subtract(self.available, amount)
        return None

    def dispute(self, amount: Decimal) -> Optional[AccountError]:
        """Move amount from available to held. Available may go negative."""
        available = checked_sub(self.available, amount)
        if available is None:
            return self._underflow(amount)
        held = checked_add(self.held, amount)
        if held is None:
            return self._overflow(amount)

        self.available = available
        self.held = held
        return None

    def resolve(self, amount: Decimal) -> Optional[AccountError]:
        """Move amount from held back to available."""
        available = checked_add(self.available, amount)
        if available is None:
            return self._overflow(amount)
        held = checked_sub(self.held, amount)
        if held is None:
            return self._underflow(amount)

        self.available = available
        self.held = held
        return None

    def chargeback(self, amount: Decimal) -> None:
        """Remove a held amount for good and lock the account."""
        self.held = subtract(self.held, amount)
        self.locked = True

    def _overflow(self, amount: Decimal) -> Overflow:
        return Overflow(available=self.available, held=self.held, transaction_amount=amount)

    def _underflow(self, amount: Decimal) -> Underflow:
        return Underflow(available=self.available, held=self.held, transaction_amount=amount)


class ProcessingStats:
    """Counters for a single engine run."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.skipped = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_skipped(self):
        self.skipped += 1

    def __str__(self) -> str:
        return f"Processed: {self.processed}, Failed: {self.failed}, Skipped: {self.skipped}"
