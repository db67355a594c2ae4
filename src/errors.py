"""
Error values returned by Account and Ledger operations.

Nothing here is raised: operations return None on success or one of these
on failure, and the caller decides whether to log and carry on.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from models import Account


class AccountError:
    """Base for failures of a single balance mutation."""


@dataclass(frozen=True)
class Overflow(AccountError):
    available: Decimal
    held: Decimal
    transaction_amount: Decimal

    def __str__(self) -> str:
        return (
            f"overflow applying {self.transaction_amount} "
            f"(available={self.available}, held={self.held})"
        )


@dataclass(frozen=True)
class Underflow(AccountError):
    available: Decimal
    held: Decimal
    transaction_amount: Decimal

    def __str__(self) -> str:
        return (
            f"underflow applying {self.transaction_amount} "
            f"(available={self.available}, held={self.held})"
        )


@dataclass(frozen=True)
class FrozenAccount(AccountError):
    account: "Account" = field(hash=False)

    def __str__(self) -> str:
        return f"account {self.account.client_id} is locked"


class TransactionError:
    """Base for failures of Ledger.apply."""


@dataclass(frozen=True)
class RepeatedTransactionId(TransactionError):
    transaction_id: int

    def __str__(self) -> str:
        return f"tx {self.transaction_id}: transaction id already used"


@dataclass(frozen=True)
class UnknownTransactionId(TransactionError):
    transaction_id: int

    def __str__(self) -> str:
        return f"tx {self.transaction_id}: no such transaction"


@dataclass(frozen=True)
class AlreadyDisputed(TransactionError):
    transaction_id: int

    def __str__(self) -> str:
        return f"tx {self.transaction_id}: transaction already disputed"


@dataclass(frozen=True)
class UndisputedTransaction(TransactionError):
    transaction_id: int

    def __str__(self) -> str:
        return f"tx {self.transaction_id}: transaction is not under dispute"


@dataclass(frozen=True)
class TransactionChargedBack(UndisputedTransaction):
    """The referenced transaction was charged back; nothing more applies to it."""

    def __str__(self) -> str:
        return f"tx {self.transaction_id}: transaction was charged back"


@dataclass(frozen=True)
class UndisputableTransaction(TransactionError):
    transaction_id: int

    def __str__(self) -> str:
        return f"tx {self.transaction_id}: only deposits can be disputed"


@dataclass(frozen=True)
class InvalidAmount(TransactionError):
    transaction_id: int
    amount: Optional[Decimal]

    def __str__(self) -> str:
        return f"tx {self.transaction_id}: invalid amount {self.amount}"


@dataclass(frozen=True)
class AccountOperationFailed(TransactionError):
    client_id: int
    error: AccountError

    def __str__(self) -> str:
        return f"client {self.client_id}: {self.error}"
