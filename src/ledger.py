import logging
from typing import Dict, Optional

from errors import (
    AccountOperationFailed,
    AlreadyDisputed,
    InvalidAmount,
    RepeatedTransactionId,
    TransactionChargedBack,
    TransactionError,
    UndisputableTransaction,
    UndisputedTransaction,
    UnknownTransactionId,
)
from models import Account, Operation, Transaction, TransactionRecord, TransactionState
from number import is_number

logger = logging.getLogger(__name__)


class Ledger:
    """
    Owns all client accounts and the history of deposits and withdrawals.

    apply() returns None on success or a TransactionError describing why the
    record was rejected. A rejected record leaves every account and every
    history entry exactly as it was.
    """

    def __init__(self):
        self.accounts: Dict[int, Account] = {}
        self.transactions: Dict[int, Transaction] = {}

    def get_or_create_account(self, client_id: int) -> Account:
        """Get existing account or create new one."""
        if client_id not in self.accounts:
            self.accounts[client_id] = Account(client_id=client_id)
        return self.accounts[client_id]

    def apply(self, transaction_id: int, record: TransactionRecord) -> Optional[TransactionError]:
        match record.operation:
            case Operation.DEPOSIT | Operation.WITHDRAWAL:
                return self._apply_transfer(transaction_id, record)
            case Operation.DISPUTE:
                return self._apply_dispute(transaction_id, record)
            case Operation.RESOLVE:
                return self._apply_resolve(transaction_id, record)
            case Operation.CHARGEBACK:
                return self._apply_chargeback(transaction_id, record)

    def _apply_transfer(self, transaction_id: int, record: TransactionRecord) -> Optional[TransactionError]:
        if transaction_id in self.transactions:
            return RepeatedTransactionId(transaction_id)

        if not is_number(record.amount) or record.amount <= 0:
            return InvalidAmount(transaction_id, record.amount)

        account = self.get_or_create_account(record.client_id)
        if record.operation is Operation.DEPOSIT:
            error = account.deposit(record.amount)
        else:
            error = account.withdraw(record.amount)
        if error is not None:
            return AccountOperationFailed(record.client_id, error)

        self.transactions[transaction_id] = Transaction(
            client_id=record.client_id,
            amount=record.amount,
            operation=record.operation,
        )
        return None

    def _find_referenced(self, transaction_id: int, record: TransactionRecord):
        """
        Look up the transaction a dispute, resolve or chargeback points at.
        Returns (transaction, None) or (None, error).
        """
        original = self.transactions.get(transaction_id)
        if original is None:
            return None, UnknownTransactionId(transaction_id)

        if original.state is TransactionState.CHARGEDBACK:
            return None, TransactionChargedBack(transaction_id)

        if original.client_id != record.client_id:
            logger.warning(
                f"{record.operation.value.capitalize()} for tx {transaction_id}: client mismatch "
                f"(recorded {original.client_id}, got {record.client_id}), using recorded client"
            )
        return original, None

    def _apply_dispute(self, transaction_id: int, record: TransactionRecord) -> Optional[TransactionError]:
        original, error = self._find_referenced(transaction_id, record)
        if error is not None:
            return error

        if original.state is TransactionState.DISPUTED:
            return AlreadyDisputed(transaction_id)

        # Withdrawn funds have already left the account; nothing to hold.
        if original.operation is not Operation.DEPOSIT:
            return UndisputableTransaction(transaction_id)

        account_error = self.accounts[original.client_id].dispute(original.amount)
        if account_error is not None:
            return AccountOperationFailed(original.client_id, account_error)

        original.state = TransactionState.DISPUTED
        return None

    def _apply_resolve(self, transaction_id: int, record: TransactionRecord) -> Optional[TransactionError]:
        original, error = self._find_referenced(transaction_id, record)
        if error is not None:
            return error

        if original.state is not TransactionState.DISPUTED:
            return UndisputedTransaction(transaction_id)

        account_error = self.accounts[original.client_id].resolve(original.amount)
        if account_error is not None:
            return AccountOperationFailed(original.client_id, account_error)

        original.state = TransactionState.OK
        return None

    def _apply_chargeback(self, transaction_id: int, record: TransactionRecord) -> Optional[TransactionError]:
        original, error = self._find_referenced(transaction_id, record)
        if error is not None:
            return error

        if original.state is not TransactionState.DISPUTED:
            return UndisputedTransaction(transaction_id)

        self.accounts[original.client_id].chargeback(original.amount)
        original.state = TransactionState.CHARGEDBACK
        return None
