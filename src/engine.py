import csv
import logging
from typing import Dict, Iterable, Optional, Tuple

from ledger import Ledger
from models import MAX_CLIENT_ID, MAX_TRANSACTION_ID, Account, Operation, ProcessingStats, TransactionRecord
from number import to_number

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transactions from a CSV source into a Ledger, one at a time and in
    input order. A rejected or unreadable row is logged and skipped; it never
    stops the run.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self.ledger = ledger if ledger is not None else Ledger()
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> Dict[int, Account]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", newline="") as f:
            accounts = self.process_rows(csv.DictReader(f))
        logger.info(str(self.stats))
        return accounts

    def process_rows(self, rows: Iterable[Dict[str, Optional[str]]]) -> Dict[int, Account]:
        for row in rows:
            parsed = self._parse_csv_row(row)
            if parsed is None:
                self.stats.record_skipped()
                continue

            transaction_id, record = parsed
            error = self.ledger.apply(transaction_id, record)
            if error is None:
                self.stats.record_success()
            else:
                self.stats.record_failure()
                logger.warning(f"Rejected {record.operation.value} tx {transaction_id}: {error}")

        return dict(self.ledger.accounts)

    def _parse_csv_row(self, row: Dict[str, Optional[str]]) -> Optional[Tuple[int, TransactionRecord]]:
        """Parse CSV row into a (transaction id, record) pair."""
        try:
            normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

            operation = Operation(normalized["type"].lower())
            client_id = int(normalized["client"])
            transaction_id = int(normalized["tx"])
            if not 0 <= client_id <= MAX_CLIENT_ID:
                raise ValueError(f"client id {client_id} out of range")
            if not 0 <= transaction_id <= MAX_TRANSACTION_ID:
                raise ValueError(f"tx id {transaction_id} out of range")

            amount = None
            amount_str = normalized.get("amount", "")
            if amount_str:
                amount = to_number(amount_str)

            return transaction_id, TransactionRecord(
                operation=operation,
                client_id=client_id,
                amount=amount,
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to parse row {row}: {e}")
            return None
