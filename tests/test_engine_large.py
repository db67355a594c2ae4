import sys
import os
import io
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from engine import PaymentsEngine
from main import write_accounts
from models import TransactionState

NUM_CLIENTS = 1000


def build_rows():
    """
    Every client deposits 100 (tx base+1) and 50 (tx base+2), then one of
    four follow-ups depending on client_id % 4:

      0: withdraws 200 (refused) then 30           -> available 120
      1: chargeback of tx base+1, deposits 25,
         withdraws 10 (refused, locked)            -> available 75, locked
      2: dispute, resolve, dispute again tx base+2 -> available 100, held 50
      3: deposits reusing a neighbour's id and its
         own first id (both refused)               -> available 150
    """
    rows = ["type, client, tx, amount"]
    for client_id in range(1, NUM_CLIENTS + 1):
        base = client_id * 10
        rows.append(f"deposit, {client_id}, {base + 1}, 100")
        rows.append(f"deposit, {client_id}, {base + 2}, 50")

    for client_id in range(1, NUM_CLIENTS + 1):
        base = client_id * 10
        match client_id % 4:
            case 0:
                rows.append(f"withdrawal, {client_id}, {base + 3}, 200")
                rows.append(f"withdrawal, {client_id}, {base + 4}, 30")
            case 1:
                rows.append(f"dispute, {client_id}, {base + 1},")
                rows.append(f"chargeback, {client_id}, {base + 1},")
                rows.append(f"deposit, {client_id}, {base + 3}, 25")
                rows.append(f"withdrawal, {client_id}, {base + 4}, 10")
            case 2:
                rows.append(f"dispute, {client_id}, {base + 2},")
                rows.append(f"resolve, {client_id}, {base + 2},")
                rows.append(f"dispute, {client_id}, {base + 2},")
            case 3:
                rows.append(f"deposit, {client_id}, {base - 10 + 1}, 70")
                rows.append(f"deposit, {client_id}, {base + 1}, 70")
    return rows


class TestPaymentsEngineLargeScale:
    def setup_method(self):
        self.engine = PaymentsEngine()

    def run(self, tmp_path):
        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(build_rows()))
        return self.engine.process_file(str(csv_file))

    def test_1000_clients_mixed_outcomes(self, tmp_path):
        accounts = self.run(tmp_path)

        assert len(accounts) == NUM_CLIENTS

        expected = {
            0: (Decimal("120"), Decimal("0"), False),
            1: (Decimal("75"), Decimal("0"), True),
            2: (Decimal("100"), Decimal("50"), False),
            3: (Decimal("150"), Decimal("0"), False),
        }
        for client_id, account in accounts.items():
            available, held, locked = expected[client_id % 4]
            assert account.available == available, f"Client {client_id}"
            assert account.held == held, f"Client {client_id}"
            assert account.total == available + held, f"Client {client_id}"
            assert account.locked is locked, f"Client {client_id}"

    def test_counts_and_history(self, tmp_path):
        self.run(tmp_path)

        # 2000 opening deposits, then per group of 250 clients:
        # 1 + 3 + 3 + 0 applied, 1 + 1 + 0 + 2 refused.
        assert self.engine.stats.processed == 3750
        assert self.engine.stats.failed == 1000
        assert self.engine.stats.skipped == 0

        transactions = self.engine.ledger.transactions
        assert len(transactions) == 2500
        assert transactions[11].state == TransactionState.CHARGEDBACK
        assert transactions[22].state == TransactionState.DISPUTED
        assert transactions[21].client_id == 2
        assert transactions[31].amount == Decimal("100")
        assert 43 not in transactions
        assert transactions[44].state == TransactionState.OK

    def test_snapshot_of_all_clients(self, tmp_path):
        accounts = self.run(tmp_path)

        out = io.StringIO()
        write_accounts(accounts, out)
        lines = out.getvalue().splitlines()

        assert len(lines) == NUM_CLIENTS + 1
        assert lines[1:5] == [
            "1,75,0,75,true",
            "2,100,50,150,false",
            "3,150,0,150,false",
            "4,120,0,120,false",
        ]
        assert lines[-1] == "1000,120,0,120,false"
