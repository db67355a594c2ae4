import csv
import logging
import sys
from typing import Dict, TextIO

from engine import PaymentsEngine
from models import Account
from number import format_number

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def write_accounts(accounts: Dict[int, Account], out: TextIO) -> None:
    """Write one CSV line per account, ordered by client id."""
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_number(account.available),
            format_number(account.held),
            format_number(account.total),
            str(account.locked).lower(),
        ])


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    if len(argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(argv[1])
    except OSError as e:
        print(f"Cannot read {argv[1]}: {e}", file=sys.stderr)
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
