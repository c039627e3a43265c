import csv
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import NamedTuple

from payment_engine.transactions import AMOUNT_PRECISION, MONEY_CONTEXT

FIELDNAMES = ["client", "available", "held", "total", "locked"]


class AccountRow(NamedTuple):
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


def to_precision(amount):
    # truncate, like the reader does on the way in
    with localcontext(MONEY_CONTEXT):
        return amount.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN)


def snapshot(accounts):
    """Yield one row per account, in ascending client_id order."""
    for client_id in sorted(accounts):
        account = accounts[client_id]
        yield AccountRow(
            client_id,
            to_precision(account.available),
            to_precision(account.held),
            to_precision(account.total),
            account.locked,
        )


def write_csv(rows, stream):
    csvwriter = csv.writer(stream, lineterminator="\n")
    csvwriter.writerow(FIELDNAMES)
    for row in rows:
        csvwriter.writerow([
            row.client_id,
            row.available,
            row.held,
            row.total,
            str(row.locked).lower(),
        ])
