import csv
import logging
from decimal import Decimal, ROUND_DOWN, InvalidOperation, localcontext

from payment_engine.transactions import (
    AMOUNT_MAX,
    AMOUNT_PRECISION,
    CLIENT_ID_MAX,
    MONEY_CONTEXT,
    TX_ID_MAX,
    TransactionKind,
    make_transaction,
)

logger = logging.getLogger(__name__)

DEFAULT_FIELD_ORDER = ("type", "client", "tx", "amount")


class FieldOrder:
    """Column positions of the four fields we care about."""

    def __init__(self, type_idx=0, client_idx=1, tx_idx=2, amount_idx=3):
        self.type_idx = type_idx
        self.client_idx = client_idx
        self.tx_idx = tx_idx
        self.amount_idx = amount_idx


def discover_field_order(row):
    """Field order named by a header row, or None if `row` is not a header.

    Unknown columns are ignored. The amount column may be missing entirely,
    in which case only dispute-family records can be decoded.
    """
    names = [field.strip().lower() for field in row]
    if "type" not in names or "client" not in names or "tx" not in names:
        return None

    amount_idx = names.index("amount") if "amount" in names else None
    return FieldOrder(names.index("type"), names.index("client"), names.index("tx"), amount_idx)


def get_normalized_amount(value):
    value = value.strip()
    if not value:
        return None
    with localcontext(MONEY_CONTEXT):
        amount = Decimal(value).quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN)
    if amount < 0:
        raise ValueError(f"negative amount {value}")
    if amount >= AMOUNT_MAX:
        raise ValueError(f"amount {value} too large")
    return amount


def parse_id(value, maximum, name):
    number = int(value.strip())
    if not (0 <= number <= maximum):
        raise ValueError(f"invalid {name} {number}")
    return number


def parse_record(record, order):
    kind = TransactionKind(record[order.type_idx].strip().lower())
    client_id = parse_id(record[order.client_idx], CLIENT_ID_MAX, "client_id")
    tx_id = parse_id(record[order.tx_idx], TX_ID_MAX, "tx_id")

    amount = None
    if kind in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL):
        if order.amount_idx is not None and order.amount_idx < len(record):
            amount = get_normalized_amount(record[order.amount_idx])
    return make_transaction(kind, client_id, tx_id, amount)


def iter_rows(csvreader):
    """Rows of `csvreader`; a row the csv module cannot split is logged and dropped."""
    while True:
        try:
            record = next(csvreader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.error("csv format error: %s on line %d", e, csvreader.line_num)
            continue
        yield record


def read_transactions(stream):
    """Decode CSV rows from `stream` into transaction records.

    Malformed rows are logged and skipped; decoding carries on with the next
    row.
    """
    csvreader = csv.reader(stream)
    order = None
    for record in iter_rows(csvreader):
        if not record or not any(field.strip() for field in record):
            continue

        if order is None:
            order = discover_field_order(record)
            if order is not None:
                continue
            order = FieldOrder()

        try:
            yield parse_record(record, order)
        except (ValueError, InvalidOperation, IndexError) as e:
            logger.error("field format error: %s while attempting to normalize row like: %r", e, record)
