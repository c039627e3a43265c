from dataclasses import dataclass
from decimal import Context, Decimal
from enum import Enum

CLIENT_ID_MAX = 65535
TX_ID_MAX = 4294967295
AMOUNT_PRECISION = Decimal(".0001")
# single amounts stay below 10**28; a balance summed over every possible tx_id
# then needs at most 38 integer digits plus 4 fractional ones
AMOUNT_MAX = Decimal(10) ** 28
MONEY_CONTEXT = Context(prec=64)


class TransactionKind(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class Deposit:
    client_id: int
    tx_id: int
    amount: Decimal
    kind = TransactionKind.DEPOSIT


@dataclass(frozen=True)
class Withdrawal:
    client_id: int
    tx_id: int
    amount: Decimal
    kind = TransactionKind.WITHDRAWAL


@dataclass(frozen=True)
class Dispute:
    client_id: int
    tx_id: int
    kind = TransactionKind.DISPUTE


@dataclass(frozen=True)
class Resolve:
    client_id: int
    tx_id: int
    kind = TransactionKind.RESOLVE


@dataclass(frozen=True)
class Chargeback:
    client_id: int
    tx_id: int
    kind = TransactionKind.CHARGEBACK


Transaction = Deposit | Withdrawal | Dispute | Resolve | Chargeback

_FUNDS_MOVEMENTS = {TransactionKind.DEPOSIT: Deposit, TransactionKind.WITHDRAWAL: Withdrawal}
_REFERENCES = {TransactionKind.DISPUTE: Dispute, TransactionKind.RESOLVE: Resolve, TransactionKind.CHARGEBACK: Chargeback}


def make_transaction(kind, client_id, tx_id, amount=None):
    """Build the record variant for `kind`.

    Deposits and withdrawals need a non-negative amount. The reference kinds
    take none; an amount passed along with them is dropped.
    """
    kind = TransactionKind(kind)
    if kind in _REFERENCES:
        return _REFERENCES[kind](client_id, tx_id)

    if amount is None:
        raise ValueError(f"{kind.value} requires an amount")
    if amount < 0:
        raise ValueError(f"negative amount {amount} not allowed")
    return _FUNDS_MOVEMENTS[kind](client_id, tx_id, amount)
