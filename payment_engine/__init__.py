from payment_engine.accounts import Account
from payment_engine.engine import AccountEngine
from payment_engine.export import AccountRow, snapshot, write_csv
from payment_engine.ledger import DisputeState, DuplicateKey, Ledger, LedgerEntry
from payment_engine.reader import read_transactions
from payment_engine.transactions import (
    Chargeback,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    TransactionKind,
    Withdrawal,
    make_transaction,
)

__all__ = [
    "Account",
    "AccountEngine",
    "AccountRow",
    "Chargeback",
    "Deposit",
    "Dispute",
    "DisputeState",
    "DuplicateKey",
    "Ledger",
    "LedgerEntry",
    "Resolve",
    "Transaction",
    "TransactionKind",
    "Withdrawal",
    "make_transaction",
    "read_transactions",
    "snapshot",
    "write_csv",
]
