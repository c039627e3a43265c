from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class DuplicateKey(KeyError):
    pass


@dataclass
class LedgerEntry:
    # no record of the originating kind: withdrawals can be stored the same way as deposits
    tx_id: int
    client_id: int
    amount: Decimal
    state: DisputeState = DisputeState.NORMAL


class Ledger:
    """Append-only index of accepted transactions, keyed by tx_id."""

    def __init__(self):
        self._entries = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, tx_id):
        return tx_id in self._entries

    def insert(self, tx_id, client_id, amount):
        if tx_id in self._entries:
            raise DuplicateKey(tx_id)
        entry = LedgerEntry(tx_id, client_id, amount)
        self._entries[tx_id] = entry
        return entry

    def lookup(self, tx_id):
        return self._entries.get(tx_id)

    def set_state(self, tx_id, state):
        # transition legality is the engine's concern
        self._entries[tx_id].state = state
