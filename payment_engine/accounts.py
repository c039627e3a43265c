from dataclasses import dataclass
from decimal import Decimal, localcontext

from payment_engine.transactions import MONEY_CONTEXT


@dataclass
class Account:
    """Balance state for one client. `total` is always derived.

    Arithmetic runs in MONEY_CONTEXT so balances never lose fractional digits.
    """

    client_id: int
    available: Decimal = Decimal(0)
    held: Decimal = Decimal(0)
    locked: bool = False

    @property
    def total(self):
        with localcontext(MONEY_CONTEXT):
            return self.available + self.held

    def credit(self, amount):
        with localcontext(MONEY_CONTEXT):
            self.available += amount

    def debit(self, amount):
        with localcontext(MONEY_CONTEXT):
            self.available -= amount

    def hold(self, amount):
        with localcontext(MONEY_CONTEXT):
            available = self.available - amount
            held = self.held + amount
        self.available, self.held = available, held

    def release(self, amount):
        with localcontext(MONEY_CONTEXT):
            held = self.held - amount
            available = self.available + amount
        self.available, self.held = available, held

    def charge_back(self, amount):
        with localcontext(MONEY_CONTEXT):
            self.held -= amount
        self.locked = True
