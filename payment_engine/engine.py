import logging

from payment_engine.accounts import Account
from payment_engine.ledger import DisputeState, DuplicateKey, Ledger
from payment_engine.transactions import Chargeback, Deposit, Dispute, Resolve, Withdrawal

logger = logging.getLogger(__name__)


class AccountEngine:
    """Applies transactions one at a time to the account table and ledger.

    Every business-rule violation is a rejection: it is logged, `apply`
    returns False and no state changes. Nothing raised here depends on the
    content of the input stream.
    """

    def __init__(self, accounts=None, ledger=None):
        self.accounts = accounts if accounts is not None else {}
        self.ledger = ledger if ledger is not None else Ledger()

    def run(self, transactions):
        for transaction in transactions:
            self.apply(transaction)
        return self

    def account(self, client_id):
        return self.accounts.get(client_id)

    def apply(self, transaction):
        account = self.accounts.get(transaction.client_id)
        if account is not None and account.locked:
            return self.reject(transaction, "account is locked")

        match transaction:
            case Deposit():
                accepted = self.process_deposit(account, transaction)
            case Withdrawal():
                accepted = self.process_withdrawal(account, transaction)
            case Dispute():
                accepted = self.process_dispute(account, transaction)
            case Resolve():
                accepted = self.process_resolve(account, transaction)
            case Chargeback():
                accepted = self.process_chargeback(account, transaction)
            case _:
                raise TypeError(f"not a transaction record: {transaction!r}")

        if accepted:
            logger.debug("applied %r", transaction)
        return accepted

    def process_deposit(self, account, transaction):
        try:
            self.ledger.insert(transaction.tx_id, transaction.client_id, transaction.amount)
        except DuplicateKey:
            return self.reject(transaction, "deposit duplicates existing tx_id")

        if account is None:
            account = self.accounts[transaction.client_id] = Account(transaction.client_id)
        account.credit(transaction.amount)
        return True

    def process_withdrawal(self, account, transaction):
        if account is None:
            return self.reject(transaction, "client account not found")

        if account.available < transaction.amount:
            return self.reject(transaction, "nsf")

        account.debit(transaction.amount)
        return True

    def process_dispute(self, account, transaction):
        entry = self.get_entry(account, transaction)
        if entry is None:
            return False

        if entry.state is not DisputeState.NORMAL:
            return self.reject(transaction, f"tx is {describe(entry.state)}")

        self.ledger.set_state(entry.tx_id, DisputeState.DISPUTED)
        account.hold(entry.amount)
        return True

    def process_resolve(self, account, transaction):
        entry = self.get_entry(account, transaction)
        if entry is None:
            return False

        if entry.state is not DisputeState.DISPUTED:
            return self.reject(transaction, f"tx is {describe(entry.state)}")

        self.ledger.set_state(entry.tx_id, DisputeState.NORMAL)
        account.release(entry.amount)
        return True

    def process_chargeback(self, account, transaction):
        entry = self.get_entry(account, transaction)
        if entry is None:
            return False

        if entry.state is not DisputeState.DISPUTED:
            return self.reject(transaction, f"tx is {describe(entry.state)}")

        self.ledger.set_state(entry.tx_id, DisputeState.CHARGED_BACK)
        account.charge_back(entry.amount)
        return True

    def get_entry(self, account, transaction):
        """Ledger entry a dispute-family record refers to, or None after logging why not."""
        entry = self.ledger.lookup(transaction.tx_id)
        if entry is None:
            self.reject(transaction, "tx not found")
            return None

        if entry.client_id != transaction.client_id or account is None:
            self.reject(transaction, "tx client_id mismatch")
            return None

        return entry

    def reject(self, transaction, reason):
        amount_detail = ""
        amount = getattr(transaction, "amount", None)
        if amount is not None:
            amount_detail = f" of ${amount}"
        logger.warning(
            "tx_id %s, client_id %s, failed to apply %s%s: %s",
            transaction.tx_id, transaction.client_id, transaction.kind.value, amount_detail, reason,
        )
        return False


def describe(state):
    if state is DisputeState.NORMAL:
        return "not disputed"
    if state is DisputeState.DISPUTED:
        return "already disputed"
    return "charged back"
