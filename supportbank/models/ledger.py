"""
Core Ledger Models for SupportBank

The ledger owns two things:
1. An append-only arena of immutable Transactions, addressed by index
2. A single table of Accounts, keyed by name

DESIGN DECISION: Balances are DERIVED, never stored.
An account's balance is the sum of what it received minus the sum of
what it paid, recomputed from the transaction arena on every read.
There is no running total that a second code path could forget to
update, so a balance can never disagree with the history behind it.

DESIGN DECISION: Accounts hold transaction IDs, not Transaction objects.
A transaction is shared by two accounts; storing indices into the arena
keeps ownership one-directional (ledger -> transactions, ledger ->
accounts) and makes both models plain, serializable data.
"""

import threading
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from supportbank.models.money import format_amount


# Alias so the `date` field name below does not shadow the type.
CalendarDate = date


class Transaction(BaseModel):
    """
    A single double-entry transfer.

    Moves `amount` minor units from `src_account` to `dst_account`.
    Frozen: once applied, a transaction never changes.
    """
    model_config = ConfigDict(frozen=True)

    transaction_id: int = Field(
        ...,
        ge=0,
        description="Index of this transaction in the ledger arena"
    )
    src_account: str = Field(
        ...,
        min_length=1,
        description="Name of the paying account"
    )
    dst_account: str = Field(
        ...,
        min_length=1,
        description="Name of the receiving account"
    )
    date: CalendarDate
    reason: str = Field(
        default="",
        description="Free-text narrative, may be empty"
    )
    amount: int = Field(
        ...,
        gt=0,
        description="Amount in minor units (always positive)"
    )

    @property
    def formatted_amount(self) -> str:
        return format_amount(self.amount)


class Account(BaseModel):
    """
    A named account.

    Holds only the IDs of its transactions, in the order they were
    applied. Ask the Ledger for its balance.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Unique, case-sensitive account name"
    )
    transaction_ids: list[int] = Field(
        default_factory=list,
        description="IDs of transactions this account took part in, in application order"
    )


class AccountBalance(BaseModel):
    """Name and derived balance of an account, as listed by the ledger."""
    model_config = ConfigDict(frozen=True)

    name: str
    balance: int = Field(
        ...,
        description="Derived balance in minor units (negative = owes)"
    )

    @property
    def formatted_balance(self) -> str:
        return format_amount(self.balance)


class Ledger:
    """
    The authoritative set of accounts and the transaction arena.

    GUARANTEES:
    - One Account per name (get-or-create is atomic)
    - Transactions are only ever appended
    - sum of all balances == 0 at all times
    """

    def __init__(self):
        self._accounts: dict[str, Account] = {}
        self._transactions: list[Transaction] = []
        # Guards lookup+insert and append as single steps.
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, name: object) -> bool:
        return name in self._accounts

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def get_or_create_account(self, name: str) -> Account:
        """Return the account called `name`, creating it on first use."""
        with self._lock:
            account = self._accounts.get(name)
            if account is None:
                account = Account(name=name)
                self._accounts[name] = account
            return account

    def pay(
        self,
        src_name: str,
        dst_name: str,
        on: date,
        reason: str,
        amount: int,
    ) -> Transaction:
        """
        Record a transfer of `amount` minor units from src to dst.

        Creates both accounts if needed, appends one Transaction to the
        arena and links it to both accounts.

        Raises:
            pydantic.ValidationError: if amount is not positive or a
                name is empty
        """
        with self._lock:
            transaction = Transaction(
                transaction_id=len(self._transactions),
                src_account=src_name,
                dst_account=dst_name,
                date=on,
                reason=reason,
                amount=amount,
            )
            src = self.get_or_create_account(src_name)
            dst = self.get_or_create_account(dst_name)

            self._transactions.append(transaction)
            src.transaction_ids.append(transaction.transaction_id)
            if dst is not src:
                dst.transaction_ids.append(transaction.transaction_id)

            return transaction

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_account(self, name: str) -> Optional[Account]:
        """Look up an account by exact name. None if it doesn't exist."""
        return self._accounts.get(name)

    def get_transaction(self, transaction_id: int) -> Transaction:
        return self._transactions[transaction_id]

    @property
    def transactions(self) -> list[Transaction]:
        """All transactions in the order they were applied (a copy)."""
        return list(self._transactions)

    @property
    def account_names(self) -> list[str]:
        """Account names in creation order."""
        return list(self._accounts)

    def account_history(self, name: str) -> list[Transaction]:
        """
        Transactions involving `name`, in the order they were applied.

        This is import order, not necessarily date order.
        Returns an empty list for unknown accounts.
        """
        account = self._accounts.get(name)
        if account is None:
            return []
        return [self.get_transaction(tid) for tid in account.transaction_ids]

    def balance(self, name: str) -> int:
        """
        Derived balance of `name` in minor units.

        received - paid, over the account's transactions.
        Unknown accounts have a balance of 0.
        """
        total = 0
        for transaction in self.account_history(name):
            if transaction.dst_account == name:
                total += transaction.amount
            if transaction.src_account == name:
                total -= transaction.amount
        return total

    def list_all_accounts(self) -> list[AccountBalance]:
        """Every account with its derived balance, in creation order."""
        return [
            AccountBalance(name=name, balance=self.balance(name))
            for name in self.account_names
        ]

    def total_balance(self) -> int:
        """Sum of all balances. Always 0 for a consistent ledger."""
        return sum(entry.balance for entry in self.list_all_accounts())
