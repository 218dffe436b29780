"""
Plain-text rendering of accounts and transactions.

Used by the interactive commands and by the account report writer.
Nothing here touches the terminal; every function returns a string.
"""

from supportbank.models.ledger import AccountBalance, Ledger, Transaction
from supportbank.models.money import format_amount


DEFAULT_DATE_FORMAT = "%d/%m/%Y"


def format_transaction(
    transaction: Transaction,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """[01/01/2023] 10.50 from Alice to Bob for rent"""
    return (
        f"[{transaction.date.strftime(date_format)}] "
        f"{transaction.formatted_amount} "
        f"from {transaction.src_account} to {transaction.dst_account} "
        f"for {transaction.reason}"
    )


def format_balance_line(entry: AccountBalance) -> str:
    """Alice: -10.50"""
    return f"{entry.name}: {entry.formatted_balance}"


def format_account_list(entries: list[AccountBalance]) -> str:
    lines = ["All accounts:"]
    lines.extend(format_balance_line(entry) for entry in entries)
    return "\n".join(lines)


def format_account_report(
    ledger: Ledger,
    name: str,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Full report for one account: name, derived balance and every
    transaction it took part in, in application order.
    """
    lines = [
        f"Account: {name}",
        f"Balance: {format_amount(ledger.balance(name))}",
        "Transactions:",
    ]
    lines.extend(
        f"  {format_transaction(t, date_format)}"
        for t in ledger.account_history(name)
    )
    return "\n".join(lines)


def format_ledger_report(
    ledger: Ledger,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Every account report, in account creation order, separated by a blank line."""
    return "\n\n".join(
        format_account_report(ledger, name, date_format)
        for name in ledger.account_names
    )
