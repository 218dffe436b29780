"""
Exception hierarchy shared by all SupportBank modules.

Each layer raises its own subclass (money, parsers, import, export) so
callers can catch exactly the failure kind they can recover from, or
catch SupportBankError for everything.
"""


class SupportBankError(Exception):
    """Base exception for SupportBank."""
    pass


class FileUnreadableError(SupportBankError):
    """The source file could not be opened, decoded, or was empty."""

    def __init__(self, path: str, message: str, empty: bool = False):
        self.path = path
        self.empty = empty
        super().__init__(message)


class ExportError(SupportBankError):
    """The ledger could not be written to the target path."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)
