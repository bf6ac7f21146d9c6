"""Exceptions shared across coin ledger services."""


class CoinLedgerError(RuntimeError):
    """Base exception for coin ledger errors."""


class InsufficientBalanceError(CoinLedgerError):
    """Raised when a debit would take a balance below zero."""


class LockTimeoutError(CoinLedgerError):
    """Raised when a named lock cannot be acquired in time."""

    def __init__(self, name: str, timeout: float):
        self.name = name
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s waiting for lock {name!r}")
