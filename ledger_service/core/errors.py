class LedgerError(Exception):
    """Base class for every failure the ledger reports to its caller."""


class AccountNotFoundError(LedgerError):
    """Raised when an account id is missing from the store."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"no such account: {account_id}")
        self.account_id = account_id


class AccountAlreadyExistsError(LedgerError):
    """Raised when an account id is registered twice."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"account {account_id} already exists")
        self.account_id = account_id


class InvalidAmountError(LedgerError):
    """Raised when an amount is negative or not an exact finite decimal."""

    def __init__(self, message: str = "amount can't be negative") -> None:
        super().__init__(message)


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal/transfer would drop balance below zero."""

    def __init__(self) -> None:
        super().__init__("not enough money")


class SameAccountError(LedgerError):
    """Raised when a transfer names the same account on both sides."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"can't transfer to the same account: {account_id}")
        self.account_id = account_id


class MalformedRequestError(Exception):
    """Raised by the HTTP layer when a request body cannot be parsed."""
