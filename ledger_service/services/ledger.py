from __future__ import annotations

import logging
from decimal import Context, Decimal, Inexact, InvalidOperation, Overflow
from typing import Dict, Tuple, Union

from ..core.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    SameAccountError,
)
from ..core.locks import ReadWriteLock


logger = logging.getLogger(__name__)

Amount = Union[Decimal, int, str]

# Accepted amounts have at most this many digits before and after the point.
MAX_INTEGER_DIGITS = 30
MAX_SCALE = 18

# Balances are exact within this precision; anything that would round is refused.
EXACT = Context(
    prec=2 * (MAX_INTEGER_DIGITS + MAX_SCALE),
    traps=[Inexact, Overflow, InvalidOperation],
)
SCALE_QUANTUM = Decimal(1).scaleb(-MAX_SCALE)


def to_amount(value: Amount) -> Decimal:
    """Convert ``value`` to an exact, finite, non-negative ``Decimal``.

    Floats are refused outright since they cannot carry an exact decimal.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmountError(f"amount must be an exact decimal, got {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(value)
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise InvalidAmountError(f"amount is not a number: {value!r}") from exc
    if not amount.is_finite():
        raise InvalidAmountError(f"amount must be finite, got {value!r}")
    if amount < 0:
        raise InvalidAmountError()
    if not amount:
        return Decimal(0)
    if amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise InvalidAmountError(
            f"amount must have at most {MAX_INTEGER_DIGITS} integer digits, got {value!r}"
        )
    if amount.as_tuple().exponent < -MAX_SCALE:
        if amount.adjusted() < -MAX_SCALE:
            raise InvalidAmountError(
                f"amount must have at most {MAX_SCALE} decimal places, got {value!r}"
            )
        try:
            amount = amount.quantize(SCALE_QUANTUM, context=EXACT)
        except Inexact as exc:
            raise InvalidAmountError(
                f"amount must have at most {MAX_SCALE} decimal places, got {value!r}"
            ) from exc
    return amount


def _exact(operation, left: Decimal, right: Decimal) -> Decimal:
    try:
        return operation(left, right)
    except (Inexact, Overflow) as exc:
        raise InvalidAmountError("resulting balance is too large to hold exactly") from exc


class Ledger:
    """In-memory account balances guarded by a process-wide read/write lock.

    Reads take the shared side of the lock, every mutation takes the exclusive
    side for its whole duration, so no caller can ever observe half of a
    transfer or a negative balance.
    """

    def __init__(self) -> None:
        self._accounts: Dict[str, Decimal] = {}
        self._lock = ReadWriteLock()

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _get_balance(self, account_id: str) -> Decimal:
        try:
            return self._accounts[account_id]
        except KeyError as exc:
            raise AccountNotFoundError(account_id) from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def create(self, account_id: str) -> None:
        with self._lock.write_locked():
            if account_id in self._accounts:
                raise AccountAlreadyExistsError(account_id)
            self._accounts[account_id] = Decimal(0)
        logger.info("account.created", extra={"account_id": account_id})

    def balance(self, account_id: str) -> Decimal:
        with self._lock.read_locked():
            return self._get_balance(account_id)

    def deposit(self, account_id: str, amount: Amount) -> Decimal:
        amount = to_amount(amount)
        with self._lock.write_locked():
            new_balance = _exact(EXACT.add, self._get_balance(account_id), amount)
            self._accounts[account_id] = new_balance
        logger.info(
            "account.deposit",
            extra={"account_id": account_id, "amount": str(amount), "balance": str(new_balance)},
        )
        return new_balance

    def withdraw(self, account_id: str, amount: Amount) -> Decimal:
        amount = to_amount(amount)
        with self._lock.write_locked():
            current = self._get_balance(account_id)
            if amount > current:
                raise InsufficientFundsError()
            new_balance = _exact(EXACT.subtract, current, amount)
            self._accounts[account_id] = new_balance
        logger.info(
            "account.withdraw",
            extra={"account_id": account_id, "amount": str(amount), "balance": str(new_balance)},
        )
        return new_balance

    def transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Amount,
    ) -> Tuple[Decimal, Decimal]:
        if from_account_id == to_account_id:
            raise SameAccountError(from_account_id)

        with self._lock.write_locked():
            source = self._get_balance(from_account_id)
            dest = self._get_balance(to_account_id)
            amount = to_amount(amount)
            if amount > source:
                raise InsufficientFundsError()

            new_source = _exact(EXACT.subtract, source, amount)
            new_dest = _exact(EXACT.add, dest, amount)
            self._accounts[from_account_id] = new_source
            self._accounts[to_account_id] = new_dest

        logger.info(
            "account.transfer",
            extra={
                "source_account_id": from_account_id,
                "dest_account_id": to_account_id,
                "amount": str(amount),
            },
        )
        return new_source, new_dest

    def total_balance(self) -> Decimal:
        with self._lock.read_locked():
            total = Decimal(0)
            for balance in self._accounts.values():
                total = _exact(EXACT.add, total, balance)
            return total

    def __contains__(self, account_id: object) -> bool:
        with self._lock.read_locked():
            return account_id in self._accounts

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._accounts)
