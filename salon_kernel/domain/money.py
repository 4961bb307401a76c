"""
Money -- Decimal helpers for currency amounts and hours.

Responsibility:
    Convert caller-supplied numbers into ``Decimal`` and round currency
    amounts to cents. Every amount in the core passes through ``to_decimal``
    at its boundary.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted via ``str()`` so that
      ``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.
    - NaN and infinities never enter the core.
    - Rounding is ROUND_HALF_UP to two places, applied once at presentation.

Failure modes:
    - InvalidAmountError on NaN, infinity, booleans or unparseable input.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from salon_kernel.exceptions import InvalidAmountError

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """
    Read ``value`` as a finite Decimal.

    Accepts Decimal, int, float and numeric strings (surrounding whitespace
    is ignored).

    Raises:
        InvalidAmountError: if the value is not a finite number.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(field, value)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise InvalidAmountError(field, value) from e
    if not result.is_finite():
        raise InvalidAmountError(field, value)
    return result


def round_money(value: Decimal) -> Decimal:
    """Round a currency amount to cents (ROUND_HALF_UP)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def is_multiple_of(value: Decimal, increment: Decimal) -> bool:
    """True when ``value`` is an exact multiple of ``increment``."""
    return (value % increment) == ZERO
