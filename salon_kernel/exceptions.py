"""
Typed Exception Hierarchy for the Salon Kernel.

Every error raised by the core has a TYPED exception class, a class-level
``code`` attribute (machine-readable, API-safe) and carries its context as
attributes rather than only inside the message string.

    SalonError (base)
    |
    +-- ValidationError
    |   +-- InvalidAmountError
    |   +-- InvalidHoursError
    |   +-- InvalidDiscountError
    |   +-- InvalidDateRangeError
    |
    +-- PreconditionError
    |
    +-- NotFoundError
        +-- TherapistNotFoundError
        +-- TransactionNotFoundError

Category        | Code                    | When Raised
----------------|-------------------------|--------------------------------------
Validation      | VALIDATION_ERROR        | Bad input shape or range
                | INVALID_AMOUNT          | NaN, infinity or unparseable amount
                | INVALID_HOURS           | Hours outside [0, 24] or off-increment
                | INVALID_DISCOUNT        | Non-positive or unsupported discount
                | INVALID_DATE_RANGE      | Range start after range end
----------------|-------------------------|--------------------------------------
Precondition    | PRECONDITION_FAILED     | Checkout without required selection
----------------|-------------------------|--------------------------------------
Not found       | NOT_FOUND               | Referenced record missing
                | THERAPIST_NOT_FOUND     | Therapist id not in staff directory
                | TRANSACTION_NOT_FOUND   | Transaction id not in store

Handling pattern:

    try:
        cart.apply_voucher(code, amount)
    except InvalidDiscountError as e:
        show_error(e.code, e.reason)
"""

from __future__ import annotations

from typing import Any


class SalonError(Exception):
    """
    Base exception for all salon kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "SALON_ERROR"


# Validation


class ValidationError(SalonError):
    """Input has the wrong shape or is out of range."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(message)


class InvalidAmountError(ValidationError):
    """A numeric field could not be read as a finite decimal."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, value: Any):
        super().__init__(f"Invalid amount for {field}: {value!r}", field, value)


class InvalidHoursError(ValidationError):
    """Hours entry is outside the allowed range or increment."""

    code: str = "INVALID_HOURS"

    def __init__(self, therapist_id: str, work_date: str, hours: Any, reason: str):
        self.therapist_id = therapist_id
        self.work_date = work_date
        self.reason = reason
        super().__init__(
            f"Invalid hours {hours} for therapist {therapist_id} on {work_date}: {reason}",
            "hours",
            hours,
        )


class InvalidDiscountError(ValidationError):
    """Discount value rejected; the cart is left unchanged."""

    code: str = "INVALID_DISCOUNT"

    def __init__(self, discount_type: str, value: Any, reason: str):
        self.discount_type = discount_type
        self.reason = reason
        super().__init__(
            f"Invalid {discount_type} discount {value!r}: {reason}",
            "discount",
            value,
        )


class InvalidDateRangeError(ValidationError):
    """Range start falls after range end."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start: Any, end: Any):
        self.start = start
        self.end = end
        super().__init__(f"Date range start {start} is after end {end}", "date_range")


# Preconditions


class PreconditionError(SalonError):
    """An operation was attempted before its required selections were made."""

    code: str = "PRECONDITION_FAILED"

    def __init__(self, missing_field: str, message: str | None = None):
        self.missing_field = missing_field
        super().__init__(message or f"Missing required selection: {missing_field}")


# Lookups


class NotFoundError(SalonError):
    """Referenced record does not exist."""

    code: str = "NOT_FOUND"


class TherapistNotFoundError(NotFoundError):
    """Therapist id has no matching profile in the staff directory."""

    code: str = "THERAPIST_NOT_FOUND"

    def __init__(self, therapist_id: str):
        self.therapist_id = therapist_id
        super().__init__(f"Therapist not found: {therapist_id}")


class TransactionNotFoundError(NotFoundError):
    """Transaction id has no matching record in the store."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")
