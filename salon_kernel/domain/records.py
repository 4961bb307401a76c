"""
Salon Domain Records (``salon_kernel.domain.records``).

Responsibility
--------------
Frozen dataclass value objects for the nouns of the salon core:
customer and therapist references, line items, transactions, hours
entries and therapist profiles.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O. Produced by
checkout and by the stores, consumed by the engines.

Invariants enforced
-------------------
* All records are ``frozen=True`` (immutable after construction).
* All monetary and hours fields are ``Decimal`` -- NEVER ``float``.
* ``TransactionRecord.total == round2(subtotal - discount)`` and is never
  negative.
* ``HoursEntry.hours`` lies in [0, 24] and is a multiple of the configured
  increment (0.5 by default).

Failure modes
-------------
* ``ValidationError`` (or a subclass) on construction with invalid values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from salon_kernel.domain.dates import day_key
from salon_kernel.domain.money import ZERO, is_multiple_of, round_money, to_decimal
from salon_kernel.exceptions import InvalidHoursError, ValidationError

DEFAULT_HOURS_INCREMENT = Decimal("0.5")
MAX_DAILY_HOURS = Decimal("24")


class PaymentMethod(str, Enum):
    """How a transaction was paid."""
    CASH = "cash"
    CARD = "card"
    OTHER = "other"

    @classmethod
    def parse(cls, value: PaymentMethod | str) -> PaymentMethod:
        """Case-insensitive lookup; raises ValidationError for unknown methods."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValidationError(
                f"Unknown payment method: {value!r}", "payment_method", value,
            ) from e


class EmploymentType(str, Enum):
    """Therapist employment basis."""
    EMPLOYED = "employed"
    SELF_EMPLOYED = "self-employed"


class DiscountType(str, Enum):
    """Discount applied to a cart."""
    NONE = "none"
    PERCENTAGE = "percentage"
    VOUCHER = "voucher"
    CUSTOM = "custom"


@dataclass(frozen=True)
class CustomerRef:
    """Reference to a customer; the customer record is owned elsewhere."""
    id: str
    name: str
    phone: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class TherapistRef:
    """Reference to a therapist as recorded on a transaction."""
    id: str
    name: str
    role: str = "therapist"


@dataclass(frozen=True)
class LineItem:
    """One service line of a transaction."""
    name: str
    category: str
    unit_price: Decimal
    quantity: int
    line_discount: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, "unit_price"))
        object.__setattr__(self, "line_discount", to_decimal(self.line_discount, "line_discount"))
        if self.unit_price < ZERO:
            raise ValidationError("unit_price cannot be negative", "unit_price", self.unit_price)
        if self.line_discount < ZERO:
            raise ValidationError(
                "line_discount cannot be negative", "line_discount", self.line_discount,
            )
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValidationError("quantity must be a positive integer", "quantity", self.quantity)

    @property
    def line_amount(self) -> Decimal:
        """Gross amount before any discount."""
        return self.unit_price * self.quantity

    @property
    def net_amount(self) -> Decimal:
        """Line amount after its own line discount."""
        return self.line_amount - self.line_discount


@dataclass(frozen=True)
class TransactionRecord:
    """
    A completed checkout.

    Created once at checkout and never updated; corrections are new
    transactions.
    """
    date: datetime
    customer: CustomerRef
    therapist: TherapistRef
    items: tuple[LineItem, ...]
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    payment_method: PaymentMethod
    id: str | None = None
    discount_type: DiscountType = DiscountType.NONE
    discount_percentage: Decimal | None = None
    voucher_code: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "subtotal", to_decimal(self.subtotal, "subtotal"))
        object.__setattr__(self, "discount", to_decimal(self.discount, "discount"))
        object.__setattr__(self, "total", to_decimal(self.total, "total"))
        object.__setattr__(self, "payment_method", PaymentMethod.parse(self.payment_method))
        object.__setattr__(self, "discount_type", DiscountType(self.discount_type))

        if self.discount < ZERO:
            raise ValidationError("discount cannot be negative", "discount", self.discount)
        if self.total < ZERO:
            raise ValidationError("total cannot be negative", "total", self.total)
        expected = round_money(self.subtotal - self.discount)
        if self.total != expected:
            raise ValidationError(
                f"total {self.total} does not equal subtotal - discount ({expected})",
                "total",
                self.total,
            )

    @property
    def items_total(self) -> Decimal:
        """Sum of gross line amounts."""
        return sum((item.line_amount for item in self.items), ZERO)

    @property
    def item_quantity(self) -> int:
        return sum(item.quantity for item in self.items)


def validate_hours(
    therapist_id: str,
    work_date: str,
    hours: Decimal,
    increment: Decimal = DEFAULT_HOURS_INCREMENT,
) -> None:
    """
    Check an hours value against the range and increment rules.

    Raises:
        InvalidHoursError: outside [0, 24] or not a multiple of ``increment``.
    """
    if hours < ZERO or hours > MAX_DAILY_HOURS:
        raise InvalidHoursError(therapist_id, work_date, hours, "hours must be between 0 and 24")
    if not is_multiple_of(hours, increment):
        raise InvalidHoursError(
            therapist_id, work_date, hours, f"hours must be a multiple of {increment}",
        )


@dataclass(frozen=True)
class HoursEntry:
    """Hours worked by one therapist on one day."""
    therapist_id: str
    date: str
    hours: Decimal
    increment: Decimal = field(default=DEFAULT_HOURS_INCREMENT, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "date", day_key(self.date))
        try:
            hours = to_decimal(self.hours, "hours")
        except ValidationError as e:
            raise InvalidHoursError(self.therapist_id, self.date, self.hours, "not a number") from e
        validate_hours(self.therapist_id, self.date, hours, self.increment)
        object.__setattr__(self, "hours", hours)


@dataclass(frozen=True)
class TherapistProfile:
    """
    Staff directory entry for a therapist.

    ``is_placeholder`` marks the zero-rate profile substituted for an unknown
    therapist id; only placeholders may be employed with a zero rate.
    """
    id: str
    name: str
    employment_type: EmploymentType
    hourly_rate: Decimal = ZERO
    role: str = "therapist"
    is_placeholder: bool = False

    def __post_init__(self):
        object.__setattr__(self, "employment_type", EmploymentType(self.employment_type))
        object.__setattr__(self, "hourly_rate", to_decimal(self.hourly_rate, "hourly_rate"))
        if self.hourly_rate < ZERO:
            raise ValidationError("hourly_rate cannot be negative", "hourly_rate", self.hourly_rate)
        if (
            self.employment_type == EmploymentType.EMPLOYED
            and self.hourly_rate <= ZERO
            and not self.is_placeholder
        ):
            raise ValidationError(
                "Employed therapist must have a positive hourly_rate",
                "hourly_rate",
                self.hourly_rate,
            )

    @classmethod
    def placeholder(cls, therapist_id: str) -> TherapistProfile:
        """Zero-rate employed profile for an id missing from the directory."""
        return cls(
            id=therapist_id,
            name="Unknown",
            employment_type=EmploymentType.EMPLOYED,
            hourly_rate=ZERO,
            is_placeholder=True,
        )

    @property
    def is_employed(self) -> bool:
        return self.employment_type == EmploymentType.EMPLOYED
