"""
Module: salon_engines.cart
Responsibility:
    Point-of-sale cart: line editing, customer/therapist selection, one
    discount per cart, totals, and the checkout precondition that turns a
    cart into a TransactionRecord.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    ``compute_cart_totals`` is a pure function of ``CartState``; ``Cart`` is a
    small holder that swaps in a new frozen state on every successful edit.
    Persistence happens in salon_services.checkout_service.

Invariants enforced:
    - subtotal = sum(unit_price * quantity).
    - Percentage discounts come from a closed, configurable set.
    - Voucher and custom discounts are clamped to the subtotal.
    - 0 <= discount_amount <= subtotal and total = max(0, subtotal - discount),
      rounded to cents.
    - A rejected edit leaves the cart state unchanged.

Failure modes:
    - InvalidDiscountError for a non-positive or unparseable amount, a
      percentage outside the configured set, or a voucher without a code.
      The same check applies to amounts set directly on a CartState.
    - ValidationError for a negative unit price or a quantity that is not a
      positive integer.
    - PreconditionError when checking out without a customer, a therapist
      or any items (checked in that order).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from salon_engines.tracer import traced_engine
from salon_kernel.config import SalonConfig
from salon_kernel.domain.money import HUNDRED, ZERO, round_money, to_decimal
from salon_kernel.domain.records import (
    CustomerRef,
    DiscountType,
    LineItem,
    PaymentMethod,
    TherapistRef,
    TransactionRecord,
)
from salon_kernel.exceptions import InvalidDiscountError, PreconditionError, ValidationError
from salon_kernel.logging_config import get_logger

logger = get_logger("engines.cart")


@dataclass(frozen=True)
class CartLine:
    """A service in the cart, keyed by the service's id."""

    item_id: str
    name: str
    unit_price: Decimal
    quantity: int = 1
    category: str = ""

    def __post_init__(self):
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, "unit_price"))
        if self.unit_price < ZERO:
            raise ValidationError("unit_price cannot be negative", "unit_price", self.unit_price)
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValidationError("quantity must be a positive integer", "quantity", self.quantity)

    @property
    def line_amount(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_line_item(self) -> LineItem:
        return LineItem(
            name=self.name,
            category=self.category,
            unit_price=self.unit_price,
            quantity=self.quantity,
        )


def _positive_amount(discount_type: DiscountType, value) -> Decimal:
    try:
        amount = to_decimal(value, "discount")
    except ValidationError as e:
        raise InvalidDiscountError(discount_type.value, value, "not a number") from e
    if amount <= ZERO:
        raise InvalidDiscountError(discount_type.value, value, "must be greater than zero")
    return amount


@dataclass(frozen=True)
class CartState:
    """Everything the totals depend on, plus the selections checkout needs."""

    lines: tuple[CartLine, ...] = ()
    customer: CustomerRef | None = None
    therapist: TherapistRef | None = None
    discount_type: DiscountType = DiscountType.NONE
    discount_percentage: int | None = None
    voucher_code: str | None = None
    voucher_amount: Decimal | None = None
    custom_amount: Decimal | None = None

    def __post_init__(self):
        if self.voucher_amount is not None:
            object.__setattr__(
                self, "voucher_amount", _positive_amount(DiscountType.VOUCHER, self.voucher_amount),
            )
        if self.custom_amount is not None:
            object.__setattr__(
                self, "custom_amount", _positive_amount(DiscountType.CUSTOM, self.custom_amount),
            )

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    discount_amount: Decimal
    total: Decimal


@traced_engine("cart_totals", "1.0")
def compute_cart_totals(state: CartState, config: SalonConfig | None = None) -> CartTotals:
    """
    Subtotal, discount and total for ``state``.

    Raises:
        InvalidDiscountError: if a percentage discount is not one of the
            configured percentages.
    """
    config = config or SalonConfig.with_defaults()
    subtotal = sum((line.line_amount for line in state.lines), ZERO)

    match state.discount_type:
        case DiscountType.PERCENTAGE:
            pct = state.discount_percentage
            if pct not in config.discount_percentages:
                raise InvalidDiscountError(
                    DiscountType.PERCENTAGE.value, pct,
                    f"must be one of {list(config.discount_percentages)}",
                )
            discount = round_money(subtotal * Decimal(pct) / HUNDRED)
        case DiscountType.VOUCHER:
            discount = round_money(min(state.voucher_amount or ZERO, subtotal))
        case DiscountType.CUSTOM:
            discount = round_money(min(state.custom_amount or ZERO, subtotal))
        case _:
            discount = ZERO

    total = max(ZERO, round_money(subtotal - discount))
    return CartTotals(subtotal=round_money(subtotal), discount_amount=discount, total=total)


class Cart:
    """
    Mutable cart used by the checkout screen.

    Every edit builds a new ``CartState``; the state is only replaced once
    the edit has validated, so a failed edit changes nothing.
    """

    def __init__(self, config: SalonConfig | None = None, state: CartState | None = None):
        self._config = config or SalonConfig.with_defaults()
        self._state = state or CartState()

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def totals(self) -> CartTotals:
        return compute_cart_totals(self._state, self._config)

    # Lines

    def add_item(
        self,
        item_id: str,
        name: str,
        unit_price: Decimal | str | int,
        category: str = "",
    ) -> CartState:
        """Add one unit; an item already in the cart has its quantity bumped."""
        lines = list(self._state.lines)
        for index, line in enumerate(lines):
            if line.item_id == item_id:
                lines[index] = replace(line, quantity=line.quantity + 1)
                break
        else:
            lines.append(CartLine(item_id=item_id, name=name, unit_price=unit_price, category=category))
        return self._set(replace(self._state, lines=tuple(lines)))

    def update_quantity(self, item_id: str, quantity: int) -> CartState:
        """Set a line's quantity; zero or less removes the line."""
        # Anything that is not a plain int is left for CartLine to reject.
        if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity <= 0:
            return self.remove_item(item_id)
        lines = tuple(
            replace(line, quantity=quantity) if line.item_id == item_id else line
            for line in self._state.lines
        )
        return self._set(replace(self._state, lines=lines))

    def remove_item(self, item_id: str) -> CartState:
        lines = tuple(line for line in self._state.lines if line.item_id != item_id)
        return self._set(replace(self._state, lines=lines))

    def clear(self) -> CartState:
        """Empty the cart, its selections and its discount."""
        logger.debug("cart_cleared", extra={"line_count": len(self._state.lines)})
        return self._set(CartState())

    # Selections

    def select_customer(self, customer: CustomerRef | None) -> CartState:
        return self._set(replace(self._state, customer=customer))

    def select_therapist(self, therapist: TherapistRef | None) -> CartState:
        return self._set(replace(self._state, therapist=therapist))

    # Discounts

    def apply_percentage(self, percentage: int) -> CartState:
        if percentage not in self._config.discount_percentages:
            raise InvalidDiscountError(
                DiscountType.PERCENTAGE.value, percentage,
                f"must be one of {list(self._config.discount_percentages)}",
            )
        state = self._without_discount(self._state)
        return self._apply(replace(
            state, discount_type=DiscountType.PERCENTAGE, discount_percentage=percentage,
        ))

    def apply_voucher(self, code: str, amount) -> CartState:
        """Fixed-amount voucher; the code is required and the amount clamped to the subtotal."""
        if not code or not str(code).strip():
            raise InvalidDiscountError(DiscountType.VOUCHER.value, code, "voucher code is required")
        value = _positive_amount(DiscountType.VOUCHER, amount)
        state = self._without_discount(self._state)
        return self._apply(replace(
            state,
            discount_type=DiscountType.VOUCHER,
            voucher_code=str(code).strip(),
            voucher_amount=value,
        ))

    def apply_custom(self, amount) -> CartState:
        value = _positive_amount(DiscountType.CUSTOM, amount)
        state = self._without_discount(self._state)
        return self._apply(replace(state, discount_type=DiscountType.CUSTOM, custom_amount=value))

    def remove_discount(self) -> CartState:
        return self._set(self._without_discount(self._state))

    # Checkout

    def validate_for_checkout(self) -> None:
        """
        Raises:
            PreconditionError: missing customer, therapist or items, in that
                order.
        """
        state = self._state
        if state.customer is None:
            raise PreconditionError("customer", "Please select a customer")
        if state.therapist is None:
            raise PreconditionError("therapist", "Please select a therapist")
        if state.is_empty:
            raise PreconditionError("items", "Cart is empty")

    def build_transaction(
        self,
        payment_method: PaymentMethod | str,
        when: datetime,
    ) -> TransactionRecord:
        """Snapshot the cart as a TransactionRecord; the cart is not modified."""
        self.validate_for_checkout()
        state = self._state
        totals = self.totals
        return TransactionRecord(
            date=when,
            customer=state.customer,
            therapist=state.therapist,
            items=tuple(line.to_line_item() for line in state.lines),
            subtotal=totals.subtotal,
            discount=totals.discount_amount,
            total=totals.total,
            payment_method=PaymentMethod.parse(payment_method),
            discount_type=state.discount_type,
            discount_percentage=(
                Decimal(state.discount_percentage)
                if state.discount_percentage is not None else None
            ),
            voucher_code=state.voucher_code,
        )

    # Internals

    @staticmethod
    def _without_discount(state: CartState) -> CartState:
        return replace(
            state,
            discount_type=DiscountType.NONE,
            discount_percentage=None,
            voucher_code=None,
            voucher_amount=None,
            custom_amount=None,
        )

    def _apply(self, state: CartState) -> CartState:
        totals = compute_cart_totals(state, self._config)
        logger.info("cart_discount_applied", extra={
            "discount_type": state.discount_type.value,
            "subtotal": str(totals.subtotal),
            "discount_amount": str(totals.discount_amount),
            "total": str(totals.total),
        })
        return self._set(state)

    def _set(self, state: CartState) -> CartState:
        self._state = state
        return state
