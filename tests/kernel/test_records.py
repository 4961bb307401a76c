"""Tests for domain record validation."""

from datetime import datetime
from decimal import Decimal

import pytest

from salon_kernel.domain.records import (
    CustomerRef,
    EmploymentType,
    HoursEntry,
    LineItem,
    PaymentMethod,
    TherapistProfile,
    TherapistRef,
    TransactionRecord,
)
from salon_kernel.exceptions import InvalidHoursError, ValidationError


def _txn(**overrides):
    values = dict(
        date=datetime(2024, 3, 15, 10, 0),
        customer=CustomerRef(id="c-1", name="Carol"),
        therapist=TherapistRef(id="t-1", name="Alice"),
        items=[LineItem(name="Facial", category="face", unit_price="40", quantity=2)],
        subtotal="80",
        discount="8",
        total="72",
        payment_method="card",
    )
    values.update(overrides)
    return TransactionRecord(**values)


class TestLineItem:

    def test_amounts(self):
        item = LineItem(name="Facial", category="face", unit_price="12.50", quantity=3,
                        line_discount="2.50")
        assert item.line_amount == Decimal("37.50")
        assert item.net_amount == Decimal("35.00")

    @pytest.mark.parametrize("quantity", [0, -1, True, 1.5])
    def test_bad_quantity(self, quantity):
        with pytest.raises(ValidationError):
            LineItem(name="Facial", category="face", unit_price="10", quantity=quantity)

    def test_negative_price(self):
        with pytest.raises(ValidationError):
            LineItem(name="Facial", category="face", unit_price="-1", quantity=1)


class TestTransactionRecord:

    def test_coerces_fields(self):
        txn = _txn()
        assert isinstance(txn.items, tuple)
        assert txn.total == Decimal("72")
        assert txn.payment_method is PaymentMethod.CARD
        assert txn.items_total == Decimal("80")
        assert txn.item_quantity == 2

    def test_total_must_match(self):
        with pytest.raises(ValidationError) as exc_info:
            _txn(total="80")
        assert exc_info.value.field == "total"

    def test_negative_discount(self):
        with pytest.raises(ValidationError):
            _txn(discount="-1", total="81")

    def test_negative_total(self):
        with pytest.raises(ValidationError):
            _txn(subtotal="5", discount="10", total="-5")

    def test_unknown_payment_method(self):
        with pytest.raises(ValidationError):
            _txn(payment_method="cheque")

    def test_payment_method_parse_is_case_insensitive(self):
        assert PaymentMethod.parse(" CASH ") is PaymentMethod.CASH


class TestHoursEntry:

    def test_normalises_date_and_hours(self):
        entry = HoursEntry(therapist_id="t-1", date=datetime(2024, 3, 1, 9), hours=7.5)
        assert entry.date == "2024-03-01"
        assert entry.hours == Decimal("7.5")

    @pytest.mark.parametrize("hours", ["-0.5", "24.5", "7.25"])
    def test_invalid_hours(self, hours):
        with pytest.raises(InvalidHoursError) as exc_info:
            HoursEntry(therapist_id="t-1", date="2024-03-01", hours=hours)
        assert exc_info.value.therapist_id == "t-1"
        assert exc_info.value.work_date == "2024-03-01"

    def test_bounds_inclusive(self):
        assert HoursEntry(therapist_id="t-1", date="2024-03-01", hours=0).hours == 0
        assert HoursEntry(therapist_id="t-1", date="2024-03-01", hours=24).hours == 24

    def test_non_numeric_hours(self):
        with pytest.raises(InvalidHoursError):
            HoursEntry(therapist_id="t-1", date="2024-03-01", hours="lots")

    def test_custom_increment(self):
        entry = HoursEntry(therapist_id="t-1", date="2024-03-01", hours="7.25",
                           increment=Decimal("0.25"))
        assert entry.hours == Decimal("7.25")


class TestTherapistProfile:

    def test_employed_requires_rate(self):
        with pytest.raises(ValidationError):
            TherapistProfile(id="t-1", name="Alice", employment_type="employed")

    def test_self_employed_without_rate(self):
        profile = TherapistProfile(id="t-2", name="Bea", employment_type="self-employed")
        assert profile.employment_type is EmploymentType.SELF_EMPLOYED
        assert not profile.is_employed

    def test_placeholder(self):
        profile = TherapistProfile.placeholder("ghost")
        assert profile.name == "Unknown"
        assert profile.hourly_rate == 0
        assert profile.is_employed
        assert profile.is_placeholder
