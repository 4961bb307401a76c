"""
Hypothesis property tests for the salon engines.

Properties:
- Therapist grouping conserves revenue (sum of group totals == sum of totals)
- Service grouping conserves revenue up to cent rounding per group
- Cart discounts stay within [0, subtotal] and total never goes negative
- Commission shares add up to revenue for both employment types
"""

from datetime import datetime, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from salon_engines.aggregation import Dimension, aggregate_by
from salon_engines.cart import CartLine, CartState, compute_cart_totals
from salon_engines.commission import CommissionCalculator
from salon_kernel.domain.money import round_money
from salon_kernel.domain.records import (
    CustomerRef,
    DiscountType,
    LineItem,
    TherapistProfile,
    TherapistRef,
    TransactionRecord,
)

prices = st.decimals(min_value=Decimal("0"), max_value=Decimal("500"), places=2)
quantities = st.integers(min_value=1, max_value=5)
therapist_ids = st.sampled_from(["t-1", "t-2", "t-3"])
services = st.sampled_from(["Massage", "Facial", "Manicure", "Wax"])


@composite
def transactions(draw):
    items = draw(st.lists(
        st.builds(
            lambda name, price, qty: LineItem(name=name, category=name.lower(),
                                              unit_price=price, quantity=qty),
            services, prices, quantities,
        ),
        min_size=1,
        max_size=4,
    ))
    subtotal = sum((item.line_amount for item in items), Decimal("0"))
    discount = draw(st.decimals(min_value=Decimal("0"), max_value=subtotal, places=2))
    therapist_id = draw(therapist_ids)
    return TransactionRecord(
        date=datetime(2024, 3, 1) + timedelta(hours=draw(st.integers(0, 500))),
        customer=CustomerRef(id=draw(st.sampled_from(["c-1", "c-2"])), name="Customer"),
        therapist=TherapistRef(id=therapist_id, name=therapist_id),
        items=items,
        subtotal=subtotal,
        discount=discount,
        total=round_money(subtotal - discount),
        payment_method=draw(st.sampled_from(["cash", "card", "other"])),
    )


class TestAggregationProperties:

    @given(st.lists(transactions(), max_size=15))
    @settings(max_examples=60, deadline=None)
    def test_therapist_grouping_conserves_revenue(self, txns):
        groups = aggregate_by(txns, Dimension.THERAPIST)
        assert sum((g.total_amount for g in groups.values()), Decimal("0")) == sum(
            (t.total for t in txns), Decimal("0"),
        )
        assert sum(g.transaction_count for g in groups.values()) == len(txns)

    @given(st.lists(transactions(), max_size=15))
    @settings(max_examples=60, deadline=None)
    def test_service_grouping_close_to_revenue(self, txns):
        groups = aggregate_by(txns, Dimension.SERVICE)
        allocated = sum((g.total_amount for g in groups.values()), Decimal("0"))
        revenue = sum((t.total for t in txns), Decimal("0"))
        assert abs(allocated - revenue) < Decimal("0.01")


class TestCartProperties:

    @given(
        st.lists(st.tuples(prices, quantities), min_size=1, max_size=5),
        st.sampled_from([DiscountType.NONE, DiscountType.PERCENTAGE,
                         DiscountType.VOUCHER, DiscountType.CUSTOM]),
        st.sampled_from([5, 10, 20]),
        st.decimals(min_value=Decimal("0.01"), max_value=Decimal("5000"), places=2),
    )
    @settings(max_examples=100, deadline=None)
    def test_discount_bounds(self, lines, discount_type, pct, amount):
        state = CartState(
            lines=tuple(
                CartLine(item_id=f"i{n}", name=f"Item {n}", unit_price=price, quantity=qty)
                for n, (price, qty) in enumerate(lines)
            ),
            discount_type=discount_type,
            discount_percentage=pct,
            voucher_amount=amount,
            custom_amount=amount,
        )
        totals = compute_cart_totals(state)
        assert Decimal("0") <= totals.discount_amount <= totals.subtotal
        assert totals.total >= 0
        assert totals.total == round_money(totals.subtotal - totals.discount_amount)


class TestCommissionProperties:

    @given(
        st.decimals(min_value=Decimal("0"), max_value=Decimal("50000"), places=2),
        st.decimals(min_value=Decimal("0"), max_value=Decimal("200"), places=1),
        st.decimals(min_value=Decimal("0.01"), max_value=Decimal("50"), places=2),
        st.sampled_from(["employed", "self-employed"]),
    )
    @settings(max_examples=100, deadline=None)
    def test_shares_sum_to_revenue(self, revenue, hours, rate, employment_type):
        profile = TherapistProfile(
            id="t-1", name="T", employment_type=employment_type, hourly_rate=rate,
        )
        result = CommissionCalculator().calculate(profile=profile, revenue=revenue, hours=hours)
        assert result.therapist_share + result.salon_share == result.revenue
        assert result.commission >= 0
