"""
Tests for the aggregation engine.

Covers:
- Therapist/customer grouping over discounted totals
- Service/category grouping with proportional discount allocation
- Distinct transaction counts and quantities
- Ranking stability
- Filters, summaries, daily totals, payment splits, line breakdown
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from salon_engines.aggregation import (
    Dimension,
    GroupTotal,
    aggregate,
    aggregate_by,
    aggregate_by_day,
    discount_ratio,
    filter_transactions,
    line_breakdown,
    payment_breakdown,
    ranked,
    summarize,
    top_customers,
    unique_values,
)
from salon_kernel.domain.dates import DateRange
from salon_kernel.domain.records import PaymentMethod


@pytest.fixture
def sales(make_transaction):
    return [
        make_transaction(
            therapist=("t-alice", "Alice"),
            customer=("c-1", "Carol"),
            items=[("Massage", "body", "60", 1), ("Facial", "face", "40", 1)],
            discount="10",
            when=datetime(2024, 3, 1, 10, 0),
            payment_method="card",
        ),
        make_transaction(
            therapist=("t-bea", "Bea"),
            customer=("c-2", "Dan"),
            items=[("Facial", "face", "40", 2)],
            when=datetime(2024, 3, 2, 11, 0),
        ),
        make_transaction(
            therapist=("t-alice", "Alice"),
            customer=("c-2", "Dan"),
            items=[("Massage", "body", "60", 1)],
            when=datetime(2024, 3, 2, 15, 0),
        ),
    ]


class TestAggregateByTherapist:

    def test_uses_discounted_total(self, sales):
        groups = aggregate_by(sales, Dimension.THERAPIST)
        alice = groups["t-alice"]
        assert alice.label == "Alice"
        assert alice.total_amount == Decimal("150")  # 90 + 60, discount taken once
        assert alice.transaction_count == 2
        assert alice.quantity == 3

    def test_revenue_conserved(self, sales):
        groups = aggregate_by(sales, "therapist")
        assert sum(g.total_amount for g in groups.values()) == sum(t.total for t in sales)

    def test_empty_input(self):
        assert aggregate_by([], Dimension.THERAPIST) == {}


class TestAggregateByCustomer:

    def test_groups_by_customer_id(self, sales):
        groups = aggregate_by(sales, Dimension.CUSTOMER)
        assert groups["c-2"].total_amount == Decimal("140")
        assert groups["c-2"].label == "Dan"
        assert groups["c-1"].total_amount == Decimal("90")


class TestAggregateByService:

    def test_discount_allocated_proportionally(self, sales):
        groups = aggregate_by(sales, Dimension.SERVICE)
        # First sale: ratio 10 / 100; massage 60 - 6, facial 40 - 4
        assert groups["Massage"].total_amount == Decimal("114")
        assert groups["Facial"].total_amount == Decimal("116")

    def test_counts_transactions_and_quantity(self, sales):
        facial = aggregate_by(sales, Dimension.SERVICE)["Facial"]
        assert facial.transaction_count == 2
        assert facial.quantity == 3

    def test_service_totals_match_transaction_totals(self, sales):
        groups = aggregate_by(sales, Dimension.SERVICE)
        assert sum(g.total_amount for g in groups.values()) == sum(t.total for t in sales)

    def test_zero_items_total_means_zero_ratio(self, make_transaction):
        txn = make_transaction(items=[("Consultation", "other", "0", 1)])
        assert discount_ratio(txn) == 0
        groups = aggregate_by([txn], Dimension.SERVICE)
        assert groups["Consultation"].total_amount == 0


class TestAggregateByCategory:

    def test_uses_allocation(self, sales):
        groups = aggregate_by(sales, Dimension.CATEGORY)
        assert groups["body"].total_amount == Decimal("114")
        assert groups["face"].total_amount == Decimal("116")

    def test_display_amount_rounds_once(self, make_transaction):
        txn = make_transaction(
            items=[("A", "x", "10", 1), ("B", "y", "10", 1), ("C", "z", "10", 1)],
            discount="10",
        )
        groups = aggregate_by([txn], Dimension.CATEGORY)
        assert groups["x"].display_amount == Decimal("6.67")
        assert groups["x"].total_amount != Decimal("6.67")


class TestGenericAggregate:

    def test_custom_key_and_value(self):
        rows = [("a", Decimal("1")), ("b", Decimal("2")), ("a", Decimal("3"))]
        groups = aggregate(rows, key_fn=lambda r: r[0], value_fn=lambda r: r[1])
        assert groups["a"].total_amount == Decimal("4")
        assert groups["a"].transaction_count == 2
        assert list(groups) == ["a", "b"]


class TestRanked:

    def test_descending_and_stable(self):
        groups = {
            "a": GroupTotal("a", "A", Decimal("10"), 1, 1),
            "b": GroupTotal("b", "B", Decimal("30"), 1, 1),
            "c": GroupTotal("c", "C", Decimal("10"), 1, 1),
        }
        assert [g.key for g in ranked(groups)] == ["b", "a", "c"]


class TestFiltersAndSummaries:

    def test_filter_by_range_is_inclusive(self, sales):
        rng = DateRange.from_dates(date(2024, 3, 2), date(2024, 3, 2))
        assert len(filter_transactions(sales, date_range=rng)) == 2

    def test_filter_by_therapist_and_customer(self, sales):
        assert len(filter_transactions(sales, therapist_id="t-alice", customer_id="c-2")) == 1

    def test_summarize(self, sales):
        summary = summarize(sales)
        assert summary.total == Decimal("230.00")
        assert summary.subtotal == Decimal("240.00")
        assert summary.discount == Decimal("10.00")
        assert summary.transaction_count == 3
        assert summary.average_transaction == Decimal("76.67")

    def test_summarize_empty(self):
        summary = summarize([])
        assert summary.total == 0
        assert summary.average_transaction == 0

    def test_daily_totals(self, sales):
        days = aggregate_by_day(list(reversed(sales)))
        assert list(days) == ["2024-03-01", "2024-03-02"]
        assert days["2024-03-02"].total_amount == Decimal("140")

    def test_payment_breakdown(self, sales):
        split = payment_breakdown(sales, Dimension.THERAPIST)
        assert split["t-alice"][PaymentMethod.CARD] == Decimal("90")
        assert split["t-alice"][PaymentMethod.CASH] == Decimal("60")
        assert split["t-bea"][PaymentMethod.OTHER] == 0

    def test_payment_breakdown_rejects_item_dimensions(self, sales):
        with pytest.raises(ValueError):
            payment_breakdown(sales, Dimension.SERVICE)

    def test_line_breakdown(self, sales):
        rows = line_breakdown(sales[:1])
        assert [(r.service, r.amount, r.discount, r.total) for r in rows] == [
            ("Massage", Decimal("60.00"), Decimal("6.00"), Decimal("54.00")),
            ("Facial", Decimal("40.00"), Decimal("4.00"), Decimal("36.00")),
        ]

    def test_top_customers(self, sales):
        top = top_customers(sales, "t-alice", limit=1)
        assert [g.label for g in top] == ["Carol"]

    def test_unique_values(self, sales):
        assert unique_values(sales, Dimension.SERVICE) == ["Facial", "Massage"]
        assert unique_values(sales, "therapist") == ["Alice", "Bea"]


class TestTracing:

    def test_fingerprint_ignores_call_style(self, sales, captured_logs):
        aggregate_by(sales, Dimension.SERVICE)
        aggregate_by(sales, dimension=Dimension.SERVICE)
        aggregate_by(sales, Dimension.THERAPIST)
        traces = [r for r in captured_logs()
                  if r["message"] == "SALON_ENGINE_TRACE" and r["engine_name"] == "aggregation"]
        prints = [t["input_fingerprint"] for t in traces]
        assert len(prints) == 3
        assert prints[0] == prints[1] != prints[2]
