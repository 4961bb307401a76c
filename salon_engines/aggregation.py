"""
Module: salon_engines.aggregation
Responsibility:
    Group and total transaction lists for the reporting screens: by
    therapist, customer, service or category, by day, and by payment method.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import salon_kernel (domain, exceptions, logging).

Invariants enforced:
    - One generic reducer (``aggregate``) backs every dimension.
    - Therapist and customer groups sum the transaction's already-discounted
      ``total``; the transaction-level discount is never subtracted twice.
    - Service and category groups allocate the transaction-level discount
      across items in proportion to each item's gross amount; the ratio is
      zero when the items total is zero.
    - Revenue is conserved: the therapist groups sum to the sum of totals.
    - Accumulation is full precision; rounding happens only for display.
    - Ranking is descending by total, stable for ties (insertion order).

Failure modes:
    - ValueError on an unsupported dimension for a transaction-level
      breakdown.

Usage:
    from salon_engines.aggregation import Dimension, aggregate_by, ranked

    groups = aggregate_by(transactions, Dimension.THERAPIST)
    for group in ranked(groups):
        print(group.label, group.display_amount)
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TypeVar

from salon_engines.tracer import traced_engine
from salon_kernel.domain.dates import DateRange, day_key
from salon_kernel.domain.money import ZERO, round_money
from salon_kernel.domain.records import LineItem, PaymentMethod, TransactionRecord
from salon_kernel.logging_config import get_logger

logger = get_logger("engines.aggregation")

T = TypeVar("T")

UNKNOWN_LABEL = "Unknown"


class Dimension(str, Enum):
    """Grouping dimension for revenue reports."""

    THERAPIST = "therapist"
    CUSTOMER = "customer"
    SERVICE = "service"
    CATEGORY = "category"


@dataclass(frozen=True)
class GroupTotal:
    """
    Totals for one group.

    ``transaction_count`` counts distinct transactions contributing to the
    group; ``quantity`` counts units sold.
    """

    key: str
    label: str
    total_amount: Decimal
    transaction_count: int
    quantity: int

    @property
    def display_amount(self) -> Decimal:
        return round_money(self.total_amount)


@dataclass(frozen=True)
class ItemShare:
    """A line item together with its share of the transaction discount."""

    transaction: TransactionRecord
    source: int
    item: LineItem
    allocated_discount: Decimal

    @property
    def gross(self) -> Decimal:
        return self.item.line_amount

    @property
    def net(self) -> Decimal:
        return self.item.line_amount - self.item.line_discount - self.allocated_discount


@dataclass(frozen=True)
class RevenueSummary:
    """Headline figures for a set of transactions, rounded to cents."""

    total: Decimal
    subtotal: Decimal
    discount: Decimal
    transaction_count: int
    average_transaction: Decimal


@dataclass(frozen=True)
class LineBreakdown:
    """One item line of a transaction with its allocated discount."""

    transaction_id: str | None
    date: datetime
    customer_name: str
    therapist_name: str
    service: str
    category: str
    amount: Decimal
    discount: Decimal
    total: Decimal
    payment_method: PaymentMethod


@dataclass
class _Accumulator:
    label: str
    total: Decimal = ZERO
    count: int = 0
    quantity: int = 0
    sources: set = field(default_factory=set)


# ---------------------------------------------------------------------------
# Generic reducer
# ---------------------------------------------------------------------------


def aggregate(
    records: Iterable[T],
    key_fn: Callable[[T], str],
    value_fn: Callable[[T], Decimal],
    *,
    label_fn: Callable[[T], str] | None = None,
    quantity_fn: Callable[[T], int] | None = None,
    source_fn: Callable[[T], Hashable] | None = None,
) -> dict[str, GroupTotal]:
    """
    Reduce ``records`` into per-key totals.

    Args:
        records: Any iterable of records.
        key_fn: Group key for a record.
        value_fn: Amount the record contributes.
        label_fn: Display label; the first label seen for a key wins.
            Defaults to the key.
        quantity_fn: Units the record contributes (default 0).
        source_fn: Identity of the originating transaction. When given,
            ``transaction_count`` counts distinct sources; otherwise every
            record counts once.

    Returns:
        Insertion-ordered mapping of key to ``GroupTotal``.
    """
    groups: dict[str, _Accumulator] = {}
    for record in records:
        key = key_fn(record)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = _Accumulator(label=label_fn(record) if label_fn else key)
        acc.total += value_fn(record)
        if quantity_fn is not None:
            acc.quantity += quantity_fn(record)
        if source_fn is not None:
            acc.sources.add(source_fn(record))
        else:
            acc.count += 1

    return {
        key: GroupTotal(
            key=key,
            label=acc.label,
            total_amount=acc.total,
            transaction_count=len(acc.sources) if source_fn is not None else acc.count,
            quantity=acc.quantity,
        )
        for key, acc in groups.items()
    }


def ranked(groups: Mapping[str, GroupTotal] | Iterable[GroupTotal]) -> list[GroupTotal]:
    """Groups sorted by total descending; ties keep insertion order."""
    values = groups.values() if isinstance(groups, Mapping) else groups
    return sorted(values, key=lambda g: g.total_amount, reverse=True)


# ---------------------------------------------------------------------------
# Discount allocation
# ---------------------------------------------------------------------------


def discount_ratio(transaction: TransactionRecord) -> Decimal:
    """Transaction discount per unit of gross item amount (0 if no items total)."""
    items_total = transaction.items_total
    if items_total == ZERO:
        return ZERO
    return transaction.discount / items_total


def item_shares(transactions: Sequence[TransactionRecord]) -> list[ItemShare]:
    """Flatten transactions into items carrying their allocated discount."""
    shares: list[ItemShare] = []
    for source, txn in enumerate(transactions):
        ratio = discount_ratio(txn)
        for item in txn.items:
            shares.append(
                ItemShare(
                    transaction=txn,
                    source=source,
                    item=item,
                    allocated_discount=item.line_amount * ratio,
                )
            )
    return shares


# ---------------------------------------------------------------------------
# Dimension instantiations
# ---------------------------------------------------------------------------


@traced_engine("aggregation", "1.0", fingerprint_fields=("dimension",))
def aggregate_by(
    transactions: Sequence[TransactionRecord],
    dimension: Dimension | str,
) -> dict[str, GroupTotal]:
    """
    Group transactions along ``dimension``.

    Postconditions:
        - Therapist/customer totals sum ``transaction.total``.
        - Service/category totals sum ``line_amount - line_discount -
          allocated transaction discount``.
        - Empty input returns an empty mapping.
    """
    dimension = Dimension(dimension)
    transactions = list(transactions)

    match dimension:
        case Dimension.THERAPIST:
            groups = aggregate(
                transactions,
                key_fn=lambda t: t.therapist.id or UNKNOWN_LABEL,
                value_fn=lambda t: t.total,
                label_fn=lambda t: t.therapist.name or UNKNOWN_LABEL,
                quantity_fn=lambda t: t.item_quantity,
            )
        case Dimension.CUSTOMER:
            groups = aggregate(
                transactions,
                key_fn=lambda t: t.customer.id or UNKNOWN_LABEL,
                value_fn=lambda t: t.total,
                label_fn=lambda t: t.customer.name or UNKNOWN_LABEL,
                quantity_fn=lambda t: t.item_quantity,
            )
        case Dimension.SERVICE:
            groups = aggregate(
                item_shares(transactions),
                key_fn=lambda s: s.item.name,
                value_fn=lambda s: s.net,
                quantity_fn=lambda s: s.item.quantity,
                source_fn=lambda s: s.source,
            )
        case Dimension.CATEGORY:
            groups = aggregate(
                item_shares(transactions),
                key_fn=lambda s: s.item.category or "unknown",
                value_fn=lambda s: s.net,
                quantity_fn=lambda s: s.item.quantity,
                source_fn=lambda s: s.source,
            )

    logger.debug("aggregation_completed", extra={
        "dimension": dimension.value,
        "transaction_count": len(transactions),
        "group_count": len(groups),
    })
    return groups


def aggregate_by_day(transactions: Sequence[TransactionRecord]) -> dict[str, GroupTotal]:
    """Daily totals keyed by ``YYYY-MM-DD``, in chronological order."""
    ordered = sorted(transactions, key=lambda t: t.date)
    return aggregate(
        ordered,
        key_fn=lambda t: day_key(t.date),
        value_fn=lambda t: t.total,
        quantity_fn=lambda t: t.item_quantity,
    )


def payment_breakdown(
    transactions: Sequence[TransactionRecord],
    dimension: Dimension | str = Dimension.THERAPIST,
) -> dict[str, dict[PaymentMethod, Decimal]]:
    """
    Per-group totals split by payment method.

    Only transaction-level dimensions (therapist, customer) are supported.
    """
    dimension = Dimension(dimension)
    if dimension not in (Dimension.THERAPIST, Dimension.CUSTOMER):
        raise ValueError(f"Payment breakdown is not defined for dimension: {dimension.value}")

    result: dict[str, dict[PaymentMethod, Decimal]] = {}
    for txn in transactions:
        party = txn.therapist if dimension == Dimension.THERAPIST else txn.customer
        key = party.id or UNKNOWN_LABEL
        split = result.setdefault(key, {method: ZERO for method in PaymentMethod})
        split[txn.payment_method] += txn.total
    return result


# ---------------------------------------------------------------------------
# Filters and summaries
# ---------------------------------------------------------------------------


def filter_transactions(
    transactions: Iterable[TransactionRecord],
    *,
    therapist_id: str | None = None,
    customer_id: str | None = None,
    date_range: DateRange | None = None,
) -> list[TransactionRecord]:
    """Transactions matching every supplied criterion (range is inclusive)."""
    return [
        txn
        for txn in transactions
        if (therapist_id is None or txn.therapist.id == therapist_id)
        and (customer_id is None or txn.customer.id == customer_id)
        and (date_range is None or date_range.contains(txn.date))
    ]


def summarize(transactions: Sequence[TransactionRecord]) -> RevenueSummary:
    """Totals across all transactions; zeroed for empty input."""
    total = sum((t.total for t in transactions), ZERO)
    subtotal = sum((t.subtotal for t in transactions), ZERO)
    discount = sum((t.discount for t in transactions), ZERO)
    count = len(transactions)
    average = total / count if count else ZERO
    return RevenueSummary(
        total=round_money(total),
        subtotal=round_money(subtotal),
        discount=round_money(discount),
        transaction_count=count,
        average_transaction=round_money(average),
    )


def line_breakdown(transactions: Sequence[TransactionRecord]) -> list[LineBreakdown]:
    """One row per item line, discount allocated proportionally and rounded."""
    return [
        LineBreakdown(
            transaction_id=share.transaction.id,
            date=share.transaction.date,
            customer_name=share.transaction.customer.name,
            therapist_name=share.transaction.therapist.name,
            service=share.item.name,
            category=share.item.category,
            amount=round_money(share.gross),
            discount=round_money(share.allocated_discount + share.item.line_discount),
            total=round_money(share.net),
            payment_method=share.transaction.payment_method,
        )
        for share in item_shares(transactions)
    ]


def top_customers(
    transactions: Sequence[TransactionRecord],
    therapist_id: str,
    limit: int = 10,
) -> list[GroupTotal]:
    """Highest-spending customers of one therapist."""
    mine = filter_transactions(transactions, therapist_id=therapist_id)
    return ranked(aggregate_by(mine, Dimension.CUSTOMER))[:limit]


def unique_values(
    transactions: Sequence[TransactionRecord],
    dimension: Dimension | str,
) -> list[str]:
    """Sorted distinct labels seen along ``dimension``."""
    dimension = Dimension(dimension)
    match dimension:
        case Dimension.THERAPIST:
            values = {t.therapist.name for t in transactions}
        case Dimension.CUSTOMER:
            values = {t.customer.name for t in transactions}
        case Dimension.SERVICE:
            values = {item.name for t in transactions for item in t.items}
        case Dimension.CATEGORY:
            values = {item.category for t in transactions for item in t.items}
    return sorted(values)
