"""
salon_services.reporting_service -- Read side for the reporting screens.

Responsibility:
    Load transactions for a range from the TransactionStore and shape them
    with the aggregation engine: headline summary, ranked sales tables,
    daily totals, payment splits and per-therapist top customers.

Architecture position:
    Services -- read-only orchestration; never writes to a store.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from salon_engines.aggregation import (
    Dimension,
    GroupTotal,
    LineBreakdown,
    RevenueSummary,
    aggregate_by,
    aggregate_by_day,
    line_breakdown,
    payment_breakdown,
    ranked,
    summarize,
    top_customers,
    unique_values,
)
from salon_kernel.domain.dates import DateRange
from salon_kernel.domain.records import PaymentMethod, TransactionRecord
from salon_kernel.logging_config import get_logger
from salon_services.stores import TransactionFilter, TransactionStore

logger = get_logger("services.reporting")


@dataclass(frozen=True)
class SalesTables:
    """Ranked groups for the sales report, highest total first."""

    therapists: list[GroupTotal]
    customers: list[GroupTotal]
    services: list[GroupTotal]
    categories: list[GroupTotal]


class ReportingService:
    """Revenue reports over a TransactionStore."""

    def __init__(self, store: TransactionStore):
        self._store = store

    def _load(
        self,
        date_range: DateRange | None = None,
        therapist_id: str | None = None,
    ) -> list[TransactionRecord]:
        return self._store.list_transactions(
            TransactionFilter(therapist_id=therapist_id, date_range=date_range),
        )

    def summary(self, date_range: DateRange | None = None) -> RevenueSummary:
        return summarize(self._load(date_range))

    def sales_tables(self, date_range: DateRange | None = None) -> SalesTables:
        transactions = self._load(date_range)
        tables = SalesTables(
            therapists=ranked(aggregate_by(transactions, Dimension.THERAPIST)),
            customers=ranked(aggregate_by(transactions, Dimension.CUSTOMER)),
            services=ranked(aggregate_by(transactions, Dimension.SERVICE)),
            categories=ranked(aggregate_by(transactions, Dimension.CATEGORY)),
        )
        logger.info("sales_tables_built", extra={
            "transaction_count": len(transactions),
            "start": date_range.start_key if date_range else None,
            "end": date_range.end_key if date_range else None,
        })
        return tables

    def daily_totals(self, date_range: DateRange | None = None) -> list[GroupTotal]:
        """One group per day with sales, oldest first."""
        return list(aggregate_by_day(self._load(date_range)).values())

    def payment_split(
        self,
        date_range: DateRange | None = None,
        dimension: Dimension | str = Dimension.THERAPIST,
    ) -> dict[str, dict[PaymentMethod, Decimal]]:
        return payment_breakdown(self._load(date_range), dimension)

    def line_items(self, date_range: DateRange | None = None) -> list[LineBreakdown]:
        return line_breakdown(self._load(date_range))

    def top_customers_for_therapist(
        self,
        therapist_id: str,
        limit: int = 10,
        date_range: DateRange | None = None,
    ) -> list[GroupTotal]:
        return top_customers(self._load(date_range, therapist_id), therapist_id, limit)

    def unique_values(self, dimension: Dimension | str) -> list[str]:
        """Distinct therapist names, customer names, services or categories on record."""
        return unique_values(self._load(), dimension)
