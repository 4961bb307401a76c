"""
salon_services.commission_service -- Payroll split for a therapist and period.

Responsibility:
    Gather a therapist's profile, revenue and hours for a date range and
    hand them to the pure CommissionCalculator.

Architecture position:
    Services -- orchestration over TransactionStore, HoursLedger and
    StaffDirectory; the arithmetic lives in salon_engines.commission.

Invariants enforced:
    - Revenue is the sum of transaction totals in the inclusive range.
    - Hours come from the ledger over the same inclusive day range.

Failure modes:
    - TherapistNotFoundError when the id is not in the directory and
      ``unknown_therapist_policy`` is "fail" (the default).
    - With the "placeholder" policy, a zero-rate employed profile is used
      and ``commission_unknown_therapist`` is logged as a warning.
    - InvalidDateRangeError when start falls after end.

Usage:
    service = CommissionService(transactions, ledger, directory, config)
    result = service.calculate_commission("t1", date(2024, 3, 1), date(2024, 3, 31))
"""

from __future__ import annotations

from datetime import date, datetime

from salon_engines.commission import (
    CommissionCalculator,
    CommissionResult,
    revenue_from_transactions,
)
from salon_kernel.config import SalonConfig
from salon_kernel.domain.dates import DateRange
from salon_kernel.domain.records import TherapistProfile
from salon_kernel.exceptions import TherapistNotFoundError
from salon_kernel.logging_config import LogContext, get_logger
from salon_services.hours_ledger import HoursLedger
from salon_services.stores import StaffDirectory, TransactionFilter, TransactionStore

logger = get_logger("services.commission")


class CommissionService:
    """Compute commission results from stored transactions and hours."""

    def __init__(
        self,
        transactions: TransactionStore,
        ledger: HoursLedger,
        directory: StaffDirectory,
        config: SalonConfig | None = None,
    ):
        self._transactions = transactions
        self._ledger = ledger
        self._directory = directory
        self._config = config or SalonConfig.with_defaults()
        self._calculator = CommissionCalculator(self._config)

    def calculate_commission(
        self,
        therapist_id: str,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> CommissionResult:
        """
        Commission result for ``therapist_id`` over ``[start_date, end_date]``.

        Plain dates cover whole days; datetimes are used as given for the
        transaction range and reduced to their day for hours.
        """
        date_range = DateRange.coerce(start_date, end_date)
        with LogContext.bind(therapist_id=therapist_id):
            profile = self._resolve_profile(therapist_id)
            transactions = self._transactions.list_transactions(
                TransactionFilter(therapist_id=therapist_id, date_range=date_range),
            )
            revenue = revenue_from_transactions(transactions)
            hours = self._ledger.total_hours(therapist_id, start_date, end_date)

            logger.debug("commission_inputs_gathered", extra={
                "transaction_count": len(transactions),
                "revenue": str(revenue),
                "hours": str(hours),
                "start": date_range.start_key,
                "end": date_range.end_key,
            })
            return self._calculator.calculate(profile=profile, revenue=revenue, hours=hours)

    def payroll_report(
        self,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> list[CommissionResult]:
        """Commission results for every therapist in the directory, by name."""
        results = [
            self.calculate_commission(profile.id, start_date, end_date)
            for profile in self._directory.list_therapists()
            if profile.role == "therapist"
        ]
        logger.info("payroll_report_built", extra={
            "therapist_count": len(results),
        })
        return results

    def _resolve_profile(self, therapist_id: str) -> TherapistProfile:
        profile = self._directory.get_therapist(therapist_id)
        if profile is not None:
            return profile
        if self._config.unknown_therapist_policy == "placeholder":
            logger.warning("commission_unknown_therapist", extra={
                "policy": "placeholder",
            })
            return TherapistProfile.placeholder(therapist_id)
        logger.error("commission_unknown_therapist", extra={"policy": "fail"})
        raise TherapistNotFoundError(therapist_id)
