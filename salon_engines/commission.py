"""
Module: salon_engines.commission
Responsibility:
    Split a therapist's revenue for a period between therapist and salon,
    given their employment type, hourly rate and hours worked.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Inputs are gathered by salon_services.commission_service.

Invariants enforced:
    - Revenue is the sum of transaction totals, so the transaction-level
      discount is netted exactly once.
    - Employed: wage = hours * rate; holiday pay and employer NIC are rates
      of wage; commission is a rate of (revenue - costs), floored at zero.
    - Self-employed: fixed revenue share; wage-based lines are zero.
    - therapist_share + salon_share == revenue.
    - All arithmetic is full precision; currency fields are rounded once,
      ROUND_HALF_UP, when the result is built.

Failure modes:
    - InvalidAmountError if revenue or hours are not finite numbers.
    - ValidationError if revenue or hours are negative.

Usage:
    from salon_engines.commission import CommissionCalculator

    result = CommissionCalculator(config).calculate(
        profile=profile, revenue=Decimal("500"), hours=Decimal("20"),
    )
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from decimal import Decimal

from salon_engines.tracer import traced_engine
from salon_kernel.config import SalonConfig
from salon_kernel.domain.money import ZERO, round_money, to_decimal
from salon_kernel.domain.records import EmploymentType, TherapistProfile, TransactionRecord
from salon_kernel.exceptions import ValidationError
from salon_kernel.logging_config import get_logger

logger = get_logger("engines.commission")

_CURRENCY_FIELDS = (
    "revenue",
    "wage",
    "holiday_pay",
    "employer_nic",
    "commission",
    "therapist_share",
    "salon_share",
)


@dataclass(frozen=True)
class CommissionResult:
    """
    Payroll split for one therapist over one period.

    Guarantees:
        - ``therapist_share + salon_share == revenue``.
        - For self-employed therapists wage, holiday_pay, employer_nic and
          commission are zero.
    """

    therapist_id: str
    therapist_name: str
    employment_type: EmploymentType
    revenue: Decimal
    hours: Decimal
    wage: Decimal
    holiday_pay: Decimal
    employer_nic: Decimal
    commission: Decimal
    therapist_share: Decimal
    salon_share: Decimal

    def rounded(self) -> CommissionResult:
        """
        Copy with every currency field rounded to cents; hours untouched.

        ``salon_share`` is taken as rounded revenue minus rounded therapist
        share so the two shares still add up to revenue to the cent.
        """
        values = {name: round_money(getattr(self, name)) for name in _CURRENCY_FIELDS}
        values["salon_share"] = values["revenue"] - values["therapist_share"]
        return replace(self, **values)

    @property
    def costs(self) -> Decimal:
        return self.wage + self.holiday_pay + self.employer_nic


def revenue_from_transactions(transactions: Iterable[TransactionRecord]) -> Decimal:
    """Sum of ``subtotal - discount`` across transactions, i.e. of ``total``."""
    return sum((txn.total for txn in transactions), ZERO)


class CommissionCalculator:
    """
    Compute therapist/salon revenue splits.

    Contract:
        Pure; the same profile, revenue and hours always give the same
        result.
    Non-goals:
        - Does not look up transactions or hours; see CommissionService.
    """

    def __init__(self, config: SalonConfig | None = None):
        self._config = config or SalonConfig.with_defaults()

    @property
    def config(self) -> SalonConfig:
        return self._config

    @traced_engine("commission", "1.0", fingerprint_fields=("revenue", "hours"))
    def calculate(
        self,
        *,
        profile: TherapistProfile,
        revenue: Decimal,
        hours: Decimal,
    ) -> CommissionResult:
        """
        Split ``revenue`` for ``profile`` given ``hours`` worked.

        Returns:
            CommissionResult with currency fields rounded to cents.
        """
        revenue = to_decimal(revenue, "revenue")
        hours = to_decimal(hours, "hours")
        if revenue < ZERO:
            raise ValidationError("revenue cannot be negative", "revenue", revenue)
        if hours < ZERO:
            raise ValidationError("hours cannot be negative", "hours", hours)

        if profile.employment_type == EmploymentType.SELF_EMPLOYED:
            result = self._self_employed(profile, revenue, hours)
        else:
            result = self._employed(profile, revenue, hours)

        logger.info("commission_calculated", extra={
            "therapist_id": profile.id,
            "employment_type": profile.employment_type.value,
            "revenue": str(result.revenue),
            "hours": str(hours),
            "therapist_share": str(result.therapist_share),
            "salon_share": str(result.salon_share),
        })
        return result

    def _employed(
        self, profile: TherapistProfile, revenue: Decimal, hours: Decimal,
    ) -> CommissionResult:
        cfg = self._config
        wage = hours * profile.hourly_rate
        holiday_pay = wage * cfg.holiday_pay_rate
        employer_nic = wage * cfg.employer_nic_rate
        costs = wage + holiday_pay + employer_nic
        commission = max(ZERO, (revenue - costs) * cfg.commission_rate)

        # Employer NIC is a cost to the salon, reported on its own line; it
        # is not paid to the therapist and so is not part of therapist_share.
        therapist_share = wage + holiday_pay + commission
        salon_share = revenue - therapist_share

        return CommissionResult(
            therapist_id=profile.id,
            therapist_name=profile.name,
            employment_type=profile.employment_type,
            revenue=revenue,
            hours=hours,
            wage=wage,
            holiday_pay=holiday_pay,
            employer_nic=employer_nic,
            commission=commission,
            therapist_share=therapist_share,
            salon_share=salon_share,
        ).rounded()

    def _self_employed(
        self, profile: TherapistProfile, revenue: Decimal, hours: Decimal,
    ) -> CommissionResult:
        therapist_share = revenue * self._config.self_employed_share_rate
        return CommissionResult(
            therapist_id=profile.id,
            therapist_name=profile.name,
            employment_type=profile.employment_type,
            revenue=revenue,
            hours=hours,
            wage=ZERO,
            holiday_pay=ZERO,
            employer_nic=ZERO,
            commission=ZERO,
            therapist_share=therapist_share,
            salon_share=revenue - therapist_share,
        ).rounded()
