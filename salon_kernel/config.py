"""
Salon Configuration Schema.

Defines the structure and defaults for payroll rates, discount options and
data-quality policies. Actual values may be loaded from a YAML file at
runtime:

    config = SalonConfig.from_yaml("salon.yaml")

or, when ``SALON_CONFIG`` names a file, through ``load_config()``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Self

import yaml

from salon_kernel.logging_config import get_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "SALON_CONFIG"

VALID_UNKNOWN_THERAPIST_POLICIES = {"fail", "placeholder"}

_DECIMAL_FIELDS = (
    "holiday_pay_rate",
    "employer_nic_rate",
    "commission_rate",
    "self_employed_share_rate",
    "hours_increment",
)


@dataclass
class SalonConfig:
    """
    Configuration schema for the salon core.

    Field defaults reproduce the rates the salon runs with today:
    12% holiday pay, 13.8% employer NIC, 10% commission above costs for
    employed staff and a 40/60 revenue split for self-employed staff.
    """

    # Employed therapists
    holiday_pay_rate: Decimal = Decimal("0.12")
    employer_nic_rate: Decimal = Decimal("0.138")
    commission_rate: Decimal = Decimal("0.10")

    # Self-employed therapists keep this share of revenue
    self_employed_share_rate: Decimal = Decimal("0.40")

    # Checkout
    discount_percentages: tuple[int, ...] = field(default_factory=lambda: (5, 10, 20))

    # Hours ledger
    hours_increment: Decimal = Decimal("0.5")

    # "fail" raises TherapistNotFoundError; "placeholder" substitutes a
    # zero-rate employed profile and logs a warning.
    unknown_therapist_policy: str = "fail"

    def __post_init__(self):
        for name in _DECIMAL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                setattr(self, name, Decimal(str(value)))
        self.discount_percentages = tuple(int(p) for p in self.discount_percentages)

        for name in ("holiday_pay_rate", "employer_nic_rate", "commission_rate",
                     "self_employed_share_rate"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} cannot be negative")
            if value > 1:
                raise ValueError(f"{name} cannot exceed 1 (100%)")

        if not self.discount_percentages:
            raise ValueError("discount_percentages cannot be empty")
        for pct in self.discount_percentages:
            if pct <= 0 or pct > 100:
                raise ValueError(f"discount percentage must be in (0, 100], got {pct}")

        if self.hours_increment <= 0:
            raise ValueError("hours_increment must be positive")
        if self.hours_increment > 24:
            raise ValueError("hours_increment cannot exceed 24")

        if self.unknown_therapist_policy not in VALID_UNKNOWN_THERAPIST_POLICIES:
            raise ValueError(
                f"unknown_therapist_policy must be one of {VALID_UNKNOWN_THERAPIST_POLICIES}, "
                f"got '{self.unknown_therapist_policy}'"
            )

        logger.debug(
            "salon_config_initialized",
            extra={
                "holiday_pay_rate": str(self.holiday_pay_rate),
                "employer_nic_rate": str(self.employer_nic_rate),
                "commission_rate": str(self.commission_rate),
                "self_employed_share_rate": str(self.self_employed_share_rate),
                "discount_percentages": list(self.discount_percentages),
                "unknown_therapist_policy": self.unknown_therapist_policy,
            },
        )

    @property
    def salon_share_rate(self) -> Decimal:
        """Salon's share of self-employed revenue."""
        return Decimal("1") - self.self_employed_share_rate

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the standard rates."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from a dictionary (e.g., parsed from YAML)."""
        logger.info(
            "salon_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        data = dict(data)
        if "discount_percentages" in data:
            data["discount_percentages"] = tuple(data["discount_percentages"])
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """
        Load config from a YAML mapping.

        Raises:
            FileNotFoundError: if the file does not exist.
            yaml.YAMLError: if the file contains invalid YAML.
            ValueError: if the document is not a mapping or fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        logger.info("salon_config_loaded", extra={"path": str(path)})
        return cls.from_dict(data)


def load_config(path: str | Path | None = None) -> SalonConfig:
    """
    Resolve the active configuration.

    Uses ``path`` when given, else the file named by ``SALON_CONFIG``, else
    the defaults.
    """
    source = path or os.environ.get(CONFIG_ENV_VAR)
    if source:
        return SalonConfig.from_yaml(source)
    return SalonConfig.with_defaults()
