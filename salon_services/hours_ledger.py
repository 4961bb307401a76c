"""
salon_services.hours_ledger -- Hours worked per therapist per day.

Responsibility:
    Record hours (one entry per therapist per day, replaced on re-entry),
    sum them over inclusive day ranges, and list them per therapist with
    display names from the staff directory.

Architecture position:
    Services -- orchestration over HoursStore and StaffDirectory.

Invariants enforced:
    - Hours lie in [0, 24] and are multiples of ``SalonConfig.hours_increment``.
    - Upsert semantics: a second entry for the same (therapist, day)
      replaces the first; hours are never summed on write.
    - Range bounds compare as ``YYYY-MM-DD`` keys, inclusive at both ends.

Failure modes:
    - InvalidHoursError on out-of-range or off-increment hours; nothing is
      written.
    - ValidationError on an unparseable date.
    - Hours for an id missing from the directory are reported under
      "Unknown" and logged as ``hours_unknown_therapist``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from salon_kernel.config import SalonConfig
from salon_kernel.domain.dates import day_key
from salon_kernel.domain.money import ZERO
from salon_kernel.domain.records import HoursEntry
from salon_kernel.logging_config import get_logger
from salon_services.stores import HoursFilter, HoursStore, StaffDirectory

logger = get_logger("services.hours_ledger")

DateLike = date | datetime | str


@dataclass(frozen=True)
class TherapistHours:
    therapist_id: str
    name: str
    hours: Decimal


class HoursLedger:
    """
    Hours ledger over an HoursStore.

    Contract:
        ``upsert_hours`` validates before writing; the store sees only valid
        entries.
    Non-goals:
        - Does not check the therapist id against the directory on write;
          hours may be recorded before a profile exists.
    """

    def __init__(
        self,
        store: HoursStore,
        directory: StaffDirectory,
        config: SalonConfig | None = None,
    ):
        self._store = store
        self._directory = directory
        self._config = config or SalonConfig.with_defaults()

    def upsert_hours(self, therapist_id: str, work_date: DateLike, hours) -> HoursEntry:
        """
        Set the hours for ``therapist_id`` on ``work_date``.

        Raises:
            InvalidHoursError: hours outside [0, 24] or off-increment.
        """
        entry = HoursEntry(
            therapist_id=therapist_id,
            date=work_date,
            hours=hours,
            increment=self._config.hours_increment,
        )
        saved = self._store.upsert_hours(entry)
        logger.info("hours_upserted", extra={
            "therapist_id": therapist_id,
            "work_date": entry.date,
            "hours": str(entry.hours),
        })
        return saved

    def entries_in_range(
        self,
        start_date: DateLike,
        end_date: DateLike,
        therapist_id: str | None = None,
    ) -> list[HoursEntry]:
        """Entries with ``start_date <= date <= end_date``, ordered by day."""
        return self._store.get_hours(HoursFilter(
            therapist_id=therapist_id,
            start_key=day_key(start_date),
            end_key=day_key(end_date),
        ))

    def total_hours(self, therapist_id: str, start_date: DateLike, end_date: DateLike) -> Decimal:
        """Summed hours for one therapist over an inclusive day range."""
        entries = self.entries_in_range(start_date, end_date, therapist_id=therapist_id)
        return sum((e.hours for e in entries), ZERO)

    def hours_by_therapist_in_range(
        self, start_date: DateLike, end_date: DateLike,
    ) -> list[TherapistHours]:
        """
        Summed hours for every therapist with an entry in range.

        Ordered by first appearance in the range (earliest day first).
        """
        totals: dict[str, Decimal] = {}
        for entry in self.entries_in_range(start_date, end_date):
            totals[entry.therapist_id] = totals.get(entry.therapist_id, ZERO) + entry.hours

        result = []
        for therapist_id, hours in totals.items():
            profile = self._directory.get_therapist(therapist_id)
            if profile is None:
                logger.warning("hours_unknown_therapist", extra={
                    "therapist_id": therapist_id,
                    "hours": str(hours),
                })
                name = "Unknown"
            else:
                name = profile.name
            result.append(TherapistHours(therapist_id=therapist_id, name=name, hours=hours))
        return result
