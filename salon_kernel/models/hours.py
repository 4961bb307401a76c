"""
Hours ledger persistence (``salon_kernel.models.hours``).

One row per (therapist, day). The unique constraint is what makes the
ledger's upsert-by-key atomic at the database level; concurrent writers for
the same day resolve as last-write-wins.
"""

from decimal import Decimal

from sqlalchemy import Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from salon_kernel.db.base import TrackedBase


class HoursEntryModel(TrackedBase):
    """
    ORM model for ``HoursEntry``.

    Guarantees:
        - (therapist_id, work_date) is unique (uq_therapist_hours_day).
        - ``work_date`` is the zero-padded ``YYYY-MM-DD`` key, so string
          comparison in SQL gives chronological ranges.
        - No foreign key to ``therapists``: hours recorded for an id that
          later leaves the directory are kept and reported as "Unknown".
    """

    __tablename__ = "therapist_hours"

    therapist_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    work_date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    hours: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint("therapist_id", "work_date", name="uq_therapist_hours_day"),
    )

    def to_dto(self):
        from salon_kernel.domain.money import CENT
        from salon_kernel.domain.records import HoursEntry
        # Increment was checked on write; the configured one may have changed since.
        return HoursEntry(
            therapist_id=self.therapist_id,
            date=self.work_date,
            hours=self.hours,
            increment=CENT,
        )

    @classmethod
    def from_dto(cls, dto) -> "HoursEntryModel":
        return cls(
            therapist_id=dto.therapist_id,
            work_date=dto.date,
            hours=dto.hours,
        )
