"""Staff directory persistence (``salon_kernel.models.therapist``)."""

from decimal import Decimal

from sqlalchemy import Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from salon_kernel.db.base import TrackedBase


class TherapistModel(TrackedBase):
    """
    ORM model for ``TherapistProfile``.

    Guarantees:
        - ``employment_type`` stores the enum .value string.
        - ``hourly_rate`` is Decimal (Numeric(10, 2)).
    """

    __tablename__ = "therapists"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    employment_type: Mapped[str] = mapped_column(String(32), nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="therapist")

    __table_args__ = (
        Index("idx_therapists_role", "role"),
    )

    def to_dto(self):
        from salon_kernel.domain.records import EmploymentType, TherapistProfile
        return TherapistProfile(
            id=self.id,
            name=self.name,
            employment_type=EmploymentType(self.employment_type),
            hourly_rate=self.hourly_rate,
            role=self.role,
        )

    @classmethod
    def from_dto(cls, dto) -> "TherapistModel":
        return cls(
            id=dto.id,
            name=dto.name,
            employment_type=dto.employment_type.value,
            hourly_rate=dto.hourly_rate,
            role=dto.role,
        )
