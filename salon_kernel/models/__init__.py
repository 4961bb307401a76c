"""
SQLAlchemy ORM persistence models.

Each model mirrors a frozen record from ``salon_kernel.domain.records`` and
provides ``to_dto()`` / ``from_dto()`` conversion. Importing this package
registers every table on ``Base.metadata``.
"""

from salon_kernel.models.hours import HoursEntryModel
from salon_kernel.models.therapist import TherapistModel
from salon_kernel.models.transaction import TransactionItemModel, TransactionModel

__all__ = [
    "HoursEntryModel",
    "TherapistModel",
    "TransactionItemModel",
    "TransactionModel",
]
