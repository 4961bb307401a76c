"""
salon_services.sql_stores -- SQLAlchemy implementations of the store ports.

Responsibility:
    Back TransactionStore, HoursStore and StaffDirectory with the ORM models
    in salon_kernel.models, converting to and from the frozen domain records.

Architecture position:
    Services -- persistence adapters.

Invariants enforced:
    - Session ownership: stores accept a Session from the caller and only
      ``flush``; commit/rollback belong to ``session_scope()``.
    - Return convention: frozen domain records, never ORM instances.
    - Hours upsert is keyed by (therapist_id, work_date), which the table's
      unique constraint enforces.

Failure modes:
    - TransactionNotFoundError from ``get_transaction`` for an unknown id.
    - sqlalchemy.exc.IntegrityError if two sessions insert the same
      (therapist_id, work_date) concurrently; the losing session's scope
      rolls back.

Usage:
    with session_scope() as session:
        store = SqlTransactionStore(session)
        store.add_transaction(record)
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from salon_kernel.domain.records import HoursEntry, TherapistProfile, TransactionRecord
from salon_kernel.exceptions import TransactionNotFoundError
from salon_kernel.logging_config import get_logger
from salon_kernel.models import HoursEntryModel, TherapistModel, TransactionModel
from salon_services.stores import HoursFilter, TransactionFilter

logger = get_logger("services.sql_stores")


class SqlTransactionStore:
    """TransactionStore over the ``transactions`` table."""

    def __init__(self, session: Session):
        self.session = session

    def list_transactions(
        self, filter: TransactionFilter | None = None,
    ) -> list[TransactionRecord]:
        filter = filter or TransactionFilter()
        stmt = select(TransactionModel).order_by(TransactionModel.occurred_at)
        if filter.therapist_id is not None:
            stmt = stmt.where(TransactionModel.therapist_id == filter.therapist_id)
        if filter.customer_id is not None:
            stmt = stmt.where(TransactionModel.customer_id == filter.customer_id)
        if filter.date_range is not None:
            stmt = stmt.where(
                TransactionModel.occurred_at >= filter.date_range.start,
                TransactionModel.occurred_at <= filter.date_range.end,
            )
        return [model.to_dto() for model in self.session.scalars(stmt)]

    def add_transaction(self, record: TransactionRecord) -> TransactionRecord:
        model = TransactionModel.from_dto(record)
        self.session.add(model)
        self.session.flush()
        logger.info("transaction_persisted", extra={
            "transaction_id": model.id,
            "therapist_id": model.therapist_id,
            "total": str(model.total),
        })
        return model.to_dto()

    def get_transaction(self, transaction_id: str) -> TransactionRecord:
        model = self.session.get(TransactionModel, transaction_id)
        if model is None:
            raise TransactionNotFoundError(transaction_id)
        return model.to_dto()


class SqlHoursStore:
    """HoursStore over the ``therapist_hours`` table."""

    def __init__(self, session: Session):
        self.session = session

    def get_hours(self, filter: HoursFilter | None = None) -> list[HoursEntry]:
        filter = filter or HoursFilter()
        stmt = select(HoursEntryModel).order_by(
            HoursEntryModel.work_date, HoursEntryModel.therapist_id,
        )
        if filter.therapist_id is not None:
            stmt = stmt.where(HoursEntryModel.therapist_id == filter.therapist_id)
        # Zero-padded YYYY-MM-DD keys compare chronologically as strings.
        if filter.start_key is not None:
            stmt = stmt.where(HoursEntryModel.work_date >= filter.start_key)
        if filter.end_key is not None:
            stmt = stmt.where(HoursEntryModel.work_date <= filter.end_key)
        return [model.to_dto() for model in self.session.scalars(stmt)]

    def upsert_hours(self, entry: HoursEntry) -> HoursEntry:
        existing = self.session.execute(
            select(HoursEntryModel).where(
                HoursEntryModel.therapist_id == entry.therapist_id,
                HoursEntryModel.work_date == entry.date,
            )
        ).scalar_one_or_none()

        if existing is None:
            self.session.add(HoursEntryModel.from_dto(entry))
        else:
            existing.hours = entry.hours
        self.session.flush()
        return entry


class SqlStaffDirectory:
    """StaffDirectory over the ``therapists`` table."""

    def __init__(self, session: Session):
        self.session = session

    def add_therapist(self, profile: TherapistProfile) -> TherapistProfile:
        self.session.add(TherapistModel.from_dto(profile))
        self.session.flush()
        return profile

    def get_therapist(self, therapist_id: str) -> TherapistProfile | None:
        model = self.session.get(TherapistModel, therapist_id)
        return model.to_dto() if model is not None else None

    def list_therapists(self) -> list[TherapistProfile]:
        stmt = select(TherapistModel).order_by(TherapistModel.name)
        return [model.to_dto() for model in self.session.scalars(stmt)]
