"""
salon_services.stores -- Persistence ports and in-memory implementations.

Responsibility:
    Define the three collaborator interfaces the services depend on
    (transaction store, hours store, staff directory) as ``typing.Protocol``
    classes, the filter DTOs they accept, and in-memory implementations used
    by tests and by single-process embedding.

Architecture position:
    Services -- ports. SQL implementations live in salon_services.sql_stores.

Invariants enforced:
    - Transactions are append-only; an added record receives an id if it
      has none.
    - Hours are keyed by (therapist_id, day); upsert replaces.
    - Range filters are inclusive at both ends.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable

from salon_kernel.db.base import new_id
from salon_kernel.domain.dates import DateRange
from salon_kernel.domain.records import HoursEntry, TherapistProfile, TransactionRecord
from salon_kernel.exceptions import TransactionNotFoundError


@dataclass(frozen=True)
class TransactionFilter:
    """Criteria for listing transactions; ``None`` means unrestricted."""

    therapist_id: str | None = None
    customer_id: str | None = None
    date_range: DateRange | None = None

    def matches(self, record: TransactionRecord) -> bool:
        return (
            (self.therapist_id is None or record.therapist.id == self.therapist_id)
            and (self.customer_id is None or record.customer.id == self.customer_id)
            and (self.date_range is None or self.date_range.contains(record.date))
        )


@dataclass(frozen=True)
class HoursFilter:
    """Criteria for listing hours; day bounds are ``YYYY-MM-DD`` keys."""

    therapist_id: str | None = None
    start_key: str | None = None
    end_key: str | None = None

    def matches(self, entry: HoursEntry) -> bool:
        return (
            (self.therapist_id is None or entry.therapist_id == self.therapist_id)
            and (self.start_key is None or entry.date >= self.start_key)
            and (self.end_key is None or entry.date <= self.end_key)
        )


@runtime_checkable
class TransactionStore(Protocol):
    """Append-only transaction storage."""

    def list_transactions(
        self, filter: TransactionFilter | None = None,
    ) -> list[TransactionRecord]: ...

    def add_transaction(self, record: TransactionRecord) -> TransactionRecord: ...

    def get_transaction(self, transaction_id: str) -> TransactionRecord: ...


@runtime_checkable
class HoursStore(Protocol):
    """Hours storage keyed by (therapist_id, day)."""

    def get_hours(self, filter: HoursFilter | None = None) -> list[HoursEntry]: ...

    def upsert_hours(self, entry: HoursEntry) -> HoursEntry: ...


@runtime_checkable
class StaffDirectory(Protocol):
    """Read access to therapist profiles."""

    def get_therapist(self, therapist_id: str) -> TherapistProfile | None: ...

    def list_therapists(self) -> list[TherapistProfile]: ...


class InMemoryTransactionStore:
    """List-backed TransactionStore; results come back in date order."""

    def __init__(self, records: list[TransactionRecord] | None = None):
        self._records: list[TransactionRecord] = []
        for record in records or ():
            self.add_transaction(record)

    def list_transactions(
        self, filter: TransactionFilter | None = None,
    ) -> list[TransactionRecord]:
        filter = filter or TransactionFilter()
        return sorted(
            (r for r in self._records if filter.matches(r)),
            key=lambda r: r.date,
        )

    def add_transaction(self, record: TransactionRecord) -> TransactionRecord:
        if record.id is None:
            record = replace(record, id=new_id())
        self._records.append(record)
        return record

    def get_transaction(self, transaction_id: str) -> TransactionRecord:
        for record in self._records:
            if record.id == transaction_id:
                return record
        raise TransactionNotFoundError(transaction_id)

    def __len__(self) -> int:
        return len(self._records)


class InMemoryHoursStore:
    """Dict-backed HoursStore."""

    def __init__(self):
        self._entries: dict[tuple[str, str], HoursEntry] = {}

    def get_hours(self, filter: HoursFilter | None = None) -> list[HoursEntry]:
        filter = filter or HoursFilter()
        return sorted(
            (e for e in self._entries.values() if filter.matches(e)),
            key=lambda e: (e.date, e.therapist_id),
        )

    def upsert_hours(self, entry: HoursEntry) -> HoursEntry:
        self._entries[(entry.therapist_id, entry.date)] = entry
        return entry


class InMemoryStaffDirectory:
    """Dict-backed StaffDirectory."""

    def __init__(self, profiles: list[TherapistProfile] | None = None):
        self._profiles: dict[str, TherapistProfile] = {}
        for profile in profiles or ():
            self.add_therapist(profile)

    def add_therapist(self, profile: TherapistProfile) -> TherapistProfile:
        self._profiles[profile.id] = profile
        return profile

    def get_therapist(self, therapist_id: str) -> TherapistProfile | None:
        return self._profiles.get(therapist_id)

    def list_therapists(self) -> list[TherapistProfile]:
        return sorted(self._profiles.values(), key=lambda p: p.name)
