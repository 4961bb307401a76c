"""
Pytest fixtures for the salon core test suite.

Provides:
- Structured logging capture
- Deterministic clock and default configuration
- Therapist profiles and a transaction factory
- In-memory stores and an SQLite-backed session

Environment Variables:
- DATABASE_URL is ignored here; SQL store tests always run against an
  in-memory SQLite database.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from salon_kernel.config import SalonConfig
from salon_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from salon_kernel.domain.clock import DeterministicClock
from salon_kernel.domain.money import round_money
from salon_kernel.domain.records import (
    CustomerRef,
    EmploymentType,
    LineItem,
    TherapistProfile,
    TherapistRef,
    TransactionRecord,
)
from salon_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from salon_services.hours_ledger import HoursLedger
from salon_services.stores import (
    InMemoryHoursStore,
    InMemoryStaffDirectory,
    InMemoryTransactionStore,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture salon logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, ledger):
            ledger.hours_by_therapist_in_range(...)
            logs = captured_logs()
            assert any(r["message"] == "hours_unknown_therapist" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("salon")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and configuration
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


@pytest.fixture
def config() -> SalonConfig:
    return SalonConfig.with_defaults()


# =============================================================================
# Domain data
# =============================================================================


@pytest.fixture
def employed_profile() -> TherapistProfile:
    return TherapistProfile(
        id="t-alice",
        name="Alice",
        employment_type=EmploymentType.EMPLOYED,
        hourly_rate=Decimal("10"),
    )


@pytest.fixture
def self_employed_profile() -> TherapistProfile:
    return TherapistProfile(
        id="t-bea",
        name="Bea",
        employment_type=EmploymentType.SELF_EMPLOYED,
    )


@pytest.fixture
def receptionist_profile() -> TherapistProfile:
    return TherapistProfile(
        id="s-rita",
        name="Rita",
        employment_type=EmploymentType.EMPLOYED,
        hourly_rate=Decimal("9"),
        role="receptionist",
    )


@pytest.fixture
def make_transaction():
    """
    Factory for valid TransactionRecords.

    ``items`` is a list of (name, category, unit_price, quantity) tuples;
    subtotal is their sum and total is subtotal - discount.
    """

    def _make(
        *,
        therapist: tuple[str, str] = ("t-alice", "Alice"),
        customer: tuple[str, str] = ("c-1", "Carol"),
        items: list[tuple[str, str, str, int]] | None = None,
        discount: str = "0",
        when: datetime = datetime(2024, 3, 15, 10, 0),
        payment_method: str = "cash",
        transaction_id: str | None = None,
    ) -> TransactionRecord:
        items = items if items is not None else [("Massage", "body", "50", 1)]
        lines = tuple(
            LineItem(name=name, category=category, unit_price=Decimal(price), quantity=qty)
            for name, category, price, qty in items
        )
        subtotal = sum((line.line_amount for line in lines), Decimal("0"))
        discount_amount = Decimal(discount)
        return TransactionRecord(
            id=transaction_id,
            date=when,
            customer=CustomerRef(id=customer[0], name=customer[1]),
            therapist=TherapistRef(id=therapist[0], name=therapist[1]),
            items=lines,
            subtotal=subtotal,
            discount=discount_amount,
            total=round_money(subtotal - discount_amount),
            payment_method=payment_method,
        )

    return _make


# =============================================================================
# In-memory stores and services
# =============================================================================


@pytest.fixture
def transaction_store() -> InMemoryTransactionStore:
    return InMemoryTransactionStore()


@pytest.fixture
def hours_store() -> InMemoryHoursStore:
    return InMemoryHoursStore()


@pytest.fixture
def staff_directory(employed_profile, self_employed_profile, receptionist_profile):
    return InMemoryStaffDirectory([employed_profile, self_employed_profile, receptionist_profile])


@pytest.fixture
def ledger(hours_store, staff_directory, config) -> HoursLedger:
    return HoursLedger(hours_store, staff_directory, config)


# =============================================================================
# SQLite session
# =============================================================================


@pytest.fixture
def sql_session() -> Generator[Session, None, None]:
    """
    Session on a fresh in-memory SQLite database.

    SQLite does not keep tzinfo, so tests that round-trip timestamps use
    naive datetimes.
    """
    init_engine_from_url("sqlite+pysqlite:///:memory:")
    create_tables()
    session = get_session()
    try:
        yield session
    finally:
        session.close()
        drop_tables()
        reset_engine()
