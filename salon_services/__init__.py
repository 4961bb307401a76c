"""
salon_services -- Package init and public API.

Responsibility:
    Stateful orchestration over the pure engines: hours ledger, commission,
    checkout and reporting, plus the store ports they depend on.  This is
    the only layer that holds database sessions or reads the clock.

Architecture position:
    Services -- orchestration over engines + kernel.

        salon_services/ -> salon_engines/  (allowed)
        salon_services/ -> salon_kernel/   (allowed)
        salon_engines/  -> salon_services/ (FORBIDDEN)
        salon_kernel/   -> salon_services/ (FORBIDDEN)
"""

from salon_kernel.logging_config import get_logger

logger = get_logger("services")

from salon_services.checkout_service import CheckoutService  # noqa: E402
from salon_services.commission_service import CommissionService  # noqa: E402
from salon_services.hours_ledger import HoursLedger, TherapistHours  # noqa: E402
from salon_services.reporting_service import ReportingService, SalesTables  # noqa: E402
from salon_services.sql_stores import (  # noqa: E402
    SqlHoursStore,
    SqlStaffDirectory,
    SqlTransactionStore,
)
from salon_services.stores import (  # noqa: E402
    HoursFilter,
    HoursStore,
    InMemoryHoursStore,
    InMemoryStaffDirectory,
    InMemoryTransactionStore,
    StaffDirectory,
    TransactionFilter,
    TransactionStore,
)

__all__ = [
    "CheckoutService",
    "CommissionService",
    "HoursFilter",
    "HoursLedger",
    "HoursStore",
    "InMemoryHoursStore",
    "InMemoryStaffDirectory",
    "InMemoryTransactionStore",
    "ReportingService",
    "SalesTables",
    "SqlHoursStore",
    "SqlStaffDirectory",
    "SqlTransactionStore",
    "StaffDirectory",
    "TherapistHours",
    "TransactionFilter",
    "TransactionStore",
]
