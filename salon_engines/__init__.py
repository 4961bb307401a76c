"""
Module: salon_engines
Responsibility:
    Package entrypoint re-exporting the pure calculation engines: revenue
    aggregation, commission splits and cart totals.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import salon_kernel. MUST NOT import salon_services.

Invariants enforced:
    - Purity: engines never read the clock; dates are passed in.
    - Decimal-only arithmetic, rounded once at presentation.

Usage:
    from salon_engines import Dimension, aggregate_by, ranked
    from salon_engines import CommissionCalculator
    from salon_engines import Cart, compute_cart_totals
"""

from salon_kernel.logging_config import get_logger

logger = get_logger("engines")

from salon_engines.aggregation import (  # noqa: E402
    Dimension,
    GroupTotal,
    ItemShare,
    LineBreakdown,
    RevenueSummary,
    aggregate,
    aggregate_by,
    aggregate_by_day,
    filter_transactions,
    item_shares,
    line_breakdown,
    payment_breakdown,
    ranked,
    summarize,
    top_customers,
    unique_values,
)
from salon_engines.cart import Cart, CartLine, CartState, CartTotals, compute_cart_totals  # noqa: E402
from salon_engines.commission import (  # noqa: E402
    CommissionCalculator,
    CommissionResult,
    revenue_from_transactions,
)
from salon_engines.tracer import traced_engine  # noqa: E402

__all__ = [
    "Cart",
    "CartLine",
    "CartState",
    "CartTotals",
    "CommissionCalculator",
    "CommissionResult",
    "Dimension",
    "GroupTotal",
    "ItemShare",
    "LineBreakdown",
    "RevenueSummary",
    "aggregate",
    "aggregate_by",
    "aggregate_by_day",
    "compute_cart_totals",
    "filter_transactions",
    "item_shares",
    "line_breakdown",
    "payment_breakdown",
    "ranked",
    "revenue_from_transactions",
    "summarize",
    "top_customers",
    "traced_engine",
    "unique_values",
]
