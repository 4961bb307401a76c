"""
Salon Kernel

Shared foundation for the salon point-of-sale core:
- Typed exceptions with machine-readable codes
- Structured JSON logging
- Validated configuration
- Decimal money and day-key date helpers
- Immutable domain records and their SQLAlchemy persistence models
"""

__version__ = "0.1.0"
