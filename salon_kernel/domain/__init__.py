"""Pure domain layer: money, dates, clock and immutable records."""
