"""
salon_engines.tracer -- ``@traced_engine`` decorator.

Wraps a pure engine call and logs one ``SALON_ENGINE_TRACE`` record after it
returns, carrying the engine name and version, a short fingerprint of the
chosen inputs, and the elapsed time. Engines stay free of I/O; the trace is
a log record only.

    @traced_engine("commission", "1.0", fingerprint_fields=("revenue", "hours"))
    def calculate(self, *, profile, revenue, hours):
        ...

Fingerprint fields are looked up by parameter name whether the caller passed
them positionally or by keyword.
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from salon_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

TRACE_MESSAGE = "SALON_ENGINE_TRACE"


def _stable_repr(value: Any) -> str:
    """Order-independent text for mappings, enums by value, everything else by ``str``."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Mapping):
        inner = ",".join(
            f"{key}:{_stable_repr(value[key])}" for key in sorted(value, key=str)
        )
        return "{" + inner + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_stable_repr(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """First 16 hex chars of SHA-256 over ``name=value`` pairs; absent names hash as null."""
    text = "|".join(f"{name}={_stable_repr(arguments.get(name))}" for name in fingerprint_fields)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine entry point with trace logging.

    Args:
        engine_name: e.g. "aggregation".
        engine_version: bumped when the calculation changes.
        fingerprint_fields: parameter names hashed into ``input_fingerprint``.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)

            logger.info(TRACE_MESSAGE, extra={
                "trace_type": TRACE_MESSAGE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": elapsed_ms,
                "function": func.__qualname__,
            })
            return result

        return wrapper

    return decorator
