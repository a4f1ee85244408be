# ==================================================
# ========  MODULE: decorators & timing utils  =====
# ==================================================
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar

from matbridge.utils.logger import get_error_logger

# Public API
__all__ = ["OperationTiming", "TimerManager", "log_exceptions"]

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class OperationTiming:
    """Accumulated wall time of one conversion operation."""

    calls: int = 0
    failures: int = 0
    total: float = 0.0
    worst: float = 0.0

    def add(self, elapsed: float, failed: bool = False) -> None:
        self.calls += 1
        self.failures += int(failed)
        self.total += elapsed
        self.worst = max(self.worst, elapsed)


# ====[ Per-operation profiling for MatConverter ]====
class TimerManager:
    """
    Accumulate wall time per conversion label ("encode", "decode", ...).

    Failed calls are timed too and counted separately.
    """

    def __init__(self) -> None:
        self.stats: Dict[str, OperationTiming] = {}

    def add(self, label: str, elapsed: float, failed: bool = False) -> None:
        """Record one call of `label` that took `elapsed` seconds."""
        self.stats.setdefault(label, OperationTiming()).add(float(elapsed), failed)

    def reset(self) -> None:
        """Forget every recorded timing."""
        self.stats.clear()

    def track(self, label: str) -> Callable[[F], F]:
        """Decorator timing every call of the wrapped function under `label`."""
        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.perf_counter()
                failed = True
                try:
                    result = func(*args, **kwargs)
                    failed = False
                    return result
                finally:
                    self.add(label, time.perf_counter() - start, failed)
            return wrapper  # type: ignore[return-value]
        return decorator

    def summary(self, digits: int = 3) -> Dict[str, Dict[str, float]]:
        """
        Timings per label, slowest total first.

        Returns
        -------
        dict
            {label: {"calls", "failures", "total", "avg", "max"}}; times in seconds.
        """
        ordered = sorted(self.stats.items(), key=lambda item: item[1].total, reverse=True)
        return {
            label: {
                "calls": t.calls,
                "failures": t.failures,
                "total": round(t.total, digits),
                "avg": round(t.total / t.calls, digits) if t.calls else 0.0,
                "max": round(t.worst, digits),
            }
            for label, t in ordered
        }

    def log_summary(self, logger: logging.Logger, level: int = logging.INFO, digits: int = 3) -> None:
        """Write one line per label to `logger`."""
        logger.log(level, "Conversion Time Summary:")
        for label, s in self.summary(digits).items():
            logger.log(
                level,
                f" | {label:<16} | {s['calls']:>5} calls | {s['failures']:>3} failed "
                f"| {s['total']:>8.3f}s total | {s['avg']:>8.3f}s avg | {s['max']:>8.3f}s max",
            )

# ====[ Exception logger decorator ]====
def log_exceptions(
    logger: Optional[logging.Logger] = None,
    raise_exception: bool = True,
) -> Callable[[F], F]:
    """
    Log exceptions raised by the wrapped function.

    Parameters
    ----------
    logger : logging.Logger, optional
        Logger receiving the error record. Defaults to the error logger.
    raise_exception : bool, default True
        If True, re-raise the exception after logging; otherwise return None.

    Returns
    -------
    Callable
        A decorator that logs exceptions and optionally re-raises.
    """
    error_logger = logger or get_error_logger()

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                error_logger.error(f"Exception in '{func.__name__}': {e}", exc_info=True)
                if raise_exception:
                    raise
                return None
        return wrapper  # type: ignore[return-value]
    return decorator
