"""
Utility helpers for the algorithm lessons.

Provides:
- Structured logging configuration with timestamps.
- Wall-clock timing of named steps.
- Argument validation shared by the DP modules.
"""

import contextlib
import logging
import numbers
import time
from typing import Generator, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def setup_logging(
    level: int = logging.INFO,
    fmt: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt: str = "%Y-%m-%dT%H:%M:%S%z",
) -> None:
    """Configure the root logger with timestamped structured output."""
    logging.basicConfig(level=level, format=fmt, datefmt=datefmt, force=True)


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def timed(label: str) -> Generator[None, None, None]:
    """Context manager that logs elapsed wall-clock time for *label*."""
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    logger.info("%s completed in %.4fs.", label, elapsed)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def check_non_negative(name: str, value: int) -> int:
    """Return *value* as a plain int, or raise ``ValueError`` unless it is an integer >= 0.

    numpy integer scalars are accepted; ``bool`` is not.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def check_modulus(modulus: Optional[int]) -> None:
    """A modulus is either ``None`` or a positive int."""
    if modulus is None:
        return
    if isinstance(modulus, bool) or not isinstance(modulus, int) or modulus <= 0:
        raise ValueError(f"modulus must be a positive integer, got {modulus!r}")


def normalize_jumps(jumps: Iterable[int]) -> Tuple[int, ...]:
    """Return sorted unique jump lengths, rejecting empty or non-positive sets."""
    result: List[int] = sorted(set(jumps))
    if not result:
        raise ValueError("jumps must contain at least one length")
    if result[0] <= 0:
        raise ValueError(f"jump lengths must be positive, got {result[0]}")
    return tuple(result)


def reduce(value: int, modulus: Optional[int]) -> int:
    """Reduce *value* modulo *modulus* when one is given."""
    return value % modulus if modulus is not None else value
