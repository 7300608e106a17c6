"""Backoff strategies for retry policies.

Provides delay calculation for re-scheduled requests, in milliseconds:
- ConstantBackoff: Same delay for every retry (configured in whole seconds)
- SequenceBackoff: Delay looked up by retry count (whole seconds, last value reused)
- ExponentialBackoff: initial_delay_ms * multiplier ** retry_count (milliseconds)

Raw option values are turned into a strategy by `parse_backoff`, which is the
single place backoff shapes are validated.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from fractions import Fraction
from typing import Protocol, runtime_checkable

from refetch.foundation.errors import ConfigurationError

BACKOFF_SHAPE_ERROR = "backoff must be an integer or a non-empty array of integers."

_MS_PER_SECOND = 1000


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Retry counts are 0-indexed (first retry = retry_count 0).
    """

    def delay(self, retry_count: int) -> int:
        """Delay in milliseconds before the next attempt."""
        ...


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries.

    Attributes:
        seconds: Delay in whole seconds
    """

    seconds: int

    def delay(self, retry_count: int) -> int:
        return self.seconds * _MS_PER_SECOND


@dataclass(frozen=True, slots=True)
class SequenceBackoff:
    """Delay indexed by retry count.

    Counts past the end of the sequence reuse the last value.

    Attributes:
        seconds: Non-empty tuple of delays in whole seconds
    """

    seconds: tuple[int, ...]

    def delay(self, retry_count: int) -> int:
        return self.seconds[min(retry_count, len(self.seconds) - 1)] * _MS_PER_SECOND


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff without jitter.

    Delay = floor(initial_delay_ms * multiplier ** retry_count), computed
    exactly so large retry counts grow without float overflow.

    Attributes:
        initial_delay_ms: Delay for the first retry in milliseconds (default: 1000)
        multiplier: Exponential growth factor (default: 2.0)
    """

    initial_delay_ms: int = 1000
    multiplier: float = 2.0

    def delay(self, retry_count: int) -> int:
        return int(self.initial_delay_ms * Fraction(self.multiplier) ** retry_count)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _shape_error(value_type: str) -> ConfigurationError:
    return ConfigurationError(BACKOFF_SHAPE_ERROR, value_type=value_type)


def _parse_exponential(values: Mapping[str, object]) -> ExponentialBackoff:
    initial = values.get("initial_delay", values.get("initialDelay", 1000))
    multiplier = values.get("delay_multiplier", values.get("delayMultiplier", 2.0))
    if not _is_int(initial) or initial < 0:  # type: ignore[operator]
        raise ConfigurationError(
            "initial_delay must be a non-negative integer number of milliseconds.",
            value_type=type(initial).__name__,
        )
    if (
        isinstance(multiplier, bool)
        or not isinstance(multiplier, (int, float))
        or not math.isfinite(multiplier)
        or multiplier < 0
    ):
        raise ConfigurationError(
            "delay_multiplier must be a non-negative number.",
            value_type=type(multiplier).__name__,
        )
    return ExponentialBackoff(initial_delay_ms=initial, multiplier=float(multiplier))  # type: ignore[arg-type]


def parse_backoff(value: object) -> Backoff:
    """Build a backoff strategy from a raw option value.

    Accepts an int (seconds), a non-empty sequence of ints (seconds), a
    mapping with ``initial_delay`` (ms) and ``delay_multiplier``, an existing
    Backoff, or None for the default exponential backoff.

    Raises:
        ConfigurationError: If the value has any other shape
    """
    match value:
        case None:
            return ExponentialBackoff()
        case bool():
            raise _shape_error("bool")
        case int():
            if value < 0:
                raise _shape_error("negative int")
            return ConstantBackoff(value)
        case str() | bytes():
            raise _shape_error(type(value).__name__)
        case Mapping():
            return _parse_exponential(value)
        case Sequence():
            if not value:
                raise _shape_error(f"empty {type(value).__name__}")
            for item in value:
                if not _is_int(item):
                    raise _shape_error(f"{type(value).__name__} containing {type(item).__name__}")
                if item < 0:
                    raise _shape_error(f"{type(value).__name__} containing negative int")
            return SequenceBackoff(tuple(value))
        case _ if isinstance(value, Backoff):
            return value
        case _:
            raise _shape_error(type(value).__name__)
