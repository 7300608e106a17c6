"""Retry configuration and decision logic.

RetryOptions is the validated, immutable configuration of a retry rule.
RetryPolicy maps (outcome, retry count) to a decision without side effects,
so it can be tested without a scheduler or transport.

Option keys are snake_case. The camelCase spellings (``retryOnStatus``,
``maxRetries``, ...) are accepted as aliases. Values are never coerced:
``"503"`` or ``True`` where an int is expected is a configuration error.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    field_serializer,
    field_validator,
)

from refetch.foundation.errors import ConfigurationError

from .backoff import Backoff, ExponentialBackoff, parse_backoff
from .outcome import NO_RETRY, ConnectionFailure, HttpStatus, Outcome, Retry, RetryDecision

if TYPE_CHECKING:
    from refetch.foundation.config import RetrySettings

# Transient server-side statuses retried by default
DEFAULT_RETRY_STATUSES: frozenset[int] = frozenset({500, 502, 503, 504})

_ALIASES: dict[str, str] = {
    "retryOnStatus": "retry_on_status",
    "maxRetries": "max_retries",
    "retryOnConnectionFailure": "retry_on_connection_failure",
    "initialDelay": "initial_delay",
    "delayMultiplier": "delay_multiplier",
}
_EXPONENTIAL_KEYS = ("initial_delay", "delay_multiplier")


class RetryOptions(BaseModel):
    """Validated retry rule.

    Attributes:
        retry_on_status: HTTP statuses that trigger a retry
        max_retries: Retry ceiling per request lineage (0 = never retry)
        retry_on_connection_failure: Whether transport connection failures retry
        backoff: Delay strategy, see `parse_backoff` for accepted raw shapes

    Example:
        >>> opts = RetryOptions.from_mapping({"retryOnStatus": [503], "backoff": [1, 2, 3]})
        >>> opts.backoff.delay(0)
        1000
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    retry_on_status: frozenset[StrictInt] = DEFAULT_RETRY_STATUSES
    max_retries: Annotated[int, Field(ge=0, strict=True)] = 3
    retry_on_connection_failure: StrictBool = False
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)

    @field_validator("backoff", mode="before")
    @classmethod
    def _coerce_backoff(cls, v: object) -> Backoff:
        return parse_backoff(v)

    @field_serializer("retry_on_status")
    def _serialize_statuses(self, v: frozenset[int]) -> list[int]:
        return sorted(v)

    @classmethod
    def from_mapping(cls, options: Mapping[str, object] | None = None) -> RetryOptions:
        """Merge caller options over the defaults and validate eagerly.

        ``initial_delay``/``delay_multiplier`` given without ``backoff`` build
        an exponential backoff. An explicit ``backoff`` takes precedence.

        Raises:
            ConfigurationError: On any invalid option, including backoff shape
        """
        merged = {_ALIASES.get(k, k): v for k, v in (options or {}).items()}
        exponential = {k: merged.pop(k) for k in _EXPONENTIAL_KEYS if k in merged}
        raw_backoff = merged.get("backoff")
        if raw_backoff is None and exponential:
            raw_backoff = exponential
        # Raised here directly so the caller sees the shape error, not a wrapped one
        merged["backoff"] = parse_backoff(raw_backoff)
        try:
            return cls(**merged)
        except ValidationError as e:
            raise ConfigurationError(f"invalid retry options: {e}") from e

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryOptions:
        """Build options from environment-backed settings."""
        return cls.from_mapping(settings.model_dump(exclude_none=True))


class RetryPolicy:
    """Decide whether and when to retry a completed attempt.

    Args:
        options: Validated retry rule (default: RetryOptions())
    """

    __slots__ = ("_options",)

    def __init__(self, options: RetryOptions | None = None) -> None:
        self._options = options or RetryOptions()

    @property
    def options(self) -> RetryOptions:
        return self._options

    def should_retry(self, outcome: Outcome, retry_count: int = 0) -> bool:
        """Whether the outcome qualifies for another attempt."""
        opts = self._options
        match outcome:
            case HttpStatus(code=code) if code not in opts.retry_on_status:
                return False
            case ConnectionFailure() if not opts.retry_on_connection_failure:
                return False
        return retry_count < opts.max_retries

    def evaluate(self, outcome: Outcome, retry_count: int = 0) -> RetryDecision:
        """Map an attempt outcome to NO_RETRY or Retry(delay_ms, next_retry_count)."""
        if not self.should_retry(outcome, retry_count):
            return NO_RETRY
        return Retry(delay_ms=self._options.backoff.delay(retry_count), next_retry_count=retry_count + 1)

    def __repr__(self) -> str:
        return f"RetryPolicy({self._options!r})"
