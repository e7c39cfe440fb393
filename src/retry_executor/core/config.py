"""Configuration model for the retry executor.

`RetryConfig` is the single immutable value that parameterizes one executor
invocation. It can be built directly, derived from `RetrySettings`, or copied
with call-time overrides.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from retry_executor.core.interfaces.cancellation import CancellationPort
from retry_executor.core.interfaces.logging import LoggingPort


class RetryConfig(BaseModel):
    """Configuration for RetryExecutor behavior.

    Attributes:
        max_attempts: Total attempts including the first (1 = no retry)
        initial_delay_ms: Delay in milliseconds before the second attempt
        backoff_enabled: Double the delay after every retried failure
        retryable_failure_kinds: Exception classes that trigger a retry (None = all).
            Matching is by exact class; subclasses are not retried implicitly.
        log_sink: Optional sink receiving error/info records for failed attempts
        cancellation_signal: Optional cooperative cancellation source
    """

    max_attempts: int = Field(
        default=3,
        ge=1,
        description="Total number of attempts including the first one"
    )

    initial_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Delay in milliseconds before the second attempt"
    )

    backoff_enabled: bool = Field(
        default=True,
        description="Double the inter-attempt delay after each retried failure"
    )

    retryable_failure_kinds: Optional[frozenset[type[BaseException]]] = Field(
        default=None,
        description="Exception classes eligible for retry (None retries every Exception)"
    )

    log_sink: Optional[LoggingPort] = Field(
        default=None,
        description="Receives error and progress records; logging is a no-op when absent"
    )

    cancellation_signal: Optional[CancellationPort] = Field(
        default=None,
        description="Cooperative cancellation checked around inter-attempt waits"
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "arbitrary_types_allowed": True,
    }

    @field_validator("retryable_failure_kinds", mode="before")
    @classmethod
    def accept_single_kind(cls, value: Any) -> Any:
        """Allow `retryable_failure_kinds=TimeoutError` as shorthand for a one-element set."""
        if isinstance(value, type):
            return frozenset([value])
        return value

    def with_overrides(self, **overrides) -> "RetryConfig":
        """Return a validated copy with the given fields replaced.

        Raises:
            pydantic.ValidationError: for unknown fields or invalid values
        """
        if not overrides:
            return self
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(overrides)
        return type(self)(**data)

    @classmethod
    def from_settings(cls, settings) -> "RetryConfig":
        """Factory method to construct config from a RetrySettings instance."""
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            initial_delay_ms=settings.RETRY_INITIAL_DELAY_MS,
            backoff_enabled=settings.RETRY_BACKOFF_ENABLED,
            # log_sink and cancellation_signal are runtime collaborators,
            # injected by the composition root or the caller
        )
