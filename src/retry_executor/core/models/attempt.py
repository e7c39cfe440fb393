from enum import StrEnum

from pydantic import BaseModel, Field


class AttemptOutcome(StrEnum):
    success = "success"
    retryable_failure = "retryable_failure"  # logged, waited on, retried
    terminal_failure = "terminal_failure"  # retryable kind, but no attempts left
    non_retryable_failure = "non_retryable_failure"  # kind outside the configured set
    cancelled = "cancelled"


class AttemptState(BaseModel):
    """Mutable per-invocation bookkeeping of the retry loop.

    Notes:
    - Owned by exactly one `RetryExecutor.execute` call and never shared.
    - `attempt_number` is 1-based and never exceeds `max_attempts`.
    - `current_delay_ms` is the delay to wait before the *next* attempt; it only
      changes after a completed wait (doubling when backoff is enabled).
    """

    attempt_number: int = Field(default=1, ge=1)
    max_attempts: int = Field(ge=1)
    current_delay_ms: int = Field(default=0, ge=0)

    model_config = {"validate_assignment": True}

    @property
    def is_final_attempt(self) -> bool:
        return self.attempt_number >= self.max_attempts
