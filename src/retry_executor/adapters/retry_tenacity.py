import logging
from typing import Any, Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
)

from retry_executor.core.config import RetryConfig
from retry_executor.core.exceptions import RetryCancelledError
from retry_executor.core.managers.retry_executor import (
    describe_operation,
    emit_to_sink,
    is_retryable,
    wait_for_next_attempt,
)

logger = logging.getLogger(__name__)


class _TenacityHooks:
    """Per-invocation tenacity callbacks reproducing the executor's log and cancel contract."""

    def __init__(self, config: RetryConfig, name: str):
        self.config = config
        self.name = name
        self._attempt_number = 0
        self._failure: Optional[BaseException] = None

    def should_retry(self, exc: BaseException) -> bool:
        # task cancellation must never be retried
        return isinstance(exc, Exception) and is_retryable(exc, self.config.retryable_failure_kinds)

    def after(self, retry_state: RetryCallState) -> None:
        """Called by tenacity after every retryable failure, including the last one."""
        exc = retry_state.outcome.exception()
        emit_to_sink(self.config.log_sink, "error", f"{type(exc).__name__}: {exc}", exc)
        if retry_state.attempt_number >= self.config.max_attempts:
            emit_to_sink(
                self.config.log_sink,
                "info",
                f"Final attempt {retry_state.attempt_number} of {self.config.max_attempts} "
                f"of {self.name} failed with {exc}.",
            )

    def before_sleep(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception()
        self._attempt_number = retry_state.attempt_number
        self._failure = exc
        delay_ms = round(retry_state.next_action.sleep * 1000)
        emit_to_sink(
            self.config.log_sink,
            "info",
            f"Try {retry_state.attempt_number} of {self.config.max_attempts} of {self.name} "
            f"failed with {exc}. Retrying in {delay_ms} ms.",
        )
        signal = self.config.cancellation_signal
        if signal is not None and signal.is_cancellation_requested:
            raise RetryCancelledError(retry_state.attempt_number, self.config.max_attempts, exc) from exc

    async def sleep(self, seconds: float) -> None:
        delay_ms = round(seconds * 1000)
        if delay_ms <= 0:
            return
        try:
            # tenacity computes the next delay itself, so no doubling here
            await wait_for_next_attempt(delay_ms, False, self.config.cancellation_signal)
        except RetryCancelledError:
            logger.debug(f"[retry:tenacity] cancelled during wait op={self.name} attempt={self._attempt_number}")
            raise RetryCancelledError(
                self._attempt_number, self.config.max_attempts, self._failure
            ) from self._failure


class TenacityRetryAdapter:
    """Tenacity-based retry adapter implementing RetryPort.

    Honours the same `RetryConfig` as the built-in executor: attempt count,
    doubling or fixed delay, exact-kind filtering, cancellation at the wait
    boundary and the same sink records. Call-time kwargs override config fields.
    """

    def __init__(self, config: Optional[RetryConfig] = None) -> None:
        self.config = config or RetryConfig()

    async def execute(self, operation: Callable[[], Awaitable[Any]], **overrides) -> Any:
        config = self.config.with_overrides(**overrides)
        hooks = _TenacityHooks(config, describe_operation(operation))

        initial_seconds = config.initial_delay_ms / 1000
        if config.backoff_enabled:
            wait = wait_exponential(multiplier=initial_seconds, exp_base=2)
        else:
            wait = wait_fixed(initial_seconds)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait,
            retry=retry_if_exception(hooks.should_retry),
            after=hooks.after,
            before_sleep=hooks.before_sleep,
            sleep=hooks.sleep,
            reraise=True,
        )
        async for attempt in retrying:  # pragma: no cover - control flow instrumentation
            with attempt:
                return await operation()
