"""Retry executor: re-invokes an async operation until it succeeds.

The attempt loop is an explicit state machine. Every failure is classified
into an `AttemptOutcome` before anything happens to it:

- non_retryable_failure: kind outside `retryable_failure_kinds`, re-raised at once
- terminal_failure: retryable kind on the last attempt, logged then re-raised
- retryable_failure: logged, waited on, retried

Waits between attempts honour an optional cancellation signal, both while
suspended and right after the timer expires.
"""

import asyncio
import functools
import logging
import uuid
from typing import Any, Awaitable, Callable, Optional, TypeVar

from retry_executor.core.config import RetryConfig
from retry_executor.core.exceptions import RetryCancelledError, RetryInvariantError
from retry_executor.core.interfaces.cancellation import CancellationPort
from retry_executor.core.interfaces.logging import LoggingPort
from retry_executor.core.logging_config import correlation_id_var
from retry_executor.core.models.attempt import AttemptOutcome, AttemptState

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(
    failure: BaseException,
    retryable_failure_kinds: Optional[frozenset[type[BaseException]]],
) -> bool:
    """Return True if `failure` may be retried.

    Without a configured set every failure qualifies. With a set, the
    failure's exact class must be a member; subclasses of a listed class do
    not match.
    """
    if retryable_failure_kinds is None:
        return True
    return type(failure) in retryable_failure_kinds


def classify_failure(
    failure: BaseException,
    state: AttemptState,
    config: RetryConfig,
) -> AttemptOutcome:
    if not is_retryable(failure, config.retryable_failure_kinds):
        return AttemptOutcome.non_retryable_failure
    if state.is_final_attempt:
        return AttemptOutcome.terminal_failure
    return AttemptOutcome.retryable_failure


async def wait_for_next_attempt(
    delay_ms: int,
    backoff_enabled: bool,
    cancellation_signal: Optional[CancellationPort] = None,
) -> int:
    """Suspend for `delay_ms` and return the delay for the following wait.

    Raises:
        RetryCancelledError: if cancellation was requested during the wait or
            by the time the timer expired.
    """
    seconds = delay_ms / 1000
    if cancellation_signal is None:
        await asyncio.sleep(seconds)
    else:
        try:
            await asyncio.wait_for(cancellation_signal.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
        # The timer and the cancellation request may complete together
        if cancellation_signal.is_cancellation_requested:
            raise RetryCancelledError()
    return delay_ms * 2 if backoff_enabled else delay_ms


def describe_operation(operation: Callable[..., Any]) -> str:
    if isinstance(operation, functools.partial):
        operation = operation.func
    return getattr(operation, "__qualname__", None) or repr(operation)


def emit_to_sink(
    sink: Optional[LoggingPort],
    level: str,
    message: str,
    exc: Optional[BaseException] = None,
) -> None:
    """Forward a record to the optional log sink.

    A missing sink is a no-op and a failing sink never reaches the retry loop.
    """
    if sink is None:
        return
    try:
        if level == "error":
            sink.error(message, exc)
        else:
            sink.info(message)
    except Exception:
        logger.exception("[retry:log] log sink raised while recording: %s", message)


class RetryExecutor:
    """Built-in RetryPort implementation.

    Holds a default `RetryConfig`; every `execute` call owns a private
    `AttemptState`, so one executor can serve any number of concurrent
    invocations.
    """

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()

    async def execute(self, operation: Callable[[], Awaitable[T]], **overrides) -> T:
        config = self.config.with_overrides(**overrides)
        token = None
        if correlation_id_var.get() == "-":
            token = correlation_id_var.set(f"retry-{uuid.uuid4().hex[:8]}")
        try:
            return await self._run(operation, config)
        finally:
            if token is not None:
                correlation_id_var.reset(token)

    async def _run(self, operation: Callable[[], Awaitable[T]], config: RetryConfig) -> T:
        name = describe_operation(operation)
        state = AttemptState(
            max_attempts=config.max_attempts,
            current_delay_ms=config.initial_delay_ms,
        )

        while state.attempt_number <= config.max_attempts:
            logger.debug(
                f"[retry:attempt] start op={name} attempt={state.attempt_number}/{config.max_attempts}"
            )
            try:
                result = await operation()
            except Exception as exc:
                outcome = self._record_failure(exc, state, config, name)
                if outcome is not AttemptOutcome.retryable_failure:
                    raise
                failure = exc
            else:
                logger.debug(
                    f"[retry:attempt] outcome={AttemptOutcome.success} op={name} attempt={state.attempt_number}/{config.max_attempts}"
                )
                return result

            await self._wait_before_retry(failure, state, config, name)
            state.attempt_number += 1

        # Unreachable: the final attempt always returns or raises above
        raise RetryInvariantError(state.attempt_number, config.max_attempts)

    def _record_failure(
        self,
        exc: Exception,
        state: AttemptState,
        config: RetryConfig,
        name: str,
    ) -> AttemptOutcome:
        """Classify a failed attempt and emit the matching sink records."""
        outcome = classify_failure(exc, state, config)
        if outcome is AttemptOutcome.non_retryable_failure:
            logger.debug(
                f"[retry:attempt] outcome={outcome} kind={type(exc).__name__} op={name} attempt={state.attempt_number}"
            )
            return outcome

        sink = config.log_sink
        emit_to_sink(sink, "error", f"{type(exc).__name__}: {exc}", exc)
        if outcome is AttemptOutcome.terminal_failure:
            emit_to_sink(
                sink,
                "info",
                f"Final attempt {state.attempt_number} of {config.max_attempts} of {name} failed with {exc}.",
            )
        else:
            emit_to_sink(
                sink,
                "info",
                f"Try {state.attempt_number} of {config.max_attempts} of {name} failed with {exc}. "
                f"Retrying in {state.current_delay_ms} ms.",
            )
        return outcome

    async def _wait_before_retry(
        self,
        failure: Exception,
        state: AttemptState,
        config: RetryConfig,
        name: str,
    ) -> None:
        signal = config.cancellation_signal
        if signal is not None and signal.is_cancellation_requested:
            logger.debug(f"[retry:wait] outcome={AttemptOutcome.cancelled} before wait op={name} attempt={state.attempt_number}")
            raise RetryCancelledError(state.attempt_number, config.max_attempts, failure) from failure

        if state.current_delay_ms <= 0:
            return

        try:
            state.current_delay_ms = await wait_for_next_attempt(
                state.current_delay_ms, config.backoff_enabled, signal
            )
        except RetryCancelledError:
            logger.debug(f"[retry:wait] outcome={AttemptOutcome.cancelled} during wait op={name} attempt={state.attempt_number}")
            raise RetryCancelledError(state.attempt_number, config.max_attempts, failure) from failure


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    **overrides,
) -> T:
    """Run `operation` once through a fresh `RetryExecutor`."""
    return await RetryExecutor(config).execute(operation, **overrides)


def retryable(config: Optional[RetryConfig] = None, **overrides):
    """Decorator running every call of an async function through the executor.

    Example:
        @retryable(max_attempts=5, retryable_failure_kinds={TimeoutError})
        async def fetch(url): ...
    """
    # overrides are validated once, at decoration time
    executor = RetryExecutor((config or RetryConfig()).with_overrides(**overrides))

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await executor.execute(functools.partial(func, *args, **kwargs))
        return wrapper

    return decorator
