from typing import Protocol, Any, Awaitable, Callable

class RetryPort(Protocol):
    """Abstract retry interface for async operations.

    Implementations re-invoke a zero-argument async operation according to a
    `RetryConfig`. The contract keeps callers decoupled from a specific
    backend (the built-in executor or tenacity).
    """
    async def execute(self, operation: Callable[[], Awaitable[Any]], **overrides) -> Any:  # pragma: no cover - protocol
        """Execute an async callable with retry semantics.

        Args:
            operation: Zero-argument async callable returning a result (or None).
            **overrides: `RetryConfig` fields replacing the defaults for this call
                (max_attempts, initial_delay_ms, backoff_enabled,
                retryable_failure_kinds, log_sink, cancellation_signal).
        Returns:
            Result of the successful invocation.
        Raises:
            The operation's own failure, unmodified, when it is not retryable or
            attempts are exhausted; RetryCancelledError when cancelled between
            attempts.
        """
        ...
