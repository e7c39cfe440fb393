from retry_executor.adapters.cancellation_asyncio import AsyncioCancellationSignal
from retry_executor.adapters.logging_adapter import LoggingAdapter
from retry_executor.adapters.retry_tenacity import TenacityRetryAdapter
from retry_executor.core.config import RetryConfig
from retry_executor.core.exceptions import (
    RetryCancelledError,
    RetryExecutorError,
    RetryInvariantError,
)
from retry_executor.core.managers.retry_executor import (
    RetryExecutor,
    classify_failure,
    is_retryable,
    retry_async,
    retryable,
    wait_for_next_attempt,
)
from retry_executor.factory import create_retry_executor

__all__ = [
    "AsyncioCancellationSignal",
    "LoggingAdapter",
    "RetryCancelledError",
    "RetryConfig",
    "RetryExecutor",
    "RetryExecutorError",
    "RetryInvariantError",
    "TenacityRetryAdapter",
    "classify_failure",
    "create_retry_executor",
    "is_retryable",
    "retry_async",
    "retryable",
    "wait_for_next_attempt",
]
