"""Composition root: wires settings, logging adapter and a RetryPort backend."""

from typing import Optional

from retry_executor.adapters.logging_adapter import LoggingAdapter
from retry_executor.adapters.retry_tenacity import TenacityRetryAdapter
from retry_executor.core.config import RetryConfig
from retry_executor.core.interfaces.retry import RetryPort
from retry_executor.core.managers.retry_executor import RetryExecutor
from retry_executor.core.settings import RetrySettings, app_settings


def create_retry_executor(
    settings: Optional[RetrySettings] = None,
    logger_name: str = "retry_executor",
    **overrides,
) -> RetryPort:
    """Build the configured RetryPort with a LoggingAdapter as its log sink.

    Args:
        settings: Settings to read from (defaults to the environment-backed `app_settings`)
        logger_name: Name of the stdlib logger the sink writes to
        **overrides: `RetryConfig` fields taking precedence over settings
    """
    settings = settings or app_settings
    sink = LoggingAdapter(logger_name, settings.RETRY_LOG_LEVEL)
    config = RetryConfig.from_settings(settings).with_overrides(log_sink=sink, **overrides)

    if settings.RETRY_BACKEND == "tenacity":
        return TenacityRetryAdapter(config)
    return RetryExecutor(config)
