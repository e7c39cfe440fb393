import logging
from typing import Optional

from retry_executor.core.interfaces.logging import LoggingPort
from retry_executor.core.logging_config import coerce_level


class LoggingAdapter(LoggingPort):
    """Concrete logging adapter.

    Delegates to Python's logging. It does NOT add its own handlers so that
    central `configure_logging` controls sinks.
    """

    def __init__(self, name: str = "retry_executor", log_level: int | str = logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(coerce_level(log_level))
        # Allow messages to bubble to root handlers (separate sinks)
        self.logger.propagate = True
        self.logger.debug("Initialized logger name=%s level=%s", name, self.logger.level)

    def info(self, msg: str, *args):
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args):
        self.logger.warning(msg, *args)

    def error(self, msg: str, exc: Optional[BaseException] = None):
        # exc_info=None logs without a traceback
        self.logger.error(msg, exc_info=exc)

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)
