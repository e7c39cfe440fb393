from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings
from rich import print

from retry_executor.core.interfaces.logging import LoggingPort

# using pydantic_settings to manage environment variables
# and do automatic type casting in a central place
class RetrySettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }
    RETRY_LOG_LEVEL: str = "INFO"
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY_MS: int = 1000
    RETRY_BACKOFF_ENABLED: bool = True
    # Which RetryPort implementation the composition root hands out
    RETRY_BACKEND: Literal["builtin", "tenacity"] = "builtin"

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("Retry settings:")
        print(self)

    @field_validator("RETRY_LOG_LEVEL", mode="before")
    def normalize_log_level(cls, value: str) -> str:
        """Accept lower-case level names from the environment."""
        return str(value).upper().strip()


app_settings = RetrySettings()
