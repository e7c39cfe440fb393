"""Unit tests for RetryConfig validation and RetrySettings loading."""

import pytest
from pydantic import ValidationError
from unittest.mock import Mock

from retry_executor.core.config import RetryConfig
from retry_executor.core.settings import RetrySettings
from retry_executor.core.interfaces.logging import LoggingPort
from retry_executor.adapters.cancellation_asyncio import AsyncioCancellationSignal


@pytest.fixture
def clean_env(monkeypatch):
    """Remove RETRY_* variables that could leak in from the host environment."""
    for key in (
        "RETRY_LOG_LEVEL",
        "RETRY_MAX_ATTEMPTS",
        "RETRY_INITIAL_DELAY_MS",
        "RETRY_BACKOFF_ENABLED",
        "RETRY_BACKEND",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestRetryConfig:
    """Test RetryConfig defaults and validation."""

    def test_defaults(self):
        config = RetryConfig()

        assert config.max_attempts == 3
        assert config.initial_delay_ms == 1000
        assert config.backoff_enabled is True
        assert config.retryable_failure_kinds is None
        assert config.log_sink is None
        assert config.cancellation_signal is None

    @pytest.mark.parametrize("field,value", [
        ("max_attempts", 0),
        ("max_attempts", -1),
        ("initial_delay_ms", -5),
    ])
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            RetryConfig(**{field: value})

    def test_rejects_unknown_field(self):
        with pytest.raises(ValidationError):
            RetryConfig(times=3)

    def test_is_immutable(self):
        config = RetryConfig()

        with pytest.raises(ValidationError):
            config.max_attempts = 10

    def test_kinds_accept_any_iterable(self):
        config = RetryConfig(retryable_failure_kinds=[TimeoutError, ConnectionError])

        assert config.retryable_failure_kinds == frozenset({TimeoutError, ConnectionError})

    def test_single_kind_shorthand(self):
        config = RetryConfig(retryable_failure_kinds=TimeoutError)

        assert config.retryable_failure_kinds == frozenset({TimeoutError})

    def test_kinds_must_be_exception_classes(self):
        with pytest.raises(ValidationError):
            RetryConfig(retryable_failure_kinds=["TimeoutError"])

    def test_accepts_collaborators(self):
        sink = Mock(spec=LoggingPort)
        signal = AsyncioCancellationSignal()

        config = RetryConfig(log_sink=sink, cancellation_signal=signal)

        assert config.log_sink is sink
        assert config.cancellation_signal is signal

    def test_rejects_invalid_collaborators(self):
        with pytest.raises(ValidationError):
            RetryConfig(log_sink="stdout")
        with pytest.raises(ValidationError):
            RetryConfig(cancellation_signal=True)

    def test_with_overrides_returns_copy(self):
        base = RetryConfig(max_attempts=5)

        changed = base.with_overrides(backoff_enabled=False)

        assert changed is not base
        assert changed.max_attempts == 5
        assert changed.backoff_enabled is False
        assert base.backoff_enabled is True

    def test_with_no_overrides_is_identity(self):
        base = RetryConfig()

        assert base.with_overrides() is base

    def test_with_overrides_validates(self):
        with pytest.raises(ValidationError):
            RetryConfig().with_overrides(max_attempts=0)


class TestRetrySettings:
    """Test environment driven settings."""

    def test_defaults(self, clean_env):
        settings = RetrySettings(_env_file=None)

        assert settings.RETRY_LOG_LEVEL == "INFO"
        assert settings.RETRY_MAX_ATTEMPTS == 3
        assert settings.RETRY_INITIAL_DELAY_MS == 1000
        assert settings.RETRY_BACKOFF_ENABLED is True
        assert settings.RETRY_BACKEND == "builtin"

    def test_reads_environment(self, clean_env):
        clean_env.setenv("RETRY_MAX_ATTEMPTS", "7")
        clean_env.setenv("RETRY_INITIAL_DELAY_MS", "250")
        clean_env.setenv("RETRY_BACKOFF_ENABLED", "false")
        clean_env.setenv("RETRY_LOG_LEVEL", "debug")

        settings = RetrySettings(_env_file=None)

        assert settings.RETRY_MAX_ATTEMPTS == 7
        assert settings.RETRY_INITIAL_DELAY_MS == 250
        assert settings.RETRY_BACKOFF_ENABLED is False
        assert settings.RETRY_LOG_LEVEL == "DEBUG"

    def test_rejects_unknown_backend(self, clean_env):
        clean_env.setenv("RETRY_BACKEND", "celery")

        with pytest.raises(ValidationError):
            RetrySettings(_env_file=None)

    def test_config_from_settings(self, clean_env):
        settings = RetrySettings(
            _env_file=None,
            RETRY_MAX_ATTEMPTS=4,
            RETRY_INITIAL_DELAY_MS=50,
            RETRY_BACKOFF_ENABLED=False,
        )

        config = RetryConfig.from_settings(settings)

        assert config.max_attempts == 4
        assert config.initial_delay_ms == 50
        assert config.backoff_enabled is False
        assert config.log_sink is None

    def test_print_settings_logs_header(self, clean_env, capsys):
        sink = Mock(spec=LoggingPort)

        RetrySettings(_env_file=None).print_settings(sink)

        sink.info.assert_called_once_with("Retry settings:")
        assert "RETRY_MAX_ATTEMPTS" in capsys.readouterr().out
