"""Tests for core infrastructure modules."""

import json
import logging
import pytest

from credstore.base.config import HelperConfig, load_config
from credstore.base.exceptions import ConfigurationError, TransientTransportError, TransportError
from credstore.base.retry import retry
from credstore.base.logger import CredstoreLogger, StructuredFormatter


# ══════════════════════════════════════════════════════════════════════
# Config
# ══════════════════════════════════════════════════════════════════════

class TestHelperConfig:
    def test_explicit_values(self):
        cfg = HelperConfig(secret_name="docker-creds", region_name="us-west-2")
        assert cfg.secret_name == "docker-creds"
        assert cfg.region_name == "us-west-2"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("DOCKER_SECRETSMANAGER_NAME", "env-creds")
        monkeypatch.setenv("DOCKER_SECRETSMANAGER_KEY_ARN", "arn:key")
        monkeypatch.setenv("DOCKER_SECRETSMANAGER_OPTIMISTIC_LOCK", "true")
        monkeypatch.setenv("DOCKER_SECRETSMANAGER_MAX_ATTEMPTS", "5")
        monkeypatch.delenv("AWS_REGION", raising=False)
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
        cfg = HelperConfig()
        assert cfg.secret_name == "env-creds"
        assert cfg.key_arn == "arn:key"
        assert cfg.optimistic_lock is True
        assert cfg.max_attempts == 5
        assert cfg.region_name == "eu-west-1"

    def test_aws_region_preferred(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "ap-south-1")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
        cfg = HelperConfig(secret_name="docker-creds")
        assert cfg.region_name == "ap-south-1"

    def test_explicit_beats_env(self, monkeypatch):
        monkeypatch.setenv("DOCKER_SECRETSMANAGER_NAME", "env-creds")
        cfg = HelperConfig(secret_name="explicit")
        assert cfg.secret_name == "explicit"

    def test_defaults(self, monkeypatch):
        for var in ("DOCKER_SECRETSMANAGER_OPTIMISTIC_LOCK", "DOCKER_SECRETSMANAGER_LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)
        cfg = HelperConfig(secret_name="docker-creds")
        assert cfg.optimistic_lock is False
        assert cfg.log_level == "WARNING"

    def test_log_level_normalized(self):
        cfg = HelperConfig(secret_name="docker-creds", log_level="debug")
        assert cfg.log_level == "DEBUG"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            HelperConfig(secret_name="docker-creds", project_id="p")


class TestLoadConfig:
    def test_valid(self):
        cfg = load_config({"secret_name": "docker-creds"})
        assert isinstance(cfg, HelperConfig)

    def test_missing_secret_name(self, monkeypatch):
        monkeypatch.delenv("DOCKER_SECRETSMANAGER_NAME", raising=False)
        with pytest.raises(ConfigurationError, match="secret_name"):
            load_config()

    def test_bad_log_level(self):
        with pytest.raises(ConfigurationError, match="log level"):
            load_config({"secret_name": "docker-creds", "log_level": "LOUD"})


# ══════════════════════════════════════════════════════════════════════
# Retry
# ══════════════════════════════════════════════════════════════════════

class TestRetry:
    def test_success_no_retry(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0)
        def ok():
            nonlocal call_count
            call_count += 1
            return "ok"

        assert ok() == "ok"
        assert call_count == 1

    def test_retries_transient_by_default(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0)
        def fail_twice():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise TransientTransportError("throttled")
            return "ok"

        assert fail_twice() == "ok"
        assert call_count == 3

    def test_max_attempts_exceeded(self):
        @retry(max_attempts=2, base_delay=0, retryable_exceptions=(ValueError,))
        def always_fail():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            always_fail()

    def test_non_retryable_raises_immediately(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0)
        def denied():
            nonlocal call_count
            call_count += 1
            raise TransportError("access denied")

        with pytest.raises(TransportError):
            denied()
        assert call_count == 1


# ══════════════════════════════════════════════════════════════════════
# Logger
# ══════════════════════════════════════════════════════════════════════

class TestCredstoreLogger:
    def test_log_operation(self, capfd):
        logger = CredstoreLogger("test_cs")
        logger.set_level("DEBUG")
        logger.info("wrote map", command="store", secret_id="docker-creds", operation="put_secret")
        captured = capfd.readouterr()
        assert captured.out == ""
        entry = json.loads(captured.err.strip().splitlines()[-1])
        assert entry["message"] == "wrote map"
        assert entry["command"] == "store"
        assert entry["secret_id"] == "docker-creds"
        assert entry["request_id"] == logger.request_id

    def test_below_threshold_dropped(self, capfd):
        logger = CredstoreLogger("test_cs_quiet")
        logger.debug("hidden")
        assert "hidden" not in capfd.readouterr().err

    def test_structured_formatter(self):
        fmt = StructuredFormatter()
        record = logging.LogRecord(
            name="test", level=logging.INFO, pathname="", lineno=0,
            msg="hi", args=(), exc_info=None,
        )
        record.operation = "get_secret_value"
        entry = json.loads(fmt.format(record))
        assert entry["message"] == "hi"
        assert entry["level"] == "INFO"
        assert entry["operation"] == "get_secret_value"
        assert "command" not in entry
