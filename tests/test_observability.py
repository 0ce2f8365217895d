"""Tests for settings, error payloads and log processors"""

import logging
import sys

import pytest
from pydantic import ValidationError

from splicefs.core.config import Settings, get_settings, reset_settings
from splicefs.core.exceptions import ERROR_CODES, NotFoundError, OutOfRangeError
from splicefs.infrastructure.logging import get_logger, setup_logging
from splicefs.infrastructure.logging_processors import (
    add_error_details,
    add_service_context,
    set_log_severity,
)


class TestSettings:
    """Test configuration loading"""

    def test_defaults(self):
        """Test the default tuning values"""
        settings = Settings(_env_file=None)
        assert settings.default_dir_mode == 0o700
        assert settings.copy_buffer_size == 1 << 20
        assert settings.log_level == "WARNING"
        assert "recycler" in settings.excluded_names

    def test_environment_variables(self, monkeypatch):
        """Test that SPLICEFS_ variables override defaults"""
        monkeypatch.setenv("SPLICEFS_COPY_BUFFER_SIZE", "4096")
        monkeypatch.setenv("SPLICEFS_LOG_FORMAT", "json")
        settings = Settings(_env_file=None)
        assert settings.copy_buffer_size == 4096
        assert settings.log_format == "json"

    @pytest.mark.parametrize("field", ["copy_buffer_size", "splice_chunk_size"])
    def test_chunk_sizes_must_be_positive(self, field):
        """Test that zero chunk sizes are rejected"""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})

    def test_buffer_limit_not_negative(self):
        """Test that a negative buffer limit is rejected and zero is allowed"""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, splice_buffer_limit=-1)
        assert Settings(_env_file=None, splice_buffer_limit=0).splice_buffer_limit == 0

    def test_reset_settings(self):
        """Test that reset_settings replaces the cached instance"""
        custom = Settings(_env_file=None, app_name="other")
        reset_settings(custom)
        assert get_settings() is custom


class TestErrors:
    """Test error payloads"""

    def test_to_dict(self):
        """Test the structured error form"""
        error = OutOfRangeError("Seek beyond end", {"seek": 12, "size": 10})
        assert error.to_dict() == {
            "code": "SPFS-416",
            "message": "Seek beyond end",
            "details": {"seek": 12, "size": 10},
        }

    def test_error_codes_unique(self):
        """Test that every error class has its own code"""
        assert ERROR_CODES[NotFoundError.code]
        assert len(ERROR_CODES) == 11


class TestLogProcessors:
    """Test the custom structlog processors"""

    def test_service_context(self):
        """Test that service name, version and environment are added"""
        event = add_service_context(None, "info", {"event": "x"})
        assert event["service"] == "splicefs"
        assert event["version"] == "0.1.0"
        assert event["environment"] == "production"

    def test_severity(self):
        """Test the severity mapping"""
        assert set_log_severity(None, "warning", {"level": "warning"})["severity"] == "WARNING"
        assert set_log_severity(None, "warn", {})["severity"] == "WARNING"

    def test_error_details_from_exc_info_tuple(self):
        """Test that error code and details of a splicefs error are attached"""
        try:
            raise NotFoundError("missing", {"path": "/x"})
        except NotFoundError:
            event = add_error_details(None, "error", {"exc_info": sys.exc_info()})

        assert event["error_code"] == "SPFS-404"
        assert event["error_details"] == {"path": "/x"}
        assert "exc_info" in event

    def test_error_details_from_current_exception(self):
        """Test that exc_info=True picks up the exception being handled"""
        try:
            raise OutOfRangeError("too far", {"seek": 3})
        except OutOfRangeError:
            event = add_error_details(None, "error", {"exc_info": True})
        assert event["error_code"] == "SPFS-416"

    def test_foreign_errors_ignored(self):
        """Test that other exceptions get no error code"""
        event = add_error_details(None, "error", {"exc_info": ValueError("nope")})
        assert "error_code" not in event


class TestLoggingSetup:
    """Test logger configuration"""

    def test_level_from_settings(self):
        """Test that the package logger follows the configured level"""
        setup_logging(Settings(_env_file=None, log_level="DEBUG"))
        assert logging.getLogger("splicefs").level == logging.DEBUG
        setup_logging(Settings(_env_file=None))
        assert logging.getLogger("splicefs").level == logging.WARNING

    def test_package_logger_does_not_propagate(self):
        """Test that splicefs logs stay off the root logger"""
        setup_logging(Settings(_env_file=None))
        package_logger = logging.getLogger("splicefs")
        assert package_logger.propagate is False
        assert len(package_logger.handlers) == 1

    def test_get_logger(self):
        """Test that get_logger returns a usable bound logger"""
        logger = get_logger("splicefs.tests")
        logger.debug("debug_event", value=1)
