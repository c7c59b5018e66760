"""
Tests for logger functionality.
"""

import pytest
from talentledger.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["writes_attempted"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        # Should not raise exceptions
        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_context_is_serialized(self, tmp_path):
        """Context values, dates included, end up in the log line."""
        from datetime import datetime

        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Hour entry logged", entry_id="h1", entry_date=datetime(2025, 1, 20))

        content = next(tmp_path.glob("*.log")).read_text()
        assert '"entry_id": "h1"' in content
        assert "2025-01-20 00:00:00" in content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        for _ in range(4):
            logger.record_write()
        logger.record_write_failure("IntegrityError")
        logger.record_entry_logged()
        logger.record_marked_paid(3)
        logger.record_payment()

        metrics = logger.get_metrics()

        assert metrics["writes_attempted"] == 4
        assert metrics["writes_failed"] == 1
        assert metrics["errors_by_type"]["IntegrityError"] == 1
        assert metrics["entries_logged"] == 1
        assert metrics["records_marked_paid"] == 3
        assert metrics["payments_recorded"] == 1
        assert metrics["write_failure_rate"] == pytest.approx(0.25)

    def test_failure_rate_without_writes(self, tmp_path):
        """Failure rate should be zero before any writes."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        assert logger.get_metrics()["write_failure_rate"] == 0

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")
        logger.log_metrics_summary()

        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1
        assert log_files[0].name.startswith("talentledger_")

        log_content = log_files[0].read_text()
        assert "Test message" in log_content
        assert "Ledger Session Metrics" in log_content


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_payment()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2.metrics["payments_recorded"] == 0
