"""
Tests for logging helpers.
"""

import logging

from rich.logging import RichHandler

from sg_lifecycle.core.logging import kv, setup_logging


def test_kv_renders_pairs_in_order():
    assert kv(resourceID="default/web/sg", securityGroupID="sg-123") == (
        "resourceID=default/web/sg securityGroupID=sg-123"
    )


def test_kv_empty():
    assert kv() == ""


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_installs_rich_handler(self):
        setup_logging(level="DEBUG")
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in root.handlers)
        assert logging.getLogger("botocore").level == logging.WARNING

    def test_writes_log_file(self, tmp_path):
        """Test records also reach the log file."""
        log_file = tmp_path / "sg-lifecycle.log"
        setup_logging(level="INFO", log_file=str(log_file))

        logging.getLogger("sg_lifecycle.test").info(
            "deleted securityGroup %s", kv(securityGroupID="sg-123")
        )
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "deleted securityGroup securityGroupID=sg-123" in content
        assert "INFO" in content

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO
