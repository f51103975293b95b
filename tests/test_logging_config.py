import logging
import logging.handlers

import pytest
import structlog

from shared.config.logging_config import _parse_size, configure_logging


@pytest.mark.parametrize("size, expected", [
    ("512", 512),
    ("10KB", 10 * 1024),
    ("10mb", 10 * 1024 * 1024),
    (" 1GB ", 1024 ** 3),
])
def test_parse_size(size, expected) -> None:
    assert _parse_size(size) == expected


def test_configure_logging_creates_rotating_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "facecam.log"
    try:
        configure_logging(log_level="DEBUG", log_format="json", log_file_path=log_file, log_max_size="1KB")

        root = logging.getLogger()
        rotating = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert root.level == logging.DEBUG
        assert rotating and rotating[0].maxBytes == 1024

        structlog.get_logger("facecam.test").info("hello", faces=2)
        for handler in root.handlers:
            handler.flush()
        assert '"faces": 2' in log_file.read_text(encoding="utf-8")
    finally:
        for handler in logging.getLogger().handlers[:]:
            handler.close()
            logging.getLogger().removeHandler(handler)
        structlog.reset_defaults()


def test_unknown_log_format_is_rejected(tmp_path) -> None:
    with pytest.raises(ValueError):
        configure_logging(log_format="xml", log_file_path=tmp_path / "x.log")
