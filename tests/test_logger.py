"""
Tests for the category logger.
"""

import io

from utils.logger import Logger, get_category_logger, get_logger
from models.enums import LogCategory, LogLevel


def plain_logger(level=LogLevel.DEBUG):
    stream = io.StringIO()
    return Logger(min_level=level, use_colors=False, stream=stream), stream


class TestLoggerFormat:

    def test_message_and_details(self):
        logger, stream = plain_logger()

        logger.info(LogCategory.GEOMETRY, "Padding computed", top=5, left=12)
        lines = stream.getvalue().splitlines()

        assert "GEOMETRY" in lines[0]
        assert lines[0].endswith("✓ Padding computed")
        assert lines[1].endswith("├─ top: 5")
        assert lines[2].endswith("└─ left: 12")

    def test_no_color_codes_when_disabled(self):
        logger, stream = plain_logger()

        logger.error(LogCategory.RENDER, "write failed")

        assert "\x1b[" not in stream.getvalue()

    def test_level_filter(self):
        logger, stream = plain_logger(LogLevel.WARN)

        logger.info(LogCategory.PACING, "hidden")
        logger.warn(LogCategory.PACING, "shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()


class TestLoggerHold:

    def test_hold_buffers_until_release(self):
        logger, stream = plain_logger()

        logger.hold()
        logger.info(LogCategory.SYSTEM, "later")
        assert stream.getvalue() == ""
        assert logger.is_held

        logger.release()
        assert "later" in stream.getvalue()
        assert not logger.is_held

    def test_release_without_hold(self):
        logger, stream = plain_logger()

        logger.release()

        assert stream.getvalue() == ""


class TestBoundLogger:

    def test_bound_category(self, log_stream):
        get_category_logger(LogCategory.SOURCE).info("probing")

        assert "SOURCE" in log_stream.getvalue()

    def test_category_override(self, log_stream):
        get_logger().for_category(LogCategory.SOURCE).with_category(LogCategory.CONFIG).info("loaded")

        assert "CONFIG" in log_stream.getvalue()
