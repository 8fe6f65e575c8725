"""
Unit Tests for Logging Configuration
"""

import logging

import pytest
from loguru import logger

from src.config.environment import AppConfig, LoggingConfig
from src.utils.logging import (
    InterceptHandler,
    get_logger,
    setup_logging,
    setup_logging_from_config,
)


@pytest.fixture
def captured():
    messages = []
    yield messages
    logger.remove()


@pytest.mark.unit
class TestSetupLogging:
    """loguru sinks and stdlib interception"""

    def test_stdlib_records_reach_loguru(self, captured):
        setup_logging(level="DEBUG")
        logger.add(lambda message: captured.append(message.record["message"]), level="DEBUG")

        logging.getLogger("src.services.edi.x12_base").info("Tokenized X12 interchange")

        assert "Tokenized X12 interchange" in captured

    def test_root_handler_is_intercept(self, captured):
        setup_logging(level="INFO")
        assert any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers)

    def test_level_filters_records(self, captured):
        setup_logging(level="WARNING")
        logger.add(lambda message: captured.append(message.record["message"]), level="WARNING")

        logging.getLogger("src.services.edi").info("quiet")
        logging.getLogger("src.services.edi").warning("loud")

        assert captured == ["loud"]

    def test_log_file(self, captured, tmp_path):
        log_file = tmp_path / "logs" / "edi.log"
        setup_logging(level="INFO", log_file=str(log_file))
        logger.info("written")
        logger.remove()
        assert log_file.exists()
        assert "written" in log_file.read_text()

    def test_from_config(self, captured, capsys):
        config = AppConfig(logging=LoggingConfig(level="error"))
        setup_logging_from_config(config)

        logging.getLogger("src.services.edi").warning("below configured level")
        logging.getLogger("src.services.edi").error("at configured level")

        err = capsys.readouterr().err
        assert "below configured level" not in err
        assert "at configured level" in err

    def test_get_logger_binds_name(self, captured):
        setup_logging(level="DEBUG")
        logger.add(lambda message: captured.append(message.record["extra"].get("name")), level="DEBUG")

        get_logger("src.services.edi.edi_service").info("bound")

        assert captured == ["src.services.edi.edi_service"]
