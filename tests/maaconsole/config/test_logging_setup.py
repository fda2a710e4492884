import logging

import pytest

from maaconsole.config.setup import LOG_FORMAT, setup_logging, verbosity_level


@pytest.fixture
def logger_name():
    name = "maaconsole.test_logging_setup"
    root = logging.getLogger()
    root_level, root_handlers = root.level, list(root.handlers)
    yield name
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    root.setLevel(root_level)
    for handler in root_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)


class TestVerbosityLevel:
    """Tests for mapping -v counts to levels."""

    def test_levels(self):
        assert verbosity_level(0) == logging.WARNING
        assert verbosity_level(1) == logging.INFO
        assert verbosity_level(2) == logging.DEBUG
        assert verbosity_level(5) == logging.DEBUG


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_numeric_level(self, logger_name):
        logger = setup_logging(logging.DEBUG, name=logger_name)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt == LOG_FORMAT

    def test_level_name(self, logger_name):
        logger = setup_logging("info", name=logger_name)

        assert logger.level == logging.INFO

    def test_unknown_level_name(self, logger_name):
        with pytest.raises(ValueError, match="Unknown log level: loud"):
            setup_logging("loud", name=logger_name)

    def test_repeated_setup_adds_one_handler(self, logger_name):
        setup_logging(logging.INFO, name=logger_name)
        logger = setup_logging(logging.WARNING, name=logger_name)

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_missing_logging_config_falls_back_to_level(self, logger_name, temp_dir):
        logger = setup_logging(logging.ERROR, logging_config=temp_dir / "missing.ini", name=logger_name)

        assert logger.level == logging.ERROR

    def test_logging_config_file(self, logger_name, temp_dir):
        ini = temp_dir / "logging.ini"
        ini.write_text(
            "[loggers]\n"
            "keys=root,target\n"
            "\n"
            "[handlers]\n"
            "keys=null\n"
            "\n"
            "[formatters]\n"
            "keys=\n"
            "\n"
            "[logger_root]\n"
            "level=WARNING\n"
            "handlers=\n"
            "\n"
            "[logger_target]\n"
            "level=DEBUG\n"
            "handlers=null\n"
            f"qualname={logger_name}\n"
            "propagate=0\n"
            "\n"
            "[handler_null]\n"
            "class=NullHandler\n"
            "args=()\n"
        )

        logger = setup_logging(logging.ERROR, logging_config=ini, name=logger_name)

        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0], logging.NullHandler)
