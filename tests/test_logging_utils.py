"""Tests for logging configuration."""

import logging

from betterprov.logging_utils import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_file_gets_info_when_console_is_quiet(self, tmp_path):
        log_path = tmp_path / "logs" / "prov.log"
        configure_logging(level=logging.WARNING, log_path=str(log_path), also_console=False)

        logging.getLogger("betterprov.engines").info("CMD apt-get install -y g++")

        assert "CMD apt-get install -y g++" in log_path.read_text()

    def test_console_handler_keeps_its_level(self, tmp_path):
        configure_logging(level=logging.WARNING, log_path=str(tmp_path / "prov.log"))

        logger = logging.getLogger("betterprov")
        stream = [h for h in logger.handlers if not isinstance(h, logging.FileHandler)]
        assert logger.level == logging.INFO
        assert [h.level for h in stream] == [logging.WARNING]

    def test_null_handler_without_outputs(self):
        configure_logging(also_console=False)

        handlers = logging.getLogger("betterprov").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)

    def test_reconfigure_replaces_handlers(self):
        configure_logging(also_console=True)
        configure_logging(also_console=True)

        assert len(logging.getLogger("betterprov").handlers) == 1
