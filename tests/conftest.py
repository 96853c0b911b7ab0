"""Shared fixtures for betterprov tests."""

import logging

import pytest

from betterprov.engines import CommandError, RecordingEngine
from betterprov.ui import console as console_mod


class FailingEngine(RecordingEngine):
    """Recording engine that fails for selected package/tool names or commands."""

    def __init__(self, fail_on, exit_code=100):
        super().__init__()
        self.fail_on = set(fail_on)
        self.exit_code = exit_code

    def _maybe_fail(self, key, argv):
        if key in self.fail_on:
            raise CommandError(argv=argv, exit_code=self.exit_code, stderr=f"{key} is broken")

    def ensure_package_installed(self, name):
        super().ensure_package_installed(name)
        self._maybe_fail(name, ["apt-get", "install", "-y", name])

    def ensure_tool_installed(self, name, action, version):
        super().ensure_tool_installed(name, action, version)
        self._maybe_fail(name, ["gem", "install", name, "-v", version])

    def run_command(self, command, *, user=None, cwd=None):
        super().run_command(command, user=user, cwd=cwd)
        self._maybe_fail(command, ["sh", "-c", command])


@pytest.fixture(autouse=True)
def reset_console():
    """Each test starts with a fresh non-debug console."""
    console_mod.set_console(console_mod.Console())
    yield
    console_mod.set_console(console_mod.Console())


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def failing_engine():
    def make(*fail_on, exit_code=100):
        return FailingEngine(fail_on, exit_code=exit_code)
    return make


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI attaches to the betterprov logger."""
    yield
    logger = logging.getLogger("betterprov")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
