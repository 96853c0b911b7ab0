"""Tests for engine adapters."""

import pytest

from betterprov import engines
from betterprov.engines import CommandError, RecordingEngine, ShellEngine, run_cmd


class FakeCompleted:
    def __init__(self, returncode=0, stdout="", stderr=""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


@pytest.fixture
def fake_run(monkeypatch):
    """Capture subprocess.run calls made by the engines module."""
    calls = []
    outcome = {"result": FakeCompleted()}

    def _run(argv, **kwargs):
        calls.append((argv, kwargs))
        result = outcome["result"]
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(engines.subprocess, "run", _run)
    return calls, outcome


class TestRunCmd:
    """Tests for run_cmd."""

    def test_success(self, fake_run):
        calls, _ = fake_run
        result = run_cmd(["echo", "hi"], env={"A": "1"}, cwd="/tmp")

        assert result.returncode == 0
        argv, kwargs = calls[0]
        assert argv == ["echo", "hi"]
        assert kwargs["cwd"] == "/tmp"
        assert kwargs["env"]["A"] == "1"

    def test_non_zero_exit(self, fake_run):
        _, outcome = fake_run
        outcome["result"] = FakeCompleted(returncode=2, stderr="E: no such package")

        with pytest.raises(CommandError) as exc_info:
            run_cmd(["apt-get", "install", "-y", "nope"])

        assert exc_info.value.exit_code == 2
        assert "E: no such package" in str(exc_info.value)

    def test_missing_executable_gets_hint(self, fake_run):
        _, outcome = fake_run
        outcome["result"] = FileNotFoundError("gem")

        with pytest.raises(CommandError) as exc_info:
            run_cmd(["gem", "install", "bundler", "-v", "1.3.5"])

        assert exc_info.value.exit_code == 127
        assert exc_info.value.hint == engines.TOOL_HINTS["gem"]

    def test_dry_run_does_not_execute(self, fake_run):
        calls, _ = fake_run
        result = run_cmd(["apt-get", "install", "-y", "g++"], dry_run=True)

        assert result.returncode == 0
        assert calls == []


class TestShellEngine:
    """Tests for ShellEngine command construction."""

    def test_package(self, fake_run):
        calls, _ = fake_run
        ShellEngine().ensure_package_installed("libpq-dev")

        argv, kwargs = calls[0]
        assert argv == ["apt-get", "install", "-y", "libpq-dev"]
        assert kwargs["env"]["DEBIAN_FRONTEND"] == "noninteractive"

    def test_tool(self, fake_run):
        calls, _ = fake_run
        ShellEngine().ensure_tool_installed("bundler", "install", "1.3.5")

        assert calls[0][0] == ["gem", "install", "bundler", "-v", "1.3.5"]

    def test_tool_rejects_unknown_action(self):
        with pytest.raises(ValueError, match="Unsupported tool action"):
            ShellEngine().ensure_tool_installed("bundler", "upgrade", "1.3.5")

    def test_command_as_other_user_uses_sudo(self, monkeypatch):
        monkeypatch.setattr(engines.getpass, "getuser", lambda: "vagrant")
        argv = ShellEngine().command_argv("bundle install", user="root")
        assert argv == ["sudo", "-u", "root", "-H", "sh", "-c", "bundle install"]

    def test_command_as_current_user(self, monkeypatch):
        monkeypatch.setattr(engines.getpass, "getuser", lambda: "root")
        assert ShellEngine().command_argv("bundle install", user="root") == ["sh", "-c", "bundle install"]

    def test_no_sudo(self, monkeypatch):
        monkeypatch.setattr(engines.getpass, "getuser", lambda: "vagrant")
        argv = ShellEngine(use_sudo=False).command_argv("bundle install", user="root")
        assert argv == ["sh", "-c", "bundle install"]

    def test_command_runs_in_cwd(self, fake_run, tmp_path):
        calls, _ = fake_run
        ShellEngine().run_command("bundle install", cwd=str(tmp_path))
        assert calls[0][1]["cwd"] == str(tmp_path)

    def test_missing_cwd(self, fake_run, tmp_path):
        calls, _ = fake_run
        with pytest.raises(FileNotFoundError):
            ShellEngine().run_command("bundle install", cwd=str(tmp_path / "missing"))
        assert calls == []

    def test_dry_run_skips_cwd_check(self, fake_run, tmp_path):
        calls, _ = fake_run
        ShellEngine(dry_run=True).run_command("bundle install", cwd=str(tmp_path / "missing"))
        assert calls == []


class TestRecordingEngine:
    """Tests for RecordingEngine."""

    def test_records_calls(self):
        engine = RecordingEngine()
        engine.ensure_package_installed("g++")
        engine.ensure_tool_installed("bundler", "install", "1.3.5")
        engine.run_command("bundle install", user="root", cwd="/vagrant")

        assert engine.calls == [
            ("ensure_package_installed", ("g++",)),
            ("ensure_tool_installed", ("bundler", "install", "1.3.5")),
            ("run_command", ("bundle install", "root", "/vagrant")),
        ]
