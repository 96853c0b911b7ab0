# engines.py
# Adapters between recipe steps and the tools that actually change the machine.
# Whether a package is already present, or a gem already at the pinned
# version, is left to apt-get and gem themselves.

from __future__ import annotations

import getpass
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Protocol, Sequence, Tuple

from .model import TOOL_ACTIONS

logger = logging.getLogger(__name__)


TOOL_HINTS = {
    "apt-get": "Run on a Debian/Ubuntu host or provide a different engine.",
    "gem": "Install Ruby (includes gem) or fix PATH.",
    "sudo": "Install sudo, run as the target user, or pass --no-sudo.",
    "sh": "A POSIX shell is required to run commands.",
}


class Engine(Protocol):
    """The primitives a recipe is applied through."""

    def ensure_package_installed(self, name: str) -> None:
        ...

    def ensure_tool_installed(self, name: str, action: str, version: str) -> None:
        ...

    def run_command(self, command: str, *, user: str | None = None, cwd: str | None = None) -> None:
        ...


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class CommandError(Exception):
    argv: List[str]
    exit_code: int
    stderr: str = ""
    hint: str | None = None

    def __str__(self) -> str:
        msg = f"Command failed (exit={self.exit_code}): {_fmt_argv(self.argv)}"
        if self.stderr:
            msg += f"\n{self.stderr.strip()}"
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


@dataclass(frozen=True)
class CmdResult:
    argv: List[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command, log it, and raise CommandError on non-zero exit."""
    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            capture_output=True,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        tool = argv_list[0]
        raise CommandError(
            argv=argv_list,
            exit_code=127,
            stderr=str(e),
            hint=TOOL_HINTS.get(tool, f"Install {tool} or fix PATH."),
        ) from e

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if p.returncode != 0:
        raise CommandError(argv=argv_list, exit_code=p.returncode, stderr=p.stderr[-4000:])

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


# ----------------------------------------------------------------------
# Engines
# ----------------------------------------------------------------------

class ShellEngine:
    """Applies steps with apt-get, gem and sh on the local machine."""

    def __init__(self, *, dry_run: bool = False, use_sudo: bool = True):
        self.dry_run = dry_run
        self.use_sudo = use_sudo

    def ensure_package_installed(self, name: str) -> None:
        run_cmd(
            ["apt-get", "install", "-y", name],
            env={"DEBIAN_FRONTEND": "noninteractive"},
            dry_run=self.dry_run,
        )

    def ensure_tool_installed(self, name: str, action: str, version: str) -> None:
        if action not in TOOL_ACTIONS:
            raise ValueError(f"Unsupported tool action {action!r} for {name}")
        run_cmd(["gem", "install", name, "-v", version], dry_run=self.dry_run)

    def command_argv(self, command: str, *, user: str | None = None) -> List[str]:
        argv = ["sh", "-c", command]
        if user and self.use_sudo and user != getpass.getuser():
            argv = ["sudo", "-u", user, "-H", *argv]
        return argv

    def run_command(self, command: str, *, user: str | None = None, cwd: str | None = None) -> None:
        if cwd is not None and not self.dry_run and not Path(cwd).is_dir():
            raise FileNotFoundError(f"Working directory not found: {cwd}")
        run_cmd(self.command_argv(command, user=user), cwd=cwd, dry_run=self.dry_run)


@dataclass
class RecordingEngine:
    """Records primitive calls in order without touching the machine."""
    calls: List[Tuple[str, Tuple[Any, ...]]] = field(default_factory=list)

    def ensure_package_installed(self, name: str) -> None:
        logger.info("would install package %s", name)
        self.calls.append(("ensure_package_installed", (name,)))

    def ensure_tool_installed(self, name: str, action: str, version: str) -> None:
        logger.info("would %s %s %s", action, name, version)
        self.calls.append(("ensure_tool_installed", (name, action, version)))

    def run_command(self, command: str, *, user: str | None = None, cwd: str | None = None) -> None:
        logger.info("would run %r as %s in %s", command, user or "<current>", cwd or ".")
        self.calls.append(("run_command", (command, user, cwd)))
