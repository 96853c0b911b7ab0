# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class StepKind(str, Enum):
    """What a provisioning step asks the engine to do."""
    INSTALL_OS_PACKAGE = "install-os-package"
    INSTALL_TOOL_VERSION = "install-tool-version"
    RUN_COMMAND = "run-command"


TOOL_ACTIONS = ("install",)


@dataclass(frozen=True)
class ProvisioningStep:
    """
    A single declaration inside a recipe.

    Which optional fields apply depends on `kind`:
      - install-tool-version: version, action
      - run-command: command, user, cwd
    `requires` lists tool/package names that an earlier step must provide.
    """
    kind: StepKind
    name: str

    version: Optional[str] = None
    action: Optional[str] = None

    command: Optional[str] = None
    user: Optional[str] = None
    cwd: Optional[str] = None

    requires: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        kind = getattr(self.kind, "value", self.kind)
        return f"{kind}[{self.name}]"

    @property
    def provides(self) -> str | None:
        # a command leaves nothing behind that later steps can depend on by name
        if self.kind is StepKind.RUN_COMMAND:
            return None
        return self.name


def step_to_dict(step: ProvisioningStep) -> dict:
    """
    Convert a step to a plain dictionary (for `betterprov list --json`).
    Fields that do not apply to the step's kind are left out.
    """
    step_dict = {
        "kind": step.kind.value,
        "name": step.name,
    }
    for key in ("version", "action", "command", "user", "cwd"):
        value = getattr(step, key)
        if value is not None:
            step_dict[key] = value
    if step.requires:
        step_dict["requires"] = list(step.requires)
    return step_dict
