# src/betterprov/dsl.py
from __future__ import annotations

from typing import Iterable, List, Optional

from .model import ProvisioningStep, StepKind, TOOL_ACTIONS


def _require_name(kind: str, name: str) -> str:
    if not name or not name.strip():
        raise ValueError(f"{kind}() needs a non-empty name")
    return name


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def package(name: str) -> ProvisioningStep:
    """Ensure an OS package is installed."""
    return ProvisioningStep(kind=StepKind.INSTALL_OS_PACKAGE, name=_require_name("package", name))


def gem_package(name: str, *, version: str, action: str = "install") -> ProvisioningStep:
    """Ensure an exact version of a package-manager tool is installed."""
    _require_name("gem_package", name)
    if not version or not version.strip():
        raise ValueError(f"gem_package({name!r}) needs an exact version")
    if action not in TOOL_ACTIONS:
        raise ValueError(f"gem_package({name!r}): unsupported action {action!r}, expected one of {TOOL_ACTIONS}")
    return ProvisioningStep(
        kind=StepKind.INSTALL_TOOL_VERSION,
        name=name,
        version=version,
        action=action,
    )


def execute(
    name: str,
    command: str,
    *,
    user: str | None = None,
    cwd: str | None = None,
    requires: Optional[Iterable[str]] = None,
) -> ProvisioningStep:
    """Run a shell command once per provisioning run."""
    _require_name("execute", name)
    if not command or not command.strip():
        raise ValueError(f"execute({name!r}) needs a command")
    return ProvisioningStep(
        kind=StepKind.RUN_COMMAND,
        name=name,
        command=command,
        user=user,
        cwd=cwd,
        requires=(requires,) if isinstance(requires, str) else tuple(requires or ()),
    )


# ---------------------------------------------------------------------
# Builder API
# ---------------------------------------------------------------------

class RecipeBuilder:
    def __init__(self, name: str):
        self.name = name
        self._steps: list[ProvisioningStep] = []

    def package(self, *names: str):
        self._steps.extend(package(n) for n in names)
        return self

    def gem_package(self, name: str, *, version: str, action: str = "install"):
        self._steps.append(gem_package(name, version=version, action=action))
        return self

    def execute(self, name: str, command: str, *, user: str | None = None,
                cwd: str | None = None, requires: Optional[Iterable[str]] = None):
        self._steps.append(execute(name, command, user=user, cwd=cwd, requires=requires))
        return self

    def build(self) -> List[ProvisioningStep]:
        if not self._steps:
            raise ValueError(f"Recipe '{self.name}' has no steps")
        return list(self._steps)


def build(name: str) -> RecipeBuilder:
    """Convenience: build('dev').package('g++').build()"""
    return RecipeBuilder(name)


# ---------------------------------------------------------------------
# Recipe helper (single-file story)
# ---------------------------------------------------------------------

def recipe(*steps: ProvisioningStep) -> List[ProvisioningStep]:
    """
    Recipe definition helper.

    Users can write:
        from betterprov import recipe, package, execute

        def steps():
            return recipe(
                package("g++"),
                execute("Say hi", "echo hi"),
            )

    Or define STEPS directly:
        STEPS = recipe(package(...), ...)
    """
    return list(steps)
