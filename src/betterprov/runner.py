# runner.py
from __future__ import annotations

import logging
import runpy
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set

from .engines import CommandError, Engine
from .model import ProvisioningStep, StepKind
from .plan import check_steps
from .ui.console import get_console

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Recipe loading (local file)
# ----------------------------------------------------------------------

def load_recipe(path: str | Path) -> List[ProvisioningStep]:
    """
    Load a recipe from a python file path.

    The file must define either:
      - steps() -> List[ProvisioningStep]
      - STEPS = [ProvisioningStep, ...]
    """
    recipe_path = Path(path).expanduser().resolve()
    if not recipe_path.exists():
        raise FileNotFoundError(f"Recipe file not found: {recipe_path}")
    if recipe_path.suffix != ".py":
        raise ValueError(f"Recipe must be a .py file, got: {recipe_path.name}")

    module_name = f"betterprov_recipe_{recipe_path.stem}"
    globals_dict = runpy.run_path(str(recipe_path), run_name=module_name)

    steps = None
    if "steps" in globals_dict and callable(globals_dict["steps"]):
        steps = globals_dict["steps"]()
    elif "STEPS" in globals_dict:
        steps = globals_dict["STEPS"]

    if not isinstance(steps, list) or not all(isinstance(s, ProvisioningStep) for s in steps):
        raise TypeError(
            "Recipe must return/define a List[ProvisioningStep]. "
            "Define steps() -> List[ProvisioningStep] or STEPS = [ProvisioningStep, ...]."
        )

    return steps


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class StepFailure(Exception):
    step: str
    kind: str
    detail: str
    exit_code: Optional[int] = None

    def __str__(self) -> str:
        code = f" (exit={self.exit_code})" if self.exit_code is not None else ""
        return f"step '{self.step}' failed{code}: {self.detail}"


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def apply_step(step: ProvisioningStep, engine: Engine) -> None:
    """Hand one step to the engine; wrap whatever it raises in StepFailure."""
    kind = str(getattr(step.kind, "value", step.kind))
    try:
        if step.kind is StepKind.INSTALL_OS_PACKAGE:
            engine.ensure_package_installed(step.name)
        elif step.kind is StepKind.INSTALL_TOOL_VERSION:
            engine.ensure_tool_installed(step.name, step.action or "install", step.version or "")
        elif step.kind is StepKind.RUN_COMMAND:
            engine.run_command(step.command or "", user=step.user, cwd=step.cwd)
        else:
            raise ValueError(f"Unknown step kind: {step.kind!r}")
    except CommandError as e:
        raise StepFailure(step=step.label, kind=kind, detail=str(e), exit_code=e.exit_code) from e
    except (OSError, ValueError) as e:
        raise StepFailure(step=step.label, kind=kind, detail=str(e)) from e


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def apply_steps(
    steps: List[ProvisioningStep],
    engine: Engine,
    *,
    fail_fast: bool = True,
) -> Dict[str, str]:
    """
    Apply steps in declared order.

    Returns {step.label: status} in step order, status one of
    "ok", "failed", "not-run". With fail_fast the first failure stops the
    run; otherwise only steps requiring something a failed step provides
    are held back.
    """
    steps = check_steps(steps)
    console = get_console()

    results: Dict[str, str] = {}
    broken: Set[str] = set()
    aborted = False

    for step in steps:
        if aborted or broken.intersection(step.requires):
            results[step.label] = "not-run"
            if step.provides:
                broken.add(step.provides)
            continue

        console.print_step(step.label)
        logger.info("Applying %s", step.label)
        try:
            apply_step(step, engine)
        except StepFailure as e:
            results[step.label] = "failed"
            logger.error("%s", e)
            console.print_failure(step.label, e.detail, exit_code=e.exit_code)
            if step.provides:
                broken.add(step.provides)
            if fail_fast:
                aborted = True
            continue

        results[step.label] = "ok"

    return results
