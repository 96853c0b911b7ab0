# plan.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .model import ProvisioningStep, StepKind


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    step: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.step}: {self.message}"


@dataclass
class RecipeError(Exception):
    """Raised when a recipe fails validation; nothing has been applied yet."""
    issues: List[ValidationIssue]

    def __str__(self) -> str:
        lines = [f"Recipe is invalid ({len(self.issues)} issue(s))"]
        lines.extend(f"  {issue}" for issue in self.issues)
        return "\n".join(lines)


def _field_issues(step: ProvisioningStep) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    def bad(msg: str) -> None:
        issues.append(ValidationIssue("invalid-field", step.label, msg))

    if not isinstance(step.kind, StepKind):
        # nothing else can be checked for an unknown kind
        return [ValidationIssue("unknown-kind", step.label,
                                f"kind {step.kind!r} is not one of {[k.value for k in StepKind]}")]

    if step.kind is StepKind.INSTALL_TOOL_VERSION:
        if not step.version:
            bad("tool install needs an exact version")
        if step.action != "install":
            bad(f"unsupported action {step.action!r}")
    elif step.version is not None or step.action is not None:
        bad("version/action only apply to install-tool-version")

    if step.kind is StepKind.RUN_COMMAND:
        if not step.command:
            bad("run-command needs a command")
    elif step.command is not None or step.user is not None or step.cwd is not None:
        bad("command/user/cwd only apply to run-command")

    return issues


def validate_steps(steps: Iterable[ProvisioningStep]) -> List[ValidationIssue]:
    """
    Structural checks over an ordered step list.

    A name listed in `requires` must be provided by an install step that
    comes earlier in the list.
    """
    steps = list(steps)
    issues: List[ValidationIssue] = []

    first_provider: Dict[str, int] = {}
    for idx, step in enumerate(steps):
        provided = step.provides if isinstance(step.kind, StepKind) else None
        if provided is not None:
            first_provider.setdefault(provided, idx)

    labels = [s.label for s in steps]
    for label in sorted({n for n in labels if labels.count(n) > 1}):
        issues.append(ValidationIssue("duplicate-step", label, "declared more than once"))

    for idx, step in enumerate(steps):
        issues.extend(_field_issues(step))

        for dep in step.requires:
            where = first_provider.get(dep)
            if where is None:
                issues.append(ValidationIssue(
                    "unsatisfied-dependency",
                    step.label,
                    f"requires '{dep}' but no step installs it. "
                    f"Known: {sorted(first_provider)}",
                ))
            elif where > idx:
                issues.append(ValidationIssue(
                    "dependency-order",
                    step.label,
                    f"requires '{dep}', which is only installed later by {steps[where].label}",
                ))

    return issues


def check_steps(steps: Iterable[ProvisioningStep]) -> List[ProvisioningStep]:
    """Validate and return the steps as a list, or raise RecipeError."""
    steps = list(steps)
    issues = validate_steps(steps)
    if issues:
        raise RecipeError(issues)
    return steps
