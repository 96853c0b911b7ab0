# step_workflows/bundler.py
from __future__ import annotations

from typing import List

from ..dsl import execute, gem_package
from ..model import ProvisioningStep


# ---------------------------------------------------------------------
# Bundler helpers
# ---------------------------------------------------------------------

def bundler(version: str) -> ProvisioningStep:
    """Pin the bundler gem to an exact version."""
    return gem_package("bundler", version=version)


def bundle_install(
    name: str = "Run Bundler Install",
    *,
    cwd: str,
    user: str | None = None,
    args: str | None = None,
) -> ProvisioningStep:
    """`bundle install` in a project directory; requires the bundler gem."""
    cmd = "bundle install"
    if args:
        cmd = f"{cmd} {args}"
    return execute(name, cmd, user=user, cwd=cwd, requires=["bundler"])


def bundler_steps(version: str, *, cwd: str, user: str | None = None) -> List[ProvisioningStep]:
    """Tool pin followed by the install command, in the order they must run."""
    return [bundler(version), bundle_install(cwd=cwd, user=user)]
