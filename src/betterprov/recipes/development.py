# recipes/development.py
# Development VM: build tools and native libraries, then bundler and the app's bundle.
from __future__ import annotations

from typing import List

from ..dsl import package, recipe
from ..model import ProvisioningStep
from ..step_workflows.bundler import bundler_steps

OS_PACKAGES = (
    "build-essential",
    "g++",
    "libpq-dev",
    "libxslt-dev",
    "libxml2-dev",
    "python-dev",
    "s3cmd",
)

BUNDLER_VERSION = "1.3.5"
APP_DIR = "/vagrant"

# `gem update --system 2.4.1` stays disabled.


def list_steps() -> List[ProvisioningStep]:
    """Return the recipe's steps in apply order. A new list on every call."""
    return recipe(
        *(package(name) for name in OS_PACKAGES),
        *bundler_steps(BUNDLER_VERSION, cwd=APP_DIR, user="root"),
    )
