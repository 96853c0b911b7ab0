# betterprov_recipe.py
# Recipe for the development VM: build tools, native libraries, bundler, bundle.
from __future__ import annotations

from betterprov.recipes.development import list_steps


def steps():
    return list_steps()
