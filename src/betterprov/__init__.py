from .dsl import package, gem_package, execute, recipe, RecipeBuilder, build
from .runner import apply_steps, load_recipe
from .model import ProvisioningStep, StepKind

__all__ = [
    "package", "gem_package", "execute", "recipe", "RecipeBuilder", "build",
    "apply_steps", "load_recipe", "ProvisioningStep", "StepKind",
]
