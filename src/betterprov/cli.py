# cli.py
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from betterprov.engines import RecordingEngine, ShellEngine
from betterprov.logging_utils import configure_logging
from betterprov.model import step_to_dict
from betterprov.plan import RecipeError, validate_steps
from betterprov.runner import apply_steps, load_recipe
from betterprov.ui.console import Console, set_console, get_console

DEFAULT_RECIPE = "betterprov_recipe.py"


def find_recipe_files() -> list[Path]:
    """Find recipe files in the current directory."""
    recipe_files = []
    current_dir = Path(".")

    default_recipe = current_dir / DEFAULT_RECIPE
    if default_recipe.exists():
        return [default_recipe]

    for path in current_dir.glob("*_recipe.py"):
        recipe_files.append(path)

    return sorted(recipe_files)


def discover_recipe(recipe_arg: str | None) -> Path:
    """
    Discover recipe file from argument or default.

    Raises:
        SystemExit: If no recipe can be found or the choice is ambiguous
    """
    console = get_console()

    if recipe_arg:
        recipe_path = Path(recipe_arg)
        if not recipe_path.exists() and recipe_path.suffix != ".py":
            recipe_path = Path(str(recipe_path) + ".py")
        if not recipe_path.exists():
            console.print_error(
                "Recipe file not found",
                f"Could not find recipe file: {recipe_arg}",
                suggestion="Create a recipe file or specify a different path:\n  betterprov apply --recipe my_recipe.py",
            )
            sys.exit(1)
        return recipe_path

    recipe_files = find_recipe_files()

    if len(recipe_files) == 0:
        console.print_error(
            "No recipe file found",
            "Could not find any recipe files.",
            details=[
                "Looked for:",
                f"  {DEFAULT_RECIPE}",
                "  *_recipe.py",
            ],
            suggestion=f"Create a recipe file:\n  {DEFAULT_RECIPE}\n\nOr specify a recipe explicitly:\n  betterprov apply --recipe my_recipe.py",
        )
        sys.exit(1)

    if len(recipe_files) > 1:
        file_list = "\n".join(f"  {f}" for f in recipe_files)
        console.print_error(
            "Multiple recipe files found",
            "Found multiple recipe files. Please specify which one to use:",
            details=[file_list],
            suggestion="Specify a recipe explicitly:\n  betterprov apply --recipe dev_recipe.py",
        )
        sys.exit(1)

    return recipe_files[0]


def _load_or_exit(ctx, recipe_arg: str | None):
    console = get_console()
    recipe_path = discover_recipe(recipe_arg)
    try:
        return recipe_path, load_recipe(recipe_path)
    except Exception as e:
        console.print_error(
            "Failed to load recipe",
            f"Could not load recipe from {recipe_path}",
            details=[str(e)],
        )
        if ctx.obj.get("debug", False):
            import traceback
            traceback.print_exc()
        sys.exit(1)


recipe_option = click.option(
    "--recipe",
    default=None,
    help=f"Recipe file path (defaults to {DEFAULT_RECIPE} if present)",
)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and command logs)",
)
@click.option("--log-file", default=None, help="Also write command logs to this file")
@click.pass_context
def cli(ctx, debug, log_file):
    """betterprov: ordered, declarative machine provisioning."""
    console = Console(debug=debug)
    set_console(console)
    configure_logging(
        level=logging.DEBUG if debug else logging.WARNING,
        log_path=log_file,
        also_console=debug,
    )
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command("list")
@recipe_option
@click.option("--json", "as_json", is_flag=True, default=False, help="Print steps as JSON")
@click.pass_context
def list_cmd(ctx, recipe, as_json):
    """List the recipe's steps in apply order."""
    console = get_console()
    _path, steps = _load_or_exit(ctx, recipe)

    if as_json:
        click.echo(json.dumps([step_to_dict(s) for s in steps], indent=2))
        return

    lines = []
    for s in steps:
        extra = ""
        if s.version:
            extra = f" version={s.version}"
        if s.command:
            extra = f" command={s.command!r} user={s.user or '-'} cwd={s.cwd or '-'}"
        lines.append(f"{s.label}{extra}")
    console.print_step_list(lines)


@cli.command()
@recipe_option
@click.pass_context
def validate(ctx, recipe):
    """Check step fields and dependency order without applying anything."""
    console = get_console()
    recipe_path, steps = _load_or_exit(ctx, recipe)

    issues = validate_steps(steps)
    if issues:
        console.print_error(
            "Recipe is invalid",
            f"{recipe_path} has {len(issues)} issue(s):",
            details=[str(i) for i in issues],
        )
        sys.exit(1)

    console.print_info(f"{recipe_path}: {len(steps)} step(s), OK")


@cli.command()
@recipe_option
@click.option("--dry-run", is_flag=True, default=False, help="Record what would be done without changing the machine")
@click.option("--fail-fast/--no-fail-fast", default=True, help="Stop at the first failing step")
@click.option("--sudo/--no-sudo", default=True, show_default=True, help="Use sudo to run commands as their declared user")
@click.pass_context
def apply(ctx, recipe, dry_run, fail_fast, sudo):
    """Apply a recipe to this machine."""
    console = get_console()
    recipe_path, steps = _load_or_exit(ctx, recipe)

    engine = RecordingEngine() if dry_run else ShellEngine(use_sudo=sudo)

    try:
        console.print_run_started(recipe=recipe_path.name, step_count=len(steps), dry_run=dry_run)

        results = apply_steps(steps, engine, fail_fast=fail_fast)

        console.print_results(results)

        if any(v == "failed" for v in results.values()):
            sys.exit(1)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except RecipeError as e:
        console.print_error(
            "Recipe is invalid",
            "Nothing was applied.",
            details=[str(i) for i in e.issues],
        )
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()
