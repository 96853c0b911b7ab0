"""Console output formatting utilities for betterprov."""

from __future__ import annotations

import sys
from typing import Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_run_started(self, recipe: str, step_count: int, dry_run: bool = False) -> None:
        """Print run start information."""
        print("\nRUN STARTED")
        print(f"Recipe: {recipe}")
        print(f"Steps: {step_count}")
        if dry_run:
            print("Mode: dry-run")
        print()

    def print_step(self, label: str) -> None:
        """Print step start message."""
        print(f"STEP: {label}")

    def print_failure(
        self,
        label: str,
        reason: str,
        exit_code: Optional[int] = None,
    ) -> None:
        """
        Print failure message.

        Args:
            label: Step label
            reason: Failure reason/error message
            exit_code: Optional exit code
        """
        print(f"STEP FAILED: {label}")
        if exit_code is not None:
            print(f"Exit code: {exit_code}")
        if self.debug:
            print(f"Error details: {reason}")
        else:
            error_line = reason.split("\n")[0] if reason else "Unknown error"
            print(f"Error: {error_line}")

    def print_step_list(self, lines: list[str]) -> None:
        for idx, line in enumerate(lines, start=1):
            print(f"  {idx}. {line}")

    def print_results(self, results: dict[str, str]) -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for label, status in results.items():
            status_display = status.upper() if status != "ok" else "SUCCESS"
            print(f"  {label}: {status_display}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
