#!/usr/bin/env python3
"""Run formatters, linters and the test suite in one pass.

Steps, in order: black, isort, ruff, pylint, pytest. Output of every step is
collected and failing steps are repeated in a summary at the end.

Pass `--fix` to let black and isort rewrite files instead of only checking.
"""

from pathlib import Path
import subprocess
import sys
from typing import NamedTuple

ROOT = Path(__file__).parent
SOURCES = ["app", "core", "infrastructure", "main.py"]


class StepResult(NamedTuple):
    description: str
    success: bool
    output: str


def build_steps(fix: bool) -> list[tuple[list[str], str]]:
    """Commands to run, with a label for each."""
    py = sys.executable
    black = [py, "-m", "black", "."] + ([] if fix else ["--check"])
    isort = [py, "-m", "isort", "."] + ([] if fix else ["--check-only"])
    return [
        (black, "black formatting"),
        (isort, "isort import order"),
        ([py, "-m", "ruff", "check", "."], "ruff"),
        ([py, "-m", "pylint", *SOURCES], "pylint"),
        ([py, "-m", "pytest", "-q"], "pytest"),
    ]


def run_step(cmd: list[str], description: str) -> StepResult:
    """Run one command from the repository root and echo its output."""
    print(f"\n{'=' * 60}")
    print(f"{description}: {' '.join(cmd)}")
    print("=" * 60)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as e:
        print(f"could not start: {e}")
        return StepResult(description, False, str(e))

    output = result.stdout + result.stderr
    success = result.returncode == 0
    print("OK" if success else f"FAILED (exit {result.returncode})")
    if output.strip():
        print(output)
    return StepResult(description, success, output)


def main() -> None:
    fix = "--fix" in sys.argv[1:]
    results = [run_step(cmd, description) for cmd, description in build_steps(fix)]

    print(f"\n{'=' * 60}")
    print("Summary")
    print("=" * 60)
    for r in results:
        print(f"{r.description:<20} {'passed' if r.success else 'FAILED'}")

    failed = [r for r in results if not r.success]
    for r in failed:
        if r.output.strip():
            print(f"\n--- {r.description} ---")
            print(r.output)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
