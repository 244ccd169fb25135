#!/usr/bin/env python
"""Local quality checks and tests runner.

Runs the formatter, import sorter, linters, type checker and the test
suite over the dspsim package, optionally applying automatic fixes.

Usage:
    python run_quality_checks.py                    # Run all checks (no fixes)
    python run_quality_checks.py --fix              # Run all checks + auto fixes
    python run_quality_checks.py --skip lint type   # Skip some checks
"""

import argparse
import subprocess
import sys
from typing import Optional

PACKAGE_DIR = "dspsim"
TESTS_DIR = "tests"
DIRS_TO_CHECK = [PACKAGE_DIR, TESTS_DIR]

CHECK_NAMES = ("formatting", "imports", "lint", "type", "deadcode", "complexity", "tests")


class CheckRunner:
    """Runs quality checks and records which passed."""

    def __init__(self, fix: bool = False, verbose: bool = False, skip_checks: Optional[list[str]] = None):
        self.fix = fix
        self.verbose = verbose
        self.skip_checks = skip_checks or []
        self.failed_checks: list[str] = []
        self.passed_checks: list[str] = []

    def run_command(self, cmd: list[str], name: str) -> bool:
        """Run one tool and record the outcome."""
        print(f"\n{'=' * 70}\n> {name}: {' '.join(cmd)}\n{'=' * 70}")

        try:
            if self.verbose:
                result = subprocess.run(cmd, check=False)
            else:
                result = subprocess.run(cmd, check=False, capture_output=True, text=True)
                if result.returncode != 0:
                    print(result.stdout)
                    print(result.stderr)
        except FileNotFoundError as e:
            print(f"[FAIL] {e}")
            print("       Install the dev tools: pip install -e .[dev,test]")
            self.failed_checks.append(name)
            return False

        if result.returncode == 0:
            print(f"[ OK ] {name}")
            self.passed_checks.append(name)
            return True

        print(f"[FAIL] {name}")
        self.failed_checks.append(name)
        return False

    def commands(self) -> dict[str, list[str]]:
        black = ["black", *DIRS_TO_CHECK] if self.fix else ["black", "--check", *DIRS_TO_CHECK]
        isort = ["isort", *DIRS_TO_CHECK] if self.fix else ["isort", "--check-only", *DIRS_TO_CHECK]
        return {
            "formatting": black,
            "imports": isort,
            "lint": ["pylint", PACKAGE_DIR],
            "type": ["mypy", PACKAGE_DIR],
            "deadcode": ["vulture", PACKAGE_DIR],
            "complexity": ["radon", "cc", PACKAGE_DIR, "-a"],
            "tests": [
                "pytest",
                f"--cov={PACKAGE_DIR}",
                "--cov-report=term-missing",
                TESTS_DIR,
            ],
        }

    def print_summary(self) -> None:
        print(f"\n{'=' * 70}\nSUMMARY\n{'=' * 70}")
        for check in self.passed_checks:
            print(f"  passed: {check}")
        for check in self.failed_checks:
            print(f"  FAILED: {check}")
        if not self.failed_checks:
            print("\nAll checks passed!")

    def run_all(self) -> int:
        """Run all checks in order.

        Returns:
            0 if all checks passed, non-zero otherwise
        """
        for name, cmd in self.commands().items():
            if name in self.skip_checks:
                print(f"Skipping {name}")
                continue
            self.run_command(cmd, name)

        self.print_summary()
        return 0 if not self.failed_checks else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Run local quality checks and tests")
    parser.add_argument(
        "--fix",
        "--apply",
        action="store_true",
        dest="fix",
        help="Automatically fix formatting and import order",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show full tool output")
    parser.add_argument(
        "--skip",
        nargs="+",
        default=[],
        choices=CHECK_NAMES,
        help="Skip specific checks",
    )
    args = parser.parse_args()

    return CheckRunner(fix=args.fix, verbose=args.verbose, skip_checks=args.skip).run_all()


if __name__ == "__main__":
    sys.exit(main())
