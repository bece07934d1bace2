#!/usr/bin/env python3
"""
Test runner script with common testing commands.

This script provides shortcuts for running different groups of tests.
"""

import shutil
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).parent

SUITES = {
    "alerts": ("tests/test_alerts/", "Running price alert pipeline tests"),
    "config": ("tests/test_config/", "Running settings and logging tests"),
    "services": ("tests/test_services/", "Running service layer tests"),
    "market": ("tests/test_market/", "Running market data client tests"),
    "notifications": ("tests/test_notifications/", "Running email tests"),
    "db": ("tests/test_ormdb/", "Running repository tests"),
    "core": ("tests/test_core/", "Running scheduler and job tests"),
    "api": ("tests/test_webapi/", "Running API tests"),
}


def run_command(cmd, description):
    """Run a command and print the description."""
    print(f"\n🧪 {description}")
    print("=" * 50)
    print(f"Running: {' '.join(cmd)}")
    print()

    result = subprocess.run(cmd, cwd=ROOT)
    return result.returncode == 0


def clean() -> None:
    print("\n🧹 Cleaning test artifacts...")
    for name in (".coverage",):
        path = ROOT / name
        if path.exists():
            path.unlink()
    for name in ("htmlcov", ".pytest_cache"):
        shutil.rmtree(ROOT / name, ignore_errors=True)
    for cache in ROOT.rglob("__pycache__"):
        shutil.rmtree(cache, ignore_errors=True)
    print("✅ Test artifacts cleaned!")


def main():
    """Main test runner."""
    if len(sys.argv) < 2:
        print("Usage: python run_tests.py <command>")
        print("\nAvailable commands:")
        print("  all        - Run all tests with coverage")
        print("  fast       - Run all tests without coverage")
        for name, (_, description) in SUITES.items():
            print(f"  {name:<10} - {description}")
        print("  coverage   - Generate coverage report")
        print("  clean      - Clean test artifacts")
        return

    command = sys.argv[1].lower()
    pytest = [sys.executable, "-m", "pytest"]

    if command == "all":
        success = run_command(
            pytest + ["tests/", "--cov=src/signalist", "--cov-report=html", "-v"],
            "Running all tests with coverage",
        )
    elif command == "fast":
        success = run_command(pytest + ["tests/", "-q"], "Running tests without coverage")
    elif command in SUITES:
        path, description = SUITES[command]
        success = run_command(pytest + [path, "-v"], description)
    elif command == "coverage":
        success = run_command(
            pytest
            + ["tests/", "--cov=src/signalist", "--cov-report=html", "--cov-report=term"],
            "Generating coverage report",
        )
        if success:
            print("\n📊 Coverage report generated!")
            print("   - HTML report: htmlcov/index.html")
    elif command == "clean":
        clean()
        return
    else:
        print(f"❌ Unknown command: {command}")
        return

    if success:
        print(f"\n✅ {command.title()} tests completed successfully!")
    else:
        print(f"\n❌ {command.title()} tests failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
