#!/usr/bin/env python3
"""
Run the Lost & Found test suite against a throwaway SQLite database.

Extra arguments are passed straight to pytest, e.g.
``python lostfound/run_tests.py -k conversations``.
"""
import sys
import os
import subprocess
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
TESTS_DIR = ROOT_DIR / "lostfound" / "tests"

# Forces the in-memory store, the test JWT secret and no rate limits
TEST_ENV = {
    "ENVIRONMENT": "testing",
    "TESTING": "true",
    "RATE_LIMIT_ENABLED": "false",
}

def pytest_command(extra_args):
    return [
        sys.executable, "-m", "pytest", str(TESTS_DIR),
        "-v",
        "--asyncio-mode=auto",
        "--cov=lostfound",
        "--cov-report=term-missing",
        "--cov-report=html",
        "-W", "ignore::DeprecationWarning",
        *extra_args,
    ]

def run_tests(extra_args=()):
    env = {**os.environ, **TEST_ENV, "PYTHONPATH": str(ROOT_DIR)}
    cmd = pytest_command(list(extra_args))

    print(f"🧪 {' '.join(cmd)}")
    result = subprocess.run(cmd, env=env, cwd=ROOT_DIR)

    if result.returncode == 0:
        print("\n✅ Lost & Found suite passed")
    else:
        print(f"\n❌ Lost & Found suite failed (exit code {result.returncode})")

    return result.returncode

if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
