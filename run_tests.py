#!/usr/bin/env python3
"""
Test runner script for the Job Portal Application.
Runs the whole suite or one area of it, optionally with coverage.
"""
import os
import sys
import subprocess
import argparse
from pathlib import Path

TEST_DIR = "job_portal_app/tests"

SUITES = {
    "auth": ["test_auth_flow.py"],
    "jobs": ["test_job_service.py", "test_job_endpoints.py"],
    "applications": ["test_application_service.py", "test_application_tracking_pipeline.py"],
    "scheduler": ["test_scheduler_service.py", "test_admin_scheduler.py"],
    "config": ["test_configuration.py"],
}


def run_command(command, description):
    """Run a command and report whether it passed."""
    print(f"\n{'='*60}")
    print(description)
    print(f"{'='*60}")

    result = subprocess.run(command)
    if result.returncode == 0:
        print(f"{description} - PASSED")
        return True
    print(f"{description} - FAILED (exit code {result.returncode})")
    return False


def setup_test_environment():
    """Point the app at an in-memory database with background work disabled."""
    os.chdir(Path(__file__).parent)
    os.environ.update({
        "TESTING": "true",
        "SECRET_KEY": "test-secret-key-for-jwt-tokens-12345678901234567890123456789012",
        "LOG_LEVEL": "DEBUG",
        "SEED_ON_STARTUP": "false",
        "SCHEDULER_ENABLED": "false",
    })


def run_tests(test_suite=None, verbose=False, coverage=False):
    setup_test_environment()

    cmd_parts = [sys.executable, "-m", "pytest"]
    if test_suite:
        cmd_parts.extend(f"{TEST_DIR}/{name}" for name in SUITES[test_suite])
    else:
        cmd_parts.append(TEST_DIR)

    if verbose:
        cmd_parts.extend(["-v", "-s"])

    if coverage:
        cmd_parts.extend([
            "--cov=job_portal_app/backend",
            "--cov-report=term-missing",
        ])

    cmd_parts.append("--tb=short")
    return run_command(cmd_parts, f"Running {test_suite or 'all'} tests")


def main():
    parser = argparse.ArgumentParser(description="Job Portal Test Runner")
    parser.add_argument("--suite", choices=sorted(SUITES), help="Run specific test suite")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--coverage", action="store_true", help="Report coverage (requires pytest-cov)")

    args = parser.parse_args()

    print("Job Portal Application Test Runner")
    print("=" * 60)

    success = run_tests(test_suite=args.suite, verbose=args.verbose, coverage=args.coverage)

    print("\n" + "=" * 60)
    if not success:
        print("SOME TESTS FAILED!")
        sys.exit(1)
    print("ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
