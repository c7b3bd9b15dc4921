#!/usr/bin/env python3
"""Run all tests for the backgammon engine and environment."""

import sys

import pytest
from colorama import init, Fore, Style

# Initialize colorama for colored terminal output
init()

def print_header(message):
    """Print a formatted header."""
    print("\n" + "=" * 80)
    print(f"{Fore.CYAN}{Style.BRIGHT}{message}{Style.RESET_ALL}")
    print("=" * 80)

def run_test_module(path):
    """Run one test file with pytest and return success status."""
    print_header(f"Running {path}")
    exit_code = pytest.main(["-q", path])
    if exit_code == 0:
        print(f"{Fore.GREEN}✓ {path} passed{Style.RESET_ALL}")
        return True
    print(f"{Fore.RED}✗ {path} failed (exit code {int(exit_code)}){Style.RESET_ALL}")
    return False

def main():
    """Run all tests."""
    test_modules = [
        "tests/test_dice.py",
        "tests/test_move_validation.py",
        "tests/test_move_calculation.py",
        "tests/test_forced_moves.py",
        "tests/test_transitions.py",
        "tests/test_invariants.py",
        "tests/test_game_manager.py",
        "tests/test_gym_interface.py",
        "tests/test_backgammon_env.py",
        "tests/test_cli.py",
    ]

    # Track overall success
    all_passed = True
    for module in test_modules:
        if not run_test_module(module):
            all_passed = False

    print_header("Test Results")
    if all_passed:
        print(f"{Fore.GREEN}All tests passed successfully!{Style.RESET_ALL}")
        return 0
    else:
        print(f"{Fore.RED}Some tests failed. See output above for details.{Style.RESET_ALL}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
