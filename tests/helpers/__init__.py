"""Test helper utilities for the fantomas-client test suite."""

from tests.helpers.cli_assertions import (
    EXIT_USAGE,
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
)

__all__ = [
    "EXIT_USAGE",
    "assert_command_success",
    "assert_command_failed",
    "assert_output_contains",
    "assert_error_message",
]
