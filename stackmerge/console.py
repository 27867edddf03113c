"""Coloured console output for messages and errors."""

from __future__ import annotations

import sys

from termcolor import colored


def print_error_to_std_error(err: BaseException | None) -> None:
    """Print the error in red to standard error."""
    if err is None:
        return
    try:
        print(colored(f"{err}\n", "red"), file=sys.stderr)
    except OSError as write_err:
        print("Error sending the error message to std.Error:")
        print_error(write_err)
        print("Original error message:")
        print_error(err)


def print_error_to_std_error_and_exit(err: BaseException | None) -> None:
    """Print the error to standard error and exit with status 1."""
    if err is not None:
        print_error_to_std_error(err)
        sys.exit(1)


def print_error(err: BaseException | None) -> None:
    """Print the error in red to standard output."""
    if err is not None:
        print(colored(f"{err}\n", "red"))


def print_error_verbose(verbose: bool, err: BaseException | None) -> None:
    """Print the error only when ``verbose`` is set."""
    if verbose:
        print_error(err)


def print_info(message: str) -> None:
    """Print an info message in cyan."""
    print(colored(message, "cyan"))


def print_info_verbose(verbose: bool, message: str) -> None:
    """Print an info message only when ``verbose`` is set."""
    if verbose:
        print_info(message)


def print_message(message: str) -> None:
    """Print a plain message."""
    print(message)


def print_message_verbose(verbose: bool, message: str) -> None:
    """Print a plain message only when ``verbose`` is set."""
    if verbose:
        print_message(message)