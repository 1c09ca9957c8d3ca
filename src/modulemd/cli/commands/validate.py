"""Validate command for the modulemd CLI."""

import sys

from ...core.config import Config
from ...core.exceptions import ModulemdError
from ...index.module_index import SubdocumentFailure
from ...services.files import read_index


def handle_validate(args, config: Config) -> int:
    """Handle validate command.

    Every file is loaded into its own index and every module is
    validated. All problems are reported before exiting.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Returns:
        Process exit status: 0 when every file is valid, 1 otherwise.
    """
    status = 0
    for path in args.files:
        index, failures = read_index(path, strict=config.strict)
        report_failures(path, failures)

        problems = len(failures)
        for module_name in index.get_module_names():
            try:
                index.get_module(module_name).validate()
            except ModulemdError as e:
                print(f"{path}: module {module_name}: {e}", file=sys.stderr)
                problems += 1

        if problems:
            status = 1
        else:
            print(f"{path}: OK ({len(index.get_module_names())} modules)")
    return status


def report_failures(path: str, failures: list[SubdocumentFailure]) -> None:
    """Print one line per failed document to stderr."""
    for failure in failures:
        print(f"{path}: {failure}", file=sys.stderr)
