"""Dump command for the modulemd CLI."""

import sys

from ...core.config import Config
from ...services.files import read_index, write_index
from .validate import report_failures


def handle_dump(args, config: Config) -> int:
    """Handle dump command.

    Documents that fail to load are reported and left out of the output.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Returns:
        Process exit status: 1 if any document failed to load.
    """
    index, failures = read_index(args.file, strict=config.strict)
    report_failures(args.file, failures)
    write_index(index, args.output or sys.stdout)
    return 1 if failures else 0
