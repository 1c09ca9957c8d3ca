"""Merge command for the modulemd CLI."""

import sys

from ...core.config import Config
from ...index.merger import ModuleIndexMerger
from ...services.files import read_index, write_index
from .validate import report_failures


def handle_merge(args, config: Config) -> int:
    """Handle merge command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Returns:
        Process exit status.
    """
    priorities = args.priority or [config.default_priority] * len(args.files)
    if len(priorities) != len(args.files):
        print(
            f"Error: got {len(priorities)} priorities for {len(args.files)} files",
            file=sys.stderr,
        )
        return 1

    merger = ModuleIndexMerger()
    load_failed = False
    for path, priority in zip(args.files, priorities):
        index, failures = read_index(path, strict=config.strict)
        if failures:
            report_failures(path, failures)
            load_failed = True
        merger.associate_index(index, priority)

    if load_failed:
        return 1

    merged = merger.resolve()
    write_index(merged, args.output or sys.stdout)
    return 0
