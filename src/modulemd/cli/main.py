"""CLI entry point for modulemd-tool."""

import argparse
import sys
from typing import NoReturn

from loguru import logger

from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="modulemd-tool",
        description="Validate, merge and normalize modulemd YAML documents",
    )
    parser.add_argument("-v", "--version", action="version", version="%(prog)s 2.0.0")
    parser.add_argument(
        "--log-level",
        help="Log level for diagnostics on stderr (default: $MODULEMD_LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate modulemd files")
    validate_parser.add_argument("files", nargs="+", help="YAML files to check")
    _add_strict_argument(validate_parser)

    # merge
    merge_parser = subparsers.add_parser("merge", help="Merge modulemd files into one index")
    merge_parser.add_argument("files", nargs="+", help="YAML files to merge")
    merge_parser.add_argument(
        "-p",
        "--priority",
        type=int,
        action="append",
        help="Priority of each file, given once per file in order "
        "(default: $MODULEMD_DEFAULT_PRIORITY or 0 for all)",
    )
    merge_parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    _add_strict_argument(merge_parser)

    # dump
    dump_parser = subparsers.add_parser("dump", help="Rewrite a file in canonical form")
    dump_parser.add_argument("file", help="YAML file to normalize")
    dump_parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    _add_strict_argument(dump_parser)

    return parser


def _add_strict_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Reject unknown keys (default: $MODULEMD_STRICT)",
    )


def _configure_logging(config: Config) -> None:
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    logger.enable("modulemd")


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    config = Config.from_env()
    if args.log_level:
        config.log_level = args.log_level.upper()
    if getattr(args, "strict", None):
        config.strict = True

    try:
        _configure_logging(config)

        if args.command == "validate":
            status = commands.handle_validate(args, config)
        elif args.command == "merge":
            status = commands.handle_merge(args, config)
        elif args.command == "dump":
            status = commands.handle_dump(args, config)
        else:
            parser.print_help()
            status = 0

        sys.exit(status)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
