"""CLI entrypoint for the digest command."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Iterable, List, NoReturn, Sequence

from .config import ConfigParseError, UsageError
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .output import CLIPBOARD, route

logger = get_logger("cli")


class _DigestArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


class _HelpAction(argparse.Action):
    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str = argparse.SUPPRESS,
        default: Any = argparse.SUPPRESS,
        help: str | None = None,
    ) -> None:
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> NoReturn:
        parser.print_help(sys.stderr)
        parser.exit(1)


def _split_values(raw: str) -> List[str]:
    values = [part.strip() for part in raw.split(",") if part.strip()]
    if not values:
        raise argparse.ArgumentTypeError("a non-empty value is required")
    return values


def _build_parser() -> argparse.ArgumentParser:
    parser = _DigestArgumentParser(
        prog="digest",
        description=(
            "Gather every file under a directory, with git repository details when "
            "available, into one Markdown document. The document is copied to the "
            "clipboard when run from a terminal and written to stdout when piped."
        ),
        add_help=False,
    )
    parser.add_argument("-h", "--help", action=_HelpAction, help="Show this message and exit.")
    parser.add_argument(
        "-e",
        "--exclude-ext",
        dest="exclude_ext",
        action="append",
        type=_split_values,
        default=[],
        metavar="PATTERN[,PATTERN...]",
        help='Exclude files by suffix (".md") or filename glob ("*.tmp"). Repeatable.',
    )
    parser.add_argument(
        "-d",
        "--exclude-dir",
        dest="exclude_dir",
        action="append",
        type=_split_values,
        default=[],
        metavar="NAME[,NAME...]",
        help="Exclude every directory with this name, at any depth. Repeatable.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        type=Path,
        default=None,
        metavar="FILE",
        help="Also write log records to FILE.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to digest (defaults to current directory).",
    )
    return parser


def _flatten(groups: Iterable[List[str]]) -> List[str]:
    return [value for group in groups for value in group]


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for the digest command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        outcome = Orchestrator().run(
            args.path,
            exclude_ext=_flatten(args.exclude_ext),
            exclude_dir=_flatten(args.exclude_dir),
        )
    except UsageError as exc:
        parser.error(str(exc))
    except (ConfigParseError, FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"Error: {exc}\n")

    for warning in outcome.warnings:
        logger.warning("Could not fully read %s", warning)

    result = route(outcome.document, sys.stdout.isatty(), stream=sys.stdout.buffer)
    if result.warning:
        logger.warning(result.warning)
    if result.destination == CLIPBOARD:
        print(f"Output copied to clipboard ({len(outcome.files)} files).")


if __name__ == "__main__":
    main(sys.argv[1:])
