#!/usr/bin/env python3
"""logchain/main.py — CLI entry-point for the zerolog → slog migrator.

Usage examples
--------------
    # Dry run: print every converted file, touch nothing
    python -m logchain --dir ./service

    # Overwrite the files in place (back up or commit first!)
    python -m logchain --dir ./service --replace

    # Use a real context variable instead of the ``ctx`` placeholder
    python -m logchain --dir ./service --context-expr reqCtx

Exit codes
----------
    0   Success (every file processed).
    1   One or more files could not be parsed, rendered or written.
    2   Infrastructure failure (missing directory, bad configuration).
    130 Interrupted (Ctrl-C).

The module doubles as ``python -m logchain`` via the companion
``logchain/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, TextIO

from termcolor import colored

from logchain import __version__
from logchain.config import MigrationConfig
from logchain.errors import ConfigError, LogchainError
from logchain.goparser import GoParser
from logchain.rewrite import rewrite_source

_log = logging.getLogger("logchain")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``logchain`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("logchain")
    root.setLevel(level)
    root.addHandler(handler)


class _Reporter:
    """Status lines on stdout, colourised unless disabled."""

    def __init__(self, stream: TextIO, color: bool) -> None:
        self._stream = stream
        self._color = color

    def line(self, text: str = "", color: Optional[str] = None, bold: bool = False) -> None:
        if self._color and color is not None:
            text = colored(text, color, attrs=["bold"] if bold else None)
        self._stream.write(text + "\n")

    def raw(self, data: str) -> None:
        self._stream.write(data)


def _iter_go_files(root: Path) -> Iterator[Path]:
    """Yield every ``*.go`` file under *root* in a stable order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            if name.endswith(".go"):
                yield Path(dirpath) / name


# ===========================================================================
# Per-file processing
# ===========================================================================

@dataclass
class FileOutcome:
    path: Path
    replacements: int = 0
    placeholder_calls: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def process_file(
    path: Path,
    replace: bool,
    config: MigrationConfig,
    parser: GoParser,
    reporter: _Reporter,
) -> FileOutcome:
    """Parse, rewrite and (optionally) overwrite a single file.

    Failures are reported and returned, never raised, so that the caller
    can go on with the next file.
    """
    outcome = FileOutcome(path)
    try:
        source = path.read_bytes()
        result = rewrite_source(source, str(path), config, parser)
    except (OSError, LogchainError) as exc:
        outcome.error = str(exc)
        _log.debug("failed to process %s", path, exc_info=True)
        reporter.line(f"  Failed to process {path}: {exc}", "red")
        return outcome

    if not result.changed:
        reporter.line("  No zerolog calls found to transform.", "green")
        return outcome

    outcome.replacements = result.replacements
    outcome.placeholder_calls = result.placeholder_calls
    reporter.line(f"  Transformed {result.replacements} calls.", "cyan")
    if result.placeholder_calls:
        _log.warning(
            "%s: %d call(s) use the placeholder context %r; fix them up by hand",
            path, result.placeholder_calls, config.context_expr,
        )

    if not replace:
        reporter.line(f"---- start converted file: {path} ----", "blue")
        reporter.raw(result.output.decode("utf-8", errors="replace"))
        reporter.line(f"---- end converted file: {path} ----", "blue")
        reporter.line("  File displayed with converted code.")
        return outcome

    try:
        path.write_bytes(result.output)
    except OSError as exc:
        outcome.error = f"failed to write file: {exc}"
        reporter.line(f"  Failed to process {path}: {outcome.error}", "red")
        return outcome
    reporter.line("  File successfully overwritten with converted code.", "green")
    return outcome


def run(args: argparse.Namespace, stream: Optional[TextIO] = None) -> int:
    """Walk ``args.dir`` and migrate every Go file found."""
    reporter = _Reporter(stream or sys.stdout, color=not args.no_color)
    try:
        config = MigrationConfig.from_args(args)
    except ConfigError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA

    root = Path(args.dir).expanduser()
    if not root.is_dir():
        _log.error("directory not found: %s", root)
        return EXIT_INFRA

    mode = "Overwrite Files" if args.replace else "Dry Run (no file changes)"
    reporter.line("--- Zerolog to slog.LogAttrs Transformer ---", bold=True, color="white")
    reporter.line(f"Mode: {mode}")
    reporter.line(f"Target Directory: {root}")
    reporter.line()

    parser = GoParser()
    outcomes: List[FileOutcome] = []
    for path in _iter_go_files(root):
        reporter.line(f"Processing file: {path}")
        outcomes.append(process_file(path, args.replace, config, parser, reporter))

    failed = sum(1 for o in outcomes if o.failed)
    changed = sum(1 for o in outcomes if o.replacements)
    reporter.line()
    reporter.line(
        f"--- Transformation Complete: {len(outcomes)} file(s), "
        f"{changed} changed, {failed} failed ---",
        color="red" if failed else "green",
        bold=True,
    )
    return EXIT_ERROR if failed else EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logchain",
        description=(
            "Rewrite zerolog call chains (log.Info().Str(...).Msg(...)) into "
            "slog.LogAttrs calls in every Go file below a directory."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "--dir",
        required=True,
        metavar="DIR",
        help="The directory containing Go files to process.",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help=(
            "Overwrite processed files in place. "
            "WARNING this can be dangerous. Backup the code first."
        ),
    )
    parser.add_argument(
        "--context-expr",
        dest="context_expr",
        default=None,
        metavar="NAME",
        help="Identifier passed as the context argument (default: ctx).",
    )
    parser.add_argument(
        "--default-message",
        dest="default_message",
        default=None,
        metavar="TEXT",
        help='Message used for chains ending in Send() (default: "zerolog event").',
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured status output.",
    )
    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the logchain CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    try:
        return run(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
