from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import IO

from patchfmt import __version__
from patchfmt.abbrev import abbreviator
from patchfmt.color import COLOR_MODES, annotator_for
from patchfmt.config import PatchfmtConfig, load_config
from patchfmt.diagnostics import format_error_with_hint
from patchfmt.errors import InvalidArgument, InvalidInput, PatchfmtConfigError
from patchfmt.options import add_diff_formatting_arguments, flags_from_namespace, resolve
from patchfmt.records import load_records
from patchfmt.render import render

logger = logging.getLogger("patchfmt.cli")

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_INPUT_ERROR = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patchfmt",
        description="Render structured diff records as git diff text.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="JSON file with one diff record or a list of them ('-' or omitted: stdin).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to patchfmt.toml (defaults to searching upward from cwd).",
    )
    parser.add_argument(
        "--color",
        choices=COLOR_MODES,
        default=None,
        help="Color hunk headers and changed lines (default: auto).",
    )
    parser.add_argument(
        "--abbrev",
        type=int,
        default=None,
        metavar="N",
        help="Show object ids abbreviated to N characters.",
    )
    parser.add_argument(
        "--full-index",
        action="store_true",
        help="Show full object ids in raw output and index lines.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    add_diff_formatting_arguments(parser)
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)


def _load_config(args: argparse.Namespace) -> PatchfmtConfig:
    path = Path(args.config).resolve() if args.config else None
    return load_config(path)


def cmd_render(args: argparse.Namespace, *, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> int:
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    try:
        cfg = _load_config(args)
        flags = cfg.merge_flags(flags_from_namespace(args))
        logger.debug("Formatting flags: %s", flags)
        render_cfg = resolve(flags, default_to_patch_when_empty=True)
        if cfg.context is not None and "unified" not in flags:
            render_cfg = dataclasses.replace(render_cfg, context_lines=cfg.context)
    except (InvalidArgument, PatchfmtConfigError) as e:
        _eprint(format_error_with_hint(e))
        return EXIT_USAGE

    if not render_cfg.should_display():
        logger.debug("Nothing to display (no_patch=%s)", render_cfg.no_patch)
        return EXIT_OK

    abbrev_len = args.abbrev if args.abbrev is not None else cfg.abbrev
    abbrev = abbreviator(abbrev_len, full=args.full_index or cfg.full_index)
    annotate = annotator_for(args.color or cfg.color, stdout)

    try:
        records = load_records(stdin if args.input == "-" else Path(args.input))
        text = render(records, render_cfg, abbrev=abbrev, annotate=annotate)
    except InvalidInput as e:
        _eprint(format_error_with_hint(e))
        return EXIT_INPUT_ERROR

    stdout.write(text)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_USAGE

    _configure_logging(args.verbose)
    return cmd_render(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
