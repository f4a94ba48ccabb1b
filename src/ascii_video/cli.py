"""Convert a video into a colour ASCII-art video."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional, Sequence

from .config import (
    DEFAULT_COLUMNS,
    DEFAULT_CONFIG,
    MAX_COLUMNS,
    MIN_COLUMNS,
    RAMPS,
    RENDERERS,
    CharacterRamp,
    RenderConfig,
    find_ramp,
)
from .errors import ArgError, AsciiVideoError
from .pipeline import PipelineDriver


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise ArgError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="ascii-video",
        description="Render a video as coloured ASCII art and encode the result.",
    )
    parser.add_argument("input", help="Input video path")
    parser.add_argument("output", help="Output video path")
    parser.add_argument(
        "columns",
        nargs="?",
        default=str(DEFAULT_COLUMNS),
        help=f"ASCII width in characters, {MIN_COLUMNS}-{MAX_COLUMNS} (default: %(default)s)",
    )
    parser.add_argument(
        "--cell-width",
        type=int,
        default=DEFAULT_CONFIG.cell_width,
        help="Pixel width of one character cell (default: %(default)s)",
    )
    parser.add_argument(
        "--cell-height",
        type=int,
        default=DEFAULT_CONFIG.cell_height,
        help="Pixel height of one character cell (default: %(default)s)",
    )
    parser.add_argument(
        "--font-scale",
        type=float,
        default=DEFAULT_CONFIG.font_scale,
        help="Glyph scale passed to the renderer (default: %(default)s)",
    )
    parser.add_argument(
        "--codec",
        dest="codecs",
        action="append",
        default=None,
        help="FourCC to try when opening the output; repeat to set the fallback order "
             f"(default: {', '.join(DEFAULT_CONFIG.codecs)})",
    )
    parser.add_argument(
        "--renderer",
        choices=RENDERERS,
        default=DEFAULT_CONFIG.renderer,
        help="Glyph drawing backend (default: %(default)s)",
    )
    ramp_group = parser.add_mutually_exclusive_group()
    ramp_group.add_argument(
        "--ramp",
        default=None,
        help=f"Named glyph ramp: {', '.join(ramp.name for ramp in RAMPS)} "
             f"(default: {DEFAULT_CONFIG.ramp.name})",
    )
    ramp_group.add_argument(
        "--charset",
        default=None,
        help="Custom glyph ramp ordered from sparsest to densest",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug details.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    return parser


def parse_columns(value: str) -> int:
    try:
        columns = int(value)
    except ValueError:
        raise ArgError(f"ASCII width must be a whole number, got '{value}'.") from None
    if columns < MIN_COLUMNS or columns > MAX_COLUMNS:
        raise ArgError(f"ASCII width must be between {MIN_COLUMNS} and {MAX_COLUMNS}, got {columns}.")
    return columns


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    ramp = DEFAULT_CONFIG.ramp
    if args.ramp:
        try:
            ramp = find_ramp(args.ramp)
        except KeyError as exc:
            raise ArgError(exc.args[0]) from None
    try:
        if args.charset is not None:
            ramp = CharacterRamp.from_string(args.charset)
        return dataclasses.replace(
            DEFAULT_CONFIG,
            ramp=ramp,
            cell_width=args.cell_width,
            cell_height=args.cell_height,
            font_scale=args.font_scale,
            codecs=tuple(args.codecs) if args.codecs else DEFAULT_CONFIG.codecs,
            renderer=args.renderer,
        )
    except ValueError as exc:
        raise ArgError(str(exc)) from None


def parse_args(argv: Optional[Sequence[str]] = None) -> tuple[argparse.Namespace, int, RenderConfig]:
    args = build_parser().parse_args(argv)
    return args, parse_columns(args.columns), config_from_args(args)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args, columns, config = parse_args(argv)
    except ArgError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(
            "Usage: ascii-video <input> <output> [columns]  "
            f"(columns {MIN_COLUMNS}-{MAX_COLUMNS}, default {DEFAULT_COLUMNS})",
            file=sys.stderr,
        )
        return 1

    configure_logging(args.verbose, args.quiet)

    try:
        stats = PipelineDriver(config).run(args.input, args.output, columns)
    except AsciiVideoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        print(f"Error: Unexpected failure: {exc}", file=sys.stderr)
        return 1

    print(f"ASCII video saved to {args.output} ({stats.frames_processed} frames, codec {stats.codec})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
