"""
Warpmark - Command Line
=======================
Command-line tool that stamps a tiled, warped, rotated text watermark
onto a photograph.

Usage:
    warpmark [input] [output] [--text TEXT] [--rotation DEG] ...
    python main.py [input] [output] ...

Architecture:
    - Model: warpmark/core/ (pure algorithms + codec)
    - Controller: This module (argument parsing, logging, exit codes)

Exit codes:
    0  success
    1  watermarking failed (bad configuration, unreadable font or image,
       unwritable output)
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .core import (
    BlendStrategy,
    Interpolation,
    WarpMode,
    WatermarkConfig,
    WatermarkError,
    Watermarker,
)

DEFAULT_INPUT = "tests/passport.jpg"
DEFAULT_OUTPUT = "watermarked.jpg"
DEFAULT_TEXT = "Tenancy application - 12/12/2022"

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="warpmark",
        description="Stamp a tiled, warped, rotated text watermark onto an image.",
    )
    parser.add_argument(
        "input", nargs="?", default=DEFAULT_INPUT,
        help=f"Source image (default: {DEFAULT_INPUT})",
    )
    parser.add_argument(
        "output", nargs="?", default=DEFAULT_OUTPUT,
        help=f"Destination image (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument("--text", default=DEFAULT_TEXT, help="Watermark text")
    parser.add_argument("--font", dest="font_path", default=None, help="TTF/OTF font file")
    parser.add_argument("--size", dest="font_size", type=int, default=16, help="Glyph size in pixels")
    parser.add_argument("--rotation", type=float, default=10.0, help="Rotation in degrees")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in BlendStrategy],
        default=BlendStrategy.DARKEN_INVERT.value,
        help="Blend passes applied to the output",
    )
    parser.add_argument(
        "--warp-mode",
        choices=[m.value for m in WarpMode],
        default=WarpMode.SINGLE_AXIS.value,
        help="Sinusoidal displacement mode",
    )
    parser.add_argument(
        "--interpolation",
        choices=[i.value for i in Interpolation],
        default=Interpolation.BICUBIC.value,
    )
    parser.add_argument("--save-mask", default=None, help="Also write the watermark mask here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config(args: argparse.Namespace) -> WatermarkConfig:
    """Translate parsed arguments into a WatermarkConfig."""
    return WatermarkConfig(
        text=args.text,
        font_size=args.font_size,
        font_path=args.font_path,
        rotation=args.rotation,
        warp_mode=WarpMode(args.warp_mode),
        interpolation=Interpolation(args.interpolation),
        blend_strategy=BlendStrategy(args.strategy),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Application entry point."""
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        watermarker = Watermarker(build_config(args))
        watermarker.process(args.input, args.output, mask_path=args.save_mask)
    except WatermarkError as e:
        logger.error("%s", e.message)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
