"""Command-line entry point for pixfit.

Loads an image, optionally autorotates it, resizes it, applies the requested
turns, mirrors and colour adjustments in that order, and saves the result.

Usage example:
    python -m pixfit.main -i photo.jpg -o thumb.png --size 400x300 --crop --quality 80
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple

from .errors import PixfitError
from .image import Image
from .utils.resize import AUTO, FitBox, ScaleFactor

logger = logging.getLogger(__name__)


def parse_size(text: str) -> Tuple[object, object]:
    """Parse ``WxH`` where either side may be empty or ``auto``.

    ``"400x300"`` gives ``(400, 300)``, ``"400x"`` and ``"400xauto"`` give
    ``(400, AUTO)``, ``"x300"`` and ``"autox300"`` give ``(AUTO, 300)``.
    """
    width, sep, height = text.lower().partition("x")
    if not sep:
        raise ValueError(f"--size must look like WxH, got {text!r}")

    def side(value: str) -> object:
        value = value.strip()
        if value in ("", "auto"):
            return AUTO
        if not value.isdigit() or int(value) < 1:
            raise ValueError(f"--size sides must be positive integers or 'auto', got {value!r}")
        return int(value)

    return side(width), side(height)


def parse_color(text: str) -> Tuple[int, ...]:
    """Parse ``RRGGBB`` or ``RRGGBBAA`` (an optional leading ``#`` is allowed)."""
    value = text.lstrip("#")
    if len(value) not in (6, 8):
        raise ValueError(f"--background must be RRGGBB or RRGGBBAA, got {text!r}")
    try:
        return tuple(int(value[i:i + 2], 16) for i in range(0, len(value), 2))
    except ValueError as exc:
        raise ValueError(f"--background must be hexadecimal, got {text!r}") from exc


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="pixfit",
        description="Resize, turn, mirror and colour-adjust images.",
    )

    parser.add_argument("-i", "--input", required=True, help="Path to input image file")
    parser.add_argument("-o", "--output", required=True, help="Path to output image file")

    size = parser.add_mutually_exclusive_group()
    size.add_argument("--scale", type=float, default=None, help="Shrink factor, 0 < F < 1")
    size.add_argument(
        "--size",
        type=str,
        default=None,
        help="Fit box WxH; leave one side empty or 'auto' to derive it (e.g. 400x, x300)",
    )
    parser.add_argument("--skew", action="store_true", help="Stretch to exactly WxH")
    parser.add_argument("--crop", action="store_true", help="Fill WxH and crop the overflow")
    parser.add_argument(
        "--background",
        type=str,
        default=None,
        help="Pad the fitted image to WxH with this colour (RRGGBB or RRGGBBAA)",
    )

    parser.add_argument("--turn", type=int, default=0, help="Clockwise quarter turns")
    parser.add_argument("--rotate", type=float, default=None, help="Clockwise rotation in degrees")
    parser.add_argument("--flip", action="store_true", help="Mirror top to bottom")
    parser.add_argument("--flop", action="store_true", help="Mirror left to right")

    parser.add_argument("--sharpen", type=float, default=None, help="Sharpen radius (>=0)")
    parser.add_argument("--blur", type=float, default=None, help="Blur radius (>=0)")
    parser.add_argument("--brightness", type=float, default=None, help="Brightness shift, -1..1")
    parser.add_argument("--contrast", type=float, default=None, help="Contrast factor (>=0)")
    parser.add_argument("--gamma", type=float, default=None, help="Gamma value")

    parser.add_argument("--format", type=str, default=None, help="Output codec (default: from extension)")
    parser.add_argument("--quality", type=int, default=None, help="Output quality, 0..100")
    parser.add_argument(
        "--autorotate",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Apply the EXIF orientation (default: PIXFIT_AUTOROTATE)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    return parser.parse_args(argv)


def validate_args(ns: argparse.Namespace) -> None:
    """Validate argument values and raise ValueError for invalid inputs.

    Also stores the resize intent in ``ns.intent``.

    Parameters
    ----------
    ns : argparse.Namespace
        Parsed CLI arguments.
    """
    if not Path(ns.input).exists():
        raise ValueError(f"Input file not found: {ns.input}")
    if ns.size is not None:
        ns.size = parse_size(ns.size)
    if ns.background is not None:
        ns.background = parse_color(ns.background)
    if (ns.skew or ns.crop or ns.background is not None) and ns.size is None:
        raise ValueError("--skew, --crop and --background need --size")
    if ns.quality is not None and not 0 <= ns.quality <= 100:
        raise ValueError("--quality must be within 0..100")
    ns.intent = build_intent(ns)


def build_intent(ns: argparse.Namespace):
    """Resize intent for the parsed arguments, or None when no resize was asked for."""
    if ns.scale is not None:
        return ScaleFactor(ns.scale)
    if ns.size is not None:
        width, height = ns.size
        return FitBox(width, height, skew=ns.skew, crop=ns.crop, background=ns.background)
    return None


def process(ns: argparse.Namespace) -> Image:
    """Run the load/transform pipeline and return the image ready for saving."""
    image = Image.load(ns.input, autorotate=ns.autorotate)

    if ns.intent is not None:
        image.resize(ns.intent)
    if ns.turn:
        image.turn(ns.turn)
    if ns.rotate is not None:
        image.rotate(ns.rotate)
    if ns.flip:
        image.flip()
    if ns.flop:
        image.flop()
    if ns.sharpen is not None:
        image.sharpen(ns.sharpen)
    if ns.blur is not None:
        image.blur(ns.blur)
    if ns.brightness is not None:
        image.brighten(ns.brightness)
    if ns.contrast is not None:
        image.contrast(ns.contrast)
    if ns.gamma is not None:
        image.gamma(ns.gamma)
    return image


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry function for the CLI.

    Returns
    -------
    int
        0 on success, 2 for argument errors, 1 when loading, processing or
        saving the image fails.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        validate_args(args)
    except ValueError as e:
        print(f"Argument error: {e}")
        return 2

    try:
        image = process(args)
        image.save(args.output, format=args.format, quality=args.quality)
    except PixfitError as e:
        print(f"Error: {e}")
        return 1

    logger.info("wrote %s (%dx%d)", args.output, image.width, image.height)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
