"""Resize planning: turn a resize intent into pixel rectangles.

Nothing here touches pixels. :func:`plan` maps the original dimensions and a
:class:`ScaleFactor` or :class:`FitBox` intent to a :class:`SizePlan`: the
source rectangle to read and the target size to scale it to. The engine does
the actual resampling.

Each target dimension is rounded on its own, so the final aspect ratio may
drift from the original by up to one pixel per axis.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Integral, Real
from typing import Optional, Tuple, Union

from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class _Auto:
    """Marker for the box dimension derived from the other one."""

    _instance: Optional["_Auto"] = None

    def __new__(cls) -> "_Auto":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "AUTO"

    def __reduce__(self):
        return (_Auto, ())


AUTO = _Auto()

Color = Tuple[int, ...]
BoxSide = Union[int, _Auto]


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_side(value: object) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool) and value > 0


def _check_color(color: object) -> Color:
    if not isinstance(color, (tuple, list)) or len(color) not in (3, 4):
        raise InvalidArgumentError(f"background must be an (r, g, b[, a]) tuple, got {color!r}")
    for c in color:
        if not isinstance(c, Integral) or isinstance(c, bool) or not 0 <= c <= 255:
            raise InvalidArgumentError(f"background channel {c!r} out of range 0..255")
    return tuple(int(c) for c in color)


@dataclass(frozen=True)
class ScaleFactor:
    """Shrink both axes by ``factor`` (0 < factor < 1)."""

    factor: float

    def __post_init__(self) -> None:
        if not _is_number(self.factor) or not 0 < self.factor < 1:
            raise InvalidArgumentError(f"scale factor {self.factor!r} out of range")


@dataclass(frozen=True)
class FitBox:
    """Fit the image into a ``width x height`` box.

    Parameters
    ----------
    width, height : int | AUTO
        Box size in pixels. At most one side may be :data:`AUTO`, in which
        case that side follows from the original aspect ratio.
    skew : bool
        Stretch to exactly the box, ignoring the aspect ratio.
    crop : bool
        Cover the box and cut the overflow evenly from both edges.
    background : tuple | None
        ``(r, g, b[, a])``. When set on a plain fit, the result is centered
        on a box-sized canvas of this colour.
    """

    width: BoxSide
    height: BoxSide
    skew: bool = False
    crop: bool = False
    background: Optional[Color] = None

    def __post_init__(self) -> None:
        w_auto = self.width is AUTO
        h_auto = self.height is AUTO
        if w_auto and h_auto:
            raise InvalidArgumentError("only one of width and height may be AUTO")
        for name, side, auto in (("width", self.width, w_auto), ("height", self.height, h_auto)):
            if not auto and not _is_side(side):
                raise InvalidArgumentError(f"box {name} {side!r} must be a positive integer or AUTO")
        if (w_auto or h_auto) and (self.skew or self.crop):
            raise InvalidArgumentError("skew and crop need both box dimensions")
        if self.skew and self.crop:
            raise InvalidArgumentError("skew and crop cannot be combined")
        if self.background is not None:
            object.__setattr__(self, "background", _check_color(self.background))

    @property
    def is_auto(self) -> bool:
        return self.width is AUTO or self.height is AUTO

    @property
    def pads(self) -> bool:
        """True when the fitted image is centered on a box-sized canvas."""
        return self.background is not None and not (self.is_auto or self.skew or self.crop)


ResizeIntent = Union[ScaleFactor, FitBox]


@dataclass(frozen=True)
class SizePlan:
    origin_x: int
    origin_y: int
    source_w: int
    source_h: int
    target_w: int
    target_h: int

    def as_args(self) -> Tuple[int, int, int, int, int, int]:
        return (
            self.origin_x,
            self.origin_y,
            self.source_w,
            self.source_h,
            self.target_w,
            self.target_h,
        )


def _round(value: float) -> int:
    """Round half away from zero (dimensions are never negative)."""
    return int(math.floor(value + 0.5))


def parse_resize_args(
    *args: object,
    skew: bool = False,
    crop: bool = False,
    background: Optional[Color] = None,
) -> ResizeIntent:
    """Build a resize intent from loose positional arguments.

    Accepted shapes: ``(0.5,)``, ``(400, 300)``, ``(400, AUTO)`` and
    ``(AUTO, 300)``. The string ``"auto"`` is read as :data:`AUTO`. A single
    intent object is passed through unchanged.
    """
    if len(args) == 1:
        (arg,) = args
        if skew or crop or background is not None:
            raise InvalidArgumentError("skew, crop and background need a width and a height")
        if isinstance(arg, (ScaleFactor, FitBox)):
            return arg
        if not _is_number(arg):
            raise InvalidArgumentError(f"unconclusive arguments {args!r}")
        return ScaleFactor(arg)
    if len(args) == 2:
        sides = tuple(AUTO if isinstance(a, str) and a.lower() == "auto" else a for a in args)
        return FitBox(sides[0], sides[1], skew=skew, crop=crop, background=background)
    raise InvalidArgumentError(f"wrong number of arguments ({len(args)} for 1..2)")


def plan(original_w: int, original_h: int, intent: ResizeIntent) -> SizePlan:
    """Compute the source rectangle and target size for a resize.

    Parameters
    ----------
    original_w, original_h : int
        Current image size (>0).
    intent : ScaleFactor | FitBox
        What the caller asked for.

    Returns
    -------
    SizePlan
        Origin and size of the source rectangle plus the rounded target size.
    """
    if not (_is_side(original_w) and _is_side(original_h)):
        raise InvalidArgumentError(f"invalid original size {original_w!r}x{original_h!r}")

    x, y = 0, 0
    src_w, src_h = original_w, original_h

    if isinstance(intent, ScaleFactor):
        new_w = original_w * float(intent.factor)
        new_h = original_h * float(intent.factor)
    elif isinstance(intent, FitBox):
        box_w, box_h = intent.width, intent.height
        if box_w is AUTO:
            new_h = box_h
            new_w = box_h / original_h * original_w
        elif box_h is AUTO:
            new_w = box_w
            new_h = box_w / original_w * original_h
        elif intent.skew:
            new_w, new_h = box_w, box_h
        elif intent.crop:
            # Cover the box; the source rectangle takes the box aspect, centered.
            new_w, new_h = box_w, box_h
            if original_w / original_h >= box_w / box_h:
                src_w = min(original_w, _round(original_h * box_w / box_h))
                x = (original_w - src_w) // 2
            else:
                src_h = min(original_h, _round(original_w * box_h / box_w))
                y = (original_h - src_h) // 2
        else:
            scale = original_w / original_h
            box_scale = box_w / box_h
            if scale >= box_scale:  # wider
                new_w = box_w
                new_h = original_h * box_w / original_w
            else:  # narrower
                new_h = box_h
                new_w = original_w * box_h / original_h
    else:
        raise InvalidArgumentError(f"unconclusive resize intent {intent!r}")

    result = SizePlan(x, y, src_w, src_h, _round(new_w), _round(new_h))
    logger.debug("planned %r for %dx%d: %r", intent, original_w, original_h, result)
    return result


__all__ = [
    "AUTO",
    "ScaleFactor",
    "FitBox",
    "ResizeIntent",
    "SizePlan",
    "parse_resize_args",
    "plan",
]
