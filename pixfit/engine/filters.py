"""Sharpen/blur and the filter-expression kernels.

Filter expressions
------------------
An expression is a sequence of ``;``-terminated statements of the form
``name(key=value, ...)``. Supported statements:

- ``colormod``: per-channel lookup-table adjustment. Keys, applied in the
  order given:

  - ``brightness``: ``i + value * 256``
  - ``contrast``  : ``(i - 127) * value + 127``
  - ``gamma``     : ``(i / 255) ** (1 / value) * 256``

  plus the channel selectors ``red``, ``green``, ``blue`` and ``alpha``. A
  non-zero selector limits the adjustment to the selected channels; without
  selectors the colour channels are modified and alpha is kept.

All table values are truncated and clamped to 0..255.
"""
from __future__ import annotations

import re
from typing import Dict, List, Tuple

import numpy as np
from PIL import Image, ImageFilter

from ..errors import InvalidArgumentError
from .handle import NativeImage

Array = np.ndarray

_STATEMENT = re.compile(r"^\s*([A-Za-z_]\w*)\s*\((.*)\)\s*$", re.DOTALL)
_CHANNELS = {"red": 0, "green": 1, "blue": 2, "alpha": 3}
_ADJUSTMENTS = ("brightness", "contrast", "gamma")


def sharpen_or_blur(handle: NativeImage, radius: float) -> NativeImage:
    """Sharpen for a positive radius, blur by ``-radius`` for a negative one, in place."""
    if radius > 0:
        handle.pil = handle.pil.filter(ImageFilter.UnsharpMask(radius=radius))
    elif radius < 0:
        handle.pil = handle.pil.filter(ImageFilter.GaussianBlur(radius=-radius))
    return handle


def _parse_args(name: str, body: str) -> List[Tuple[str, float]]:
    args = []
    for part in body.split(","):
        if not part.strip():
            continue
        key, sep, raw = part.partition("=")
        key = key.strip().lower()
        if not sep or not key:
            raise InvalidArgumentError(f"malformed argument {part.strip()!r} in {name}()")
        try:
            value = float(raw)
        except ValueError as exc:
            raise InvalidArgumentError(f"{name}({key}=...) needs a number, got {raw.strip()!r}") from exc
        args.append((key, value))
    return args


def _colormod_table(args: List[Tuple[str, float]]) -> Array:
    """Build the 256-entry lookup table for the adjustments in ``args``."""
    lut = np.arange(256, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for key, value in args:
            if key == "brightness":
                lut = lut + value * 256.0
            elif key == "contrast":
                lut = (lut - 127.0) * value + 127.0
            elif key == "gamma":
                exponent = 1.0 / value if value else np.inf
                lut = np.power(lut / 255.0, exponent) * 256.0
            lut = np.nan_to_num(lut, nan=0.0, posinf=255.0, neginf=0.0)
            lut = np.clip(np.trunc(lut), 0.0, 255.0)
    return lut.astype(np.uint8)


def _colormod(im: Image.Image, args: List[Tuple[str, float]]) -> Image.Image:
    selected: Dict[str, bool] = {}
    adjustments = []
    for key, value in args:
        if key in _CHANNELS:
            selected[key] = bool(value)
        elif key in _ADJUSTMENTS:
            adjustments.append((key, value))
        else:
            raise InvalidArgumentError(f"unknown colormod argument {key!r}")
    if not adjustments:
        return im

    if any(selected.values()):
        channels = [_CHANNELS[k] for k, on in selected.items() if on]
    else:
        channels = [0, 1, 2]

    arr = np.array(im, dtype=np.uint8)
    lut = _colormod_table(adjustments)
    for c in channels:
        if c < arr.shape[2]:
            arr[:, :, c] = lut[arr[:, :, c]]
    return Image.fromarray(arr)


def apply_filter(handle: NativeImage, expression: str) -> NativeImage:
    """Run a filter expression against ``handle``, in place.

    Raises
    ------
    InvalidArgumentError
        For unknown statements or malformed arguments.
    """
    im = handle.pil
    for statement in expression.split(";"):
        if not statement.strip():
            continue
        match = _STATEMENT.match(statement)
        if match is None:
            raise InvalidArgumentError(f"malformed filter statement {statement.strip()!r}")
        name = match.group(1).lower()
        args = _parse_args(name, match.group(2))
        if name == "colormod":
            im = _colormod(im, args)
        else:
            raise InvalidArgumentError(f"Unknown filter: {name}")
    handle.pil = im
    return handle


__all__ = ["sharpen_or_blur", "apply_filter"]
