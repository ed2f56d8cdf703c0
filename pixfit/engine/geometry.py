"""Geometry kernels: resize, crop, quarter turns, free rotation, mirroring."""
from __future__ import annotations

import math
from typing import Tuple

from PIL import Image

from .handle import NativeImage

# Clockwise quarter turns; Pillow's ROTATE_* constants turn counter-clockwise.
_TURNS = {
    1: Image.Transpose.ROTATE_270,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_90,
}


def resize(
    handle: NativeImage,
    mutate: bool,
    x: int,
    y: int,
    src_w: int,
    src_h: int,
    dst_w: int,
    dst_h: int,
) -> NativeImage:
    """Scale the ``src_w x src_h`` rectangle at ``(x, y)`` to ``dst_w x dst_h``.

    With ``mutate`` the handle is updated and returned, otherwise a new handle
    is returned and the input is left alone.
    """
    src = handle.pil
    if (x, y, src_w, src_h) != (0, 0, src.width, src.height):
        src = src.crop((x, y, x + src_w, y + src_h))
    out = src.resize((dst_w, dst_h), Image.Resampling.LANCZOS)
    return handle.replace(out, mutate)


def crop(handle: NativeImage, mutate: bool, x: int, y: int, width: int, height: int) -> NativeImage:
    out = handle.pil.crop((x, y, x + width, y + height))
    return handle.replace(out, mutate)


def turn(handle: NativeImage, steps: int) -> NativeImage:
    """Turn clockwise by ``steps`` quarter turns (0..3), in place."""
    method = _TURNS.get(steps)
    if method is not None:
        handle.pil = handle.pil.transpose(method)
    return handle


def rotate(handle: NativeImage, mutate: bool, radians: float) -> NativeImage:
    """Rotate clockwise by ``radians``; the canvas grows to fit, corners are transparent."""
    pil = handle.pil if handle.pil.mode == "RGBA" else handle.pil.convert("RGBA")
    # Round off float noise from the radian round trip.
    degrees = round(math.degrees(radians), 9)
    out = pil.rotate(-degrees, resample=Image.Resampling.BICUBIC, expand=True)
    return handle.replace(out, mutate)


def flip(handle: NativeImage) -> NativeImage:
    """Mirror top to bottom, in place."""
    handle.pil = handle.pil.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    return handle


def flop(handle: NativeImage) -> NativeImage:
    """Mirror left to right, in place."""
    handle.pil = handle.pil.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    return handle


def pad(handle: NativeImage, width: int, height: int, color: Tuple[int, ...]) -> NativeImage:
    """Center the image on a ``width x height`` canvas filled with ``color``, in place."""
    im = handle.pil
    alpha = len(color) == 4 or im.mode == "RGBA"
    mode = "RGBA" if alpha else "RGB"
    fill = tuple(color) + (255,) if alpha and len(color) == 3 else tuple(color)
    canvas = Image.new(mode, (width, height), fill)
    offset = ((width - im.width) // 2, (height - im.height) // 2)
    if alpha:
        canvas.alpha_composite(im.convert("RGBA"), dest=offset)
    else:
        canvas.paste(im, offset)
    handle.pil = canvas
    return handle
