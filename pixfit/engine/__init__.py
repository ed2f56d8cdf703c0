"""Pixel engine used by the pixfit facade.

Everything that touches pixels lives in this package: decoding and encoding
with Pillow, the geometry kernels in :mod:`.geometry` and the sharpen/blur and
filter-expression kernels in :mod:`.filters`. The facade in :mod:`pixfit.image`
only validates and plans, then calls into here.

A :class:`NativeImage` wraps one ``PIL.Image.Image`` plus the codec name it was
decoded from (or last assigned). Handles are not synchronised; do not mutate
one from several threads.
"""
from __future__ import annotations

import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError, EncodeError
from .handle import NativeImage
from .geometry import crop, flip, flop, pad, resize, rotate, turn
from .filters import apply_filter, sharpen_or_blur

logger = logging.getLogger(__name__)

# Codec names that differ from Pillow's writer names.
_WRITERS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "tif": "TIFF",
    "tiff": "TIFF",
}

_ALPHA_MODES = ("RGBA", "LA", "PA")


def _working_mode(im: Image.Image) -> Image.Image:
    """Bring decoded data into RGB or RGBA, the two modes the kernels expect."""
    if im.mode in ("RGB", "RGBA"):
        return im
    if im.mode in _ALPHA_MODES or "transparency" in im.info:
        return im.convert("RGBA")
    return im.convert("RGB")


def decode(path: str) -> NativeImage:
    """Decode the image file at ``path``.

    Raises
    ------
    DecodeError
        If Pillow cannot identify or read the file, or it exceeds Pillow's
        pixel limit.
    """
    try:
        with Image.open(path) as im:
            im.load()
            fmt = im.format.lower() if im.format else None
            pil = _working_mode(im)
            if pil is im:
                pil = im.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Failed to decode {path}: {exc}") from exc
    logger.debug("decoded %s (%s, %dx%d)", path, fmt, pil.width, pil.height)
    return NativeImage(pil, fmt)


def encode(handle: NativeImage, path: str, format: str, quality: Optional[int] = None) -> None:
    """Write ``handle`` to ``path`` with the given codec and quality.

    Quality goes to ``quality=`` for JPEG and WEBP; for PNG it selects the
    zlib level as ``9 - quality // 10``. Other codecs ignore it.

    Raises
    ------
    EncodeError
        If Pillow does not know the codec or fails to write.
    """
    writer = _WRITERS.get(format.lower(), format.upper())
    pil = handle.pil
    params = {}
    if writer == "JPEG":
        if pil.mode != "RGB":
            pil = pil.convert("RGB")
        if quality is not None:
            params["quality"] = quality
    elif writer == "WEBP":
        if quality is not None:
            params["quality"] = quality
    elif writer == "PNG":
        if quality is not None:
            params["compress_level"] = min(9, max(0, 9 - quality // 10))
    try:
        pil.save(path, format=writer, **params)
    except (KeyError, ValueError, OSError) as exc:
        raise EncodeError(f"Failed to encode {path} as {format}: {exc}") from exc
    logger.debug("encoded %s as %s (quality=%s)", path, writer, quality)


def duplicate(handle: NativeImage) -> NativeImage:
    return NativeImage(handle.pil.copy(), handle.format)


def get_format(handle: NativeImage) -> Optional[str]:
    return handle.format


def set_format(handle: NativeImage, format: Optional[str]) -> None:
    handle.format = format


__all__ = [
    "NativeImage",
    "decode",
    "encode",
    "duplicate",
    "get_format",
    "set_format",
    "resize",
    "crop",
    "turn",
    "rotate",
    "flip",
    "flop",
    "pad",
    "sharpen_or_blur",
    "apply_filter",
]
