"""EXIF orientation support for freshly loaded images.

Orientation codes (EXIF tag 0x0112) describe how the stored pixels relate to
the upright picture. Each code maps to at most one clockwise quarter turn
followed by at most one mirror:

====  ============================  =====  ======
code  stored as                     turns  mirror
====  ============================  =====  ======
1     upright                       0      -
2     mirrored left/right           0      flop
3     rotated 180                   2      -
4     mirrored top/bottom           0      flip
5     transposed                    1      flop
6     rotated 90 counter-clockwise  1      -
7     transversed                   1      flip
8     rotated 90 clockwise          3      -
====  ============================  =====  ======
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from PIL import ExifTags, Image

from ..config import Settings, resolve_autorotate

logger = logging.getLogger(__name__)

ORIENTATION_TAG = ExifTags.Base.Orientation

ORIENTATIONS: dict[int, Tuple[int, Optional[str]]] = {
    1: (0, None),
    2: (0, "flop"),
    3: (2, None),
    4: (0, "flip"),
    5: (1, "flop"),
    6: (1, None),
    7: (1, "flip"),
    8: (3, None),
}


def read_orientation(path: str) -> Optional[int]:
    """Return the EXIF orientation code of the file at ``path``, or None.

    Missing EXIF data, a missing tag, or a value outside 1..8 all give None.
    """
    try:
        with Image.open(path) as im:
            value = im.getexif().get(ORIENTATION_TAG)
    except OSError as exc:
        logger.debug("no EXIF data readable from %s: %s", path, exc)
        return None
    if isinstance(value, int) and value in ORIENTATIONS:
        return value
    return None


def apply_autorotate(
    image,
    source_path: str,
    autorotate: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> bool:
    """Turn and mirror ``image`` in place so it displays upright.

    Parameters
    ----------
    image : pixfit.Image
        Anything with in-place ``turn``, ``flip`` and ``flop`` methods.
    source_path : str
        File the image was decoded from.
    autorotate : bool | None
        Per-call override; falls back to ``settings`` then the process default.

    Returns
    -------
    bool
        True when the pixels were changed.
    """
    if not resolve_autorotate(autorotate, settings):
        return False
    code = read_orientation(source_path)
    if code is None:
        return False
    turns, mirror = ORIENTATIONS[code]
    if turns:
        image.turn(turns)
    if mirror == "flip":
        image.flip()
    elif mirror == "flop":
        image.flop()
    logger.debug("autorotated %s (orientation %d)", source_path, code)
    return bool(turns or mirror)


__all__ = ["ORIENTATIONS", "read_orientation", "apply_autorotate"]
