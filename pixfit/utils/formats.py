"""Codec and quality resolution for save operations."""
from __future__ import annotations

import logging
import os
import re
from numbers import Integral
from pathlib import Path
from typing import Optional, Union

from ..errors import InvalidArgumentError, SaveError

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "jpg"
MIN_QUALITY = 0
MAX_QUALITY = 100

_CODEC_NAME = re.compile(r"[a-z0-9]+\Z")

PathLike = Union[str, "os.PathLike[str]"]


def _normalize(fmt: object) -> Optional[str]:
    if fmt is None:
        return None
    # Enum members carry the codec name in ``value``.
    fmt = getattr(fmt, "value", fmt)
    fmt = str(fmt).strip().lstrip(".").lower()
    return fmt or None


def format_from_filename(path: PathLike) -> Optional[str]:
    """Lower-cased extension of ``path`` without the dot, or None."""
    return _normalize(Path(path).suffix)


def resolve_save_format(
    explicit: object = None,
    filename: Optional[PathLike] = None,
    image_format: Optional[str] = None,
) -> str:
    """Pick the codec for a save.

    Precedence: explicit argument, then the filename extension, then the
    image's current format, then ``"jpg"``.

    Raises
    ------
    InvalidArgumentError
        If the chosen name is not a plain alphanumeric codec name.
    """
    candidates = (
        _normalize(explicit),
        format_from_filename(filename) if filename is not None else None,
        _normalize(image_format),
    )
    fmt = next((f for f in candidates if f), DEFAULT_FORMAT)
    if not _CODEC_NAME.match(fmt):
        raise InvalidArgumentError(f"invalid format name {fmt!r}")
    return fmt


def resolve_quality(quality: Optional[int]) -> Optional[int]:
    if quality is None:
        return None
    if (
        not isinstance(quality, Integral)
        or isinstance(quality, bool)
        or not MIN_QUALITY <= quality <= MAX_QUALITY
    ):
        raise InvalidArgumentError(f"invalid quality {quality!r}")
    return int(quality)


def ensure_path_is_writable(path: PathLike) -> Path:
    """Check that the directory ``path`` would be written into exists and is writable.

    Returns
    -------
    pathlib.Path
        The canonical parent directory.

    Raises
    ------
    SaveError
        If a path component is missing, the directory is not writable, or
        resolving it fails for another OS reason.
    """
    parent = Path(path).parent
    try:
        directory = parent.resolve(strict=True)
    except FileNotFoundError as exc:
        raise SaveError(f"Non-existent path component: {parent}") from exc
    except OSError as exc:
        raise SaveError(str(exc)) from exc
    if not directory.is_dir():
        raise SaveError(f"Not a directory: {directory}")
    if not os.access(directory, os.W_OK):
        raise SaveError(f"Directory not writable: {directory}")
    return directory


__all__ = [
    "DEFAULT_FORMAT",
    "format_from_filename",
    "resolve_save_format",
    "resolve_quality",
    "ensure_path_is_writable",
]
