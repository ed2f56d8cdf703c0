from __future__ import annotations

from .config import Settings, get_autorotate, get_settings, load_settings, set_autorotate, set_settings
from .errors import (
    DecodeError,
    EncodeError,
    ImageNotFoundError,
    InvalidArgumentError,
    PixfitError,
    SaveError,
    UnrecognizedFormatError,
)
from .image import Image
from .utils.resize import AUTO, FitBox, ScaleFactor, SizePlan, parse_resize_args, plan

__version__ = "0.1.0"


def load(path, autorotate=None, settings=None) -> Image:
    """Shortcut for :meth:`Image.load`."""
    return Image.load(path, autorotate=autorotate, settings=settings)


def load_data(data: bytes, autorotate=None, settings=None) -> Image:
    """Shortcut for :meth:`Image.load_data`."""
    return Image.load_data(data, autorotate=autorotate, settings=settings)


__all__ = [
    "Image",
    "load",
    "load_data",
    "AUTO",
    "FitBox",
    "ScaleFactor",
    "SizePlan",
    "parse_resize_args",
    "plan",
    "Settings",
    "load_settings",
    "get_settings",
    "set_settings",
    "get_autorotate",
    "set_autorotate",
    "PixfitError",
    "ImageNotFoundError",
    "UnrecognizedFormatError",
    "InvalidArgumentError",
    "SaveError",
    "DecodeError",
    "EncodeError",
]
