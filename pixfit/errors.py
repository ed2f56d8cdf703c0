"""Exception types raised by pixfit.

Every failure raised by the facade derives from :class:`PixfitError`. The
subclasses also inherit from the closest builtin so callers can keep catching
``ValueError`` or ``OSError`` where that reads more naturally.
"""
from __future__ import annotations


class PixfitError(Exception):
    """Base class for all pixfit errors."""


class ImageNotFoundError(PixfitError, FileNotFoundError):
    """The path handed to ``Image.load`` does not exist."""


class UnrecognizedFormatError(PixfitError, ValueError):
    """In-memory data does not start with a known image signature."""


class InvalidArgumentError(PixfitError, ValueError):
    """An argument is out of range or the call shape is not understood."""


class SaveError(PixfitError, OSError):
    """The save destination is missing or not writable."""


class DecodeError(PixfitError):
    """The engine failed to decode an image file."""


class EncodeError(PixfitError):
    """The engine failed to encode an image file."""


__all__ = [
    "PixfitError",
    "ImageNotFoundError",
    "UnrecognizedFormatError",
    "InvalidArgumentError",
    "SaveError",
    "DecodeError",
    "EncodeError",
]
