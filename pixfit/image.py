"""The :class:`Image` facade.

An ``Image`` owns one engine handle. Every transformation comes in two forms:

- an in-place verb (``resize``, ``crop``, ``turn``, ...) that changes the
  receiver and returns it, so calls can be chained;
- a copy form named with the past participle (``resized``, ``cropped``,
  ``turned``, ...) that returns a new ``Image`` and leaves the receiver alone.

Arguments are validated before the engine is called, so a rejected call never
leaves a half-applied change behind. Images are not thread-safe: guard an
instance yourself if several threads mutate it. Copy forms on distinct
instances are independent.
"""
from __future__ import annotations

import logging
import math
import os
from numbers import Integral, Real
from typing import Optional, Tuple, Union

from . import engine
from .config import Settings
from .errors import ImageNotFoundError, InvalidArgumentError, UnrecognizedFormatError
from .utils.formats import ensure_path_is_writable, resolve_quality, resolve_save_format
from .utils.loader import identify, read_bytes, with_tempfile
from .utils.orientation import apply_autorotate
from .utils.resize import FitBox, parse_resize_args, plan

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _require_number(name: str, value: object) -> float:
    if not isinstance(value, Real) or isinstance(value, bool) or not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be a finite number, got {value!r}")
    return float(value)


def _require_int(name: str, value: object) -> int:
    if not isinstance(value, Integral) or isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    return int(value)


def _colormod(key: str, value: float, r=None, g=None, b=None, a=None) -> str:
    """Filter expression for one colour adjustment, limited to the given channels."""
    args = [f"{key}={value}"]
    for channel, flag in (("red", r), ("green", g), ("blue", b), ("alpha", a)):
        if flag:
            args.append(f"{channel}=1")
    return f"colormod({','.join(args)});"


class Image:
    """A decoded raster image."""

    def __init__(self, handle: engine.NativeImage) -> None:
        self._handle = handle

    # -- loading -------------------------------------------------------------

    @classmethod
    def load(
        cls,
        path: PathLike,
        autorotate: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ) -> "Image":
        """Decode the image file at ``path``.

        Parameters
        ----------
        path : str | os.PathLike
            File to read.
        autorotate : bool | None
            Apply the EXIF orientation. None defers to ``settings``, then to
            the process default (see :mod:`pixfit.config`).
        settings : Settings | None
            Settings to read the autorotate default from.

        Raises
        ------
        ImageNotFoundError
            If ``path`` does not exist.
        DecodeError
            If the file cannot be decoded.
        """
        path = os.fspath(path)
        if not os.path.exists(path):
            raise ImageNotFoundError(f"No such image file: {path}")
        image = cls(engine.decode(path))
        apply_autorotate(image, path, autorotate=autorotate, settings=settings)
        logger.debug("loaded %r from %s", image, path)
        return image

    open = load

    @classmethod
    def load_data(
        cls,
        data: bytes,
        autorotate: Optional[bool] = None,
        settings: Optional[Settings] = None,
    ) -> "Image":
        """Decode an image held in memory.

        Raises
        ------
        UnrecognizedFormatError
            If ``data`` has no known image signature.
        """
        fmt = identify(data)
        if fmt is None:
            raise UnrecognizedFormatError("Unknown format")
        with with_tempfile(fmt, data) as path:
            return cls.load(path, autorotate=autorotate, settings=settings)

    # -- attributes ----------------------------------------------------------

    @property
    def width(self) -> int:
        return self._handle.width

    @property
    def height(self) -> int:
        return self._handle.height

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def format(self) -> Optional[str]:
        fmt = engine.get_format(self._handle)
        return "jpeg" if fmt == "jpg" else fmt

    @format.setter
    def format(self, fmt: object) -> None:
        if fmt is not None:
            fmt = str(getattr(fmt, "value", fmt))
        engine.set_format(self._handle, fmt)

    def __repr__(self) -> str:
        fmt = self.format
        fmt = f" {fmt.upper()}" if fmt else ""
        return f"<pixfit.Image {self.width}x{self.height}{fmt}>"

    def dup(self) -> "Image":
        """Independent copy with its own pixel buffer."""
        return type(self)(engine.duplicate(self._handle))

    def __copy__(self) -> "Image":
        return self.dup()

    def __deepcopy__(self, memo) -> "Image":
        return self.dup()

    # -- geometry ------------------------------------------------------------

    def _plan_resize(self, args, skew, crop, background):
        intent = parse_resize_args(*args, skew=skew, crop=crop, background=background)
        size = plan(self.width, self.height, intent)
        if size.target_w < 1 or size.target_h < 1:
            raise InvalidArgumentError(
                f"resizing {self.width}x{self.height} with {intent!r} leaves no pixels"
            )
        return intent, size

    def _finish_resize(self, handle: engine.NativeImage, intent) -> engine.NativeImage:
        if isinstance(intent, FitBox) and intent.pads:
            engine.pad(handle, intent.width, intent.height, intent.background)
        return handle

    def resize(self, *args, skew: bool = False, crop: bool = False, background=None) -> "Image":
        """Resize in place.

        Accepts a :class:`~pixfit.ScaleFactor` or :class:`~pixfit.FitBox`, or the
        short forms ``resize(0.5)``, ``resize(400, 300)``, ``resize(400, AUTO)``
        and ``resize(AUTO, 300)`` together with the ``skew``/``crop``/``background``
        modifiers.
        """
        intent, size = self._plan_resize(args, skew, crop, background)
        engine.resize(self._handle, True, *size.as_args())
        self._finish_resize(self._handle, intent)
        return self

    def resized(self, *args, skew: bool = False, crop: bool = False, background=None) -> "Image":
        intent, size = self._plan_resize(args, skew, crop, background)
        handle = engine.resize(self._handle, False, *size.as_args())
        return type(self)(self._finish_resize(handle, intent))

    def _check_crop(self, x, y, width, height) -> Tuple[int, int, int, int]:
        x, y = _require_int("x", x), _require_int("y", y)
        width, height = _require_int("width", width), _require_int("height", height)
        if width < 1 or height < 1:
            raise InvalidArgumentError(f"crop size {width}x{height} must be positive")
        return x, y, width, height

    def crop(self, x: int, y: int, width: int, height: int) -> "Image":
        engine.crop(self._handle, True, *self._check_crop(x, y, width, height))
        return self

    def cropped(self, x: int, y: int, width: int, height: int) -> "Image":
        return type(self)(engine.crop(self._handle, False, *self._check_crop(x, y, width, height)))

    def turn(self, steps: int) -> "Image":
        """Turn clockwise by ``steps`` quarter turns; negative steps turn back."""
        steps = _require_int("steps", steps)
        engine.turn(self._handle, steps % 4)
        return self

    def turned(self, steps: int) -> "Image":
        return self.dup().turn(steps)

    def rotate(self, degrees: float) -> "Image":
        """Rotate clockwise by an arbitrary angle; the canvas grows to fit."""
        radians = _require_number("degrees", degrees) * math.pi / 180.0
        engine.rotate(self._handle, True, radians)
        return self

    def rotated(self, degrees: float) -> "Image":
        radians = _require_number("degrees", degrees) * math.pi / 180.0
        return type(self)(engine.rotate(self._handle, False, radians))

    def flip(self) -> "Image":
        """Mirror top to bottom."""
        engine.flip(self._handle)
        return self

    def flipped(self) -> "Image":
        return self.dup().flip()

    def flop(self) -> "Image":
        """Mirror left to right."""
        engine.flop(self._handle)
        return self

    def flopped(self) -> "Image":
        return self.dup().flop()

    # -- filters -------------------------------------------------------------

    def sharpen(self, radius: float) -> "Image":
        radius = _require_number("radius", radius)
        if radius < 0:
            raise InvalidArgumentError(f"illegal radius {radius!r}")
        engine.sharpen_or_blur(self._handle, radius)
        return self

    def sharpened(self, radius: float) -> "Image":
        return self.dup().sharpen(radius)

    def blur(self, radius: float) -> "Image":
        radius = _require_number("radius", radius)
        if radius < 0:
            raise InvalidArgumentError(f"illegal radius {radius!r}")
        engine.sharpen_or_blur(self._handle, -radius)
        return self

    def blurred(self, radius: float) -> "Image":
        return self.dup().blur(radius)

    def filter(self, expression: str) -> "Image":
        """Apply a raw engine filter expression, e.g. ``"colormod(gamma=1.2);"``."""
        if not isinstance(expression, str):
            raise InvalidArgumentError(f"filter expression must be a string, got {expression!r}")
        engine.apply_filter(self._handle, expression)
        return self

    def filtered(self, expression: str) -> "Image":
        return self.dup().filter(expression)

    def brighten(self, value: float, r=None, g=None, b=None, a=None) -> "Image":
        """Shift brightness by ``value`` in -1..1 (fraction of the full range)."""
        value = _require_number("brightness", value)
        if value > 1 or value < -1:
            raise InvalidArgumentError(f"illegal brightness {value!r} (must be within -1..1)")
        return self.filter(_colormod("brightness", value, r, g, b, a))

    def brightened(self, value: float, r=None, g=None, b=None, a=None) -> "Image":
        return self.dup().brighten(value, r=r, g=g, b=b, a=a)

    def contrast(self, value: float, r=None, g=None, b=None, a=None) -> "Image":
        """Scale contrast around mid-grey; ``1`` keeps the image unchanged."""
        value = _require_number("contrast", value)
        if value < 0:
            raise InvalidArgumentError(f"illegal contrast {value!r} (must be >= 0)")
        return self.filter(_colormod("contrast", value, r, g, b, a))

    def contrasted(self, value: float, r=None, g=None, b=None, a=None) -> "Image":
        return self.dup().contrast(value, r=r, g=g, b=b, a=a)

    def gamma(self, value: float, r=None, g=None, b=None, a=None) -> "Image":
        # No range check here: the engine clamps whatever table results.
        value = _require_number("gamma", value)
        return self.filter(_colormod("gamma", value, r, g, b, a))

    def gamma_corrected(self, value: float, r=None, g=None, b=None, a=None) -> "Image":
        return self.dup().gamma(value, r=r, g=g, b=b, a=a)

    # -- saving --------------------------------------------------------------

    def save(self, path: PathLike, format: Optional[str] = None, quality: Optional[int] = None) -> None:
        """Encode to ``path``.

        The codec is ``format`` if given, else the file extension, else the
        image's own format, else ``"jpg"``.

        Raises
        ------
        InvalidArgumentError
            If the format name is malformed or ``quality`` is outside 0..100.
        SaveError
            If the destination directory is missing or not writable.
        EncodeError
            If the engine fails to write the file.
        """
        fmt = resolve_save_format(format, path, engine.get_format(self._handle))
        quality = resolve_quality(quality)
        ensure_path_is_writable(path)
        engine.encode(self._handle, os.fspath(path), fmt, quality)

    def save_data(self, format: Optional[str] = None, quality: Optional[int] = None) -> bytes:
        """Encode to bytes; the codec defaults to the image's own format, else ``"jpg"``."""
        fmt = resolve_save_format(format, None, engine.get_format(self._handle))
        quality = resolve_quality(quality)
        with with_tempfile(fmt) as path:
            self.save(path, format=fmt, quality=quality)
            return read_bytes(path)


__all__ = ["Image"]
