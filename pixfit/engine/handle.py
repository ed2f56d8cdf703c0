from __future__ import annotations

from typing import Optional

from PIL import Image


class NativeImage:
    """One decoded image: the Pillow buffer plus its codec name."""

    __slots__ = ("pil", "format")

    def __init__(self, pil: Image.Image, format: Optional[str] = None) -> None:
        self.pil = pil
        self.format = format

    @property
    def width(self) -> int:
        return self.pil.width

    @property
    def height(self) -> int:
        return self.pil.height

    def replace(self, pil: Image.Image, mutate: bool) -> "NativeImage":
        """Install ``pil`` in this handle, or wrap it in a new one."""
        if mutate:
            self.pil = pil
            return self
        return NativeImage(pil, self.format)
