"""Helpers that bridge in-memory image data to path-based load/save.

The engine only reads and writes files, so ``Image.load_data`` and
``Image.save_data`` go through a named temporary file whose suffix carries
the codec name.
"""
from __future__ import annotations

import contextlib
import os
import tempfile
from typing import Iterator, Optional

# (offset, signature, codec) checked in order.
_SIGNATURES = [
    (0, b"\xff\xd8\xff", "jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "png"),
    (0, b"GIF87a", "gif"),
    (0, b"GIF89a", "gif"),
    (0, b"II*\x00", "tiff"),
    (0, b"MM\x00*", "tiff"),
    (0, b"BM", "bmp"),
]


def identify(data: bytes) -> Optional[str]:
    """Guess the codec of raw image bytes from their leading signature.

    Parameters
    ----------
    data : bytes
        Encoded image data.

    Returns
    -------
    str | None
        Short codec name (``"jpeg"``, ``"png"``, ``"gif"``, ``"tiff"``,
        ``"bmp"`` or ``"webp"``), or None when nothing matches.
    """
    head = bytes(data[:16])
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "webp"
    for offset, signature, codec in _SIGNATURES:
        if head[offset:offset + len(signature)] == signature:
            return codec
    return None


@contextlib.contextmanager
def with_tempfile(format: str, data: Optional[bytes] = None) -> Iterator[str]:
    """Yield the path of a temporary ``.<format>`` file, removed again on exit.

    Parameters
    ----------
    format : str
        Codec name used as the file suffix.
    data : bytes | None
        Initial content, written and closed before the path is yielded.
    """
    fd, path = tempfile.mkstemp(prefix="pixfit-", suffix=f".{format}")
    try:
        with os.fdopen(fd, "wb") as handle:
            if data is not None:
                handle.write(data)
        yield path
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(path)


def read_bytes(path: str) -> bytes:
    with open(path, "rb") as handle:
        return handle.read()
