"""
Tests for save-format negotiation, signature sniffing and temp-file bridging
"""

import os
from enum import Enum
from pathlib import Path

import pytest

from pixfit import InvalidArgumentError, SaveError
from pixfit.utils.formats import (
    ensure_path_is_writable,
    format_from_filename,
    resolve_quality,
    resolve_save_format,
)
from pixfit.utils.loader import identify, read_bytes, with_tempfile


class Codec(Enum):
    PNG = "png"


class TestResolveSaveFormat:
    """Codec precedence: explicit > extension > image format > jpg"""

    def test_explicit_wins(self):
        assert resolve_save_format("webp", "out.png", "jpeg") == "webp"

    def test_extension_before_image_format(self):
        assert resolve_save_format(None, "out.PNG", "jpeg") == "png"

    def test_image_format_without_extension(self):
        assert resolve_save_format(None, "out", "gif") == "gif"

    def test_default_is_jpg(self):
        assert resolve_save_format(None, "out", None) == "jpg"
        assert resolve_save_format() == "jpg"

    def test_explicit_is_normalized(self):
        assert resolve_save_format(".PNG") == "png"
        assert resolve_save_format(Codec.PNG) == "png"

    def test_path_objects_accepted(self):
        assert resolve_save_format(None, Path("dir") / "photo.tiff") == "tiff"

    @pytest.mark.parametrize("fmt", ["png/x", "../png", "jp g", "png\\x"])
    def test_codec_names_with_separators_rejected(self, fmt):
        with pytest.raises(InvalidArgumentError, match="invalid format name"):
            resolve_save_format(fmt)

    @pytest.mark.parametrize(
        "path, expected",
        [("a.jpg", "jpg"), ("a.b.JpEg", "jpeg"), ("noext", None), ("dir.d/file", None)],
    )
    def test_format_from_filename(self, path, expected):
        assert format_from_filename(path) == expected


class TestResolveQuality:
    """Quality range checks"""

    @pytest.mark.parametrize("quality", [None, 0, 1, 50, 100])
    def test_accepted(self, quality):
        assert resolve_quality(quality) == quality

    @pytest.mark.parametrize("quality", [-1, 101, 50.5, "80", True])
    def test_rejected(self, quality):
        with pytest.raises(InvalidArgumentError):
            resolve_quality(quality)


class TestEnsurePathIsWritable:
    """Destination directory checks"""

    def test_existing_directory(self, tmp_path):
        assert ensure_path_is_writable(tmp_path / "out.png") == tmp_path.resolve()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SaveError, match="Non-existent path component"):
            ensure_path_is_writable(tmp_path / "missing" / "out.png")

    def test_parent_is_a_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        with pytest.raises(SaveError):
            ensure_path_is_writable(blocker / "out.png")

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root can write anywhere"
    )
    def test_read_only_directory(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0o500)
        try:
            with pytest.raises(SaveError, match="not writable"):
                ensure_path_is_writable(locked / "out.png")
        finally:
            locked.chmod(0o700)


class TestIdentify:
    """Magic-byte sniffing"""

    @pytest.mark.parametrize(
        "data, expected",
        [
            (b"\xff\xd8\xff\xe0\x00\x10JFIF", "jpeg"),
            (b"\x89PNG\r\n\x1a\n\x00\x00", "png"),
            (b"GIF89a\x01\x00", "gif"),
            (b"GIF87a\x01\x00", "gif"),
            (b"II*\x00\x08\x00", "tiff"),
            (b"MM\x00*\x00\x00", "tiff"),
            (b"BM\x00\x00\x00\x00", "bmp"),
            (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "webp"),
            (b"RIFF\x00\x00\x00\x00WAVEfmt ", None),
            (b"hello world", None),
            (b"", None),
        ],
    )
    def test_signatures(self, data, expected):
        assert identify(data) == expected

    def test_real_png(self, png_path):
        assert identify(png_path.read_bytes()) == "png"


class TestWithTempfile:
    """Temporary file bridging"""

    def test_prefilled_and_removed(self):
        with with_tempfile("png", b"payload") as path:
            assert path.endswith(".png")
            assert read_bytes(path) == b"payload"
        assert not os.path.exists(path)

    def test_empty_file(self):
        with with_tempfile("jpg") as path:
            assert os.path.getsize(path) == 0
        assert not os.path.exists(path)

    def test_removed_on_error(self):
        with pytest.raises(RuntimeError):
            with with_tempfile("gif", b"x") as path:
                raise RuntimeError("boom")
        assert not os.path.exists(path)
