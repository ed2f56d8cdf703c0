"""
Pytest configuration and fixtures for pixfit tests
"""

import pytest
from PIL import Image as PILImage

from pixfit import config

from .helpers import quadrant_array


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Every test starts from the built-in process defaults"""
    monkeypatch.delenv(config.AUTOROTATE_ENV, raising=False)
    monkeypatch.setattr(config, "_settings", config.Settings())


@pytest.fixture
def make_image(tmp_path):
    """Factory writing a quadrant image to disk and returning its path"""

    def _make(width=800, height=600, name="source.png", orientation=None, alpha=False, **save_kwargs):
        im = PILImage.fromarray(quadrant_array(width, height, alpha=alpha))
        if orientation is not None:
            exif = PILImage.Exif()
            exif[0x0112] = orientation
            save_kwargs["exif"] = exif.tobytes()
        path = tmp_path / name
        im.save(path, **save_kwargs)
        return path

    return _make


@pytest.fixture
def png_path(make_image):
    """800x600 PNG"""
    return make_image()


@pytest.fixture
def jpeg_path(make_image):
    """800x600 JPEG"""
    return make_image(name="source.jpg", quality=95)
