"""Pixel-free helpers behind the pixfit facade.

Modules:
- resize: Resize intents and the size planner.
- formats: Save codec/quality resolution and destination checks.
- orientation: EXIF orientation lookup and autorotation.
- loader: Signature sniffing and temporary-file bridging for in-memory data.
"""
from .resize import AUTO, FitBox, ScaleFactor, SizePlan, parse_resize_args, plan
from .formats import ensure_path_is_writable, resolve_quality, resolve_save_format
from .orientation import apply_autorotate, read_orientation
from .loader import identify, with_tempfile

__all__ = [
    "AUTO",
    "FitBox",
    "ScaleFactor",
    "SizePlan",
    "parse_resize_args",
    "plan",
    "ensure_path_is_writable",
    "resolve_quality",
    "resolve_save_format",
    "apply_autorotate",
    "read_orientation",
    "identify",
    "with_tempfile",
]
