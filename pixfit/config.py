from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Optional

from .errors import InvalidArgumentError

AUTOROTATE_ENV = "PIXFIT_AUTOROTATE"
DEFAULT_AUTOROTATE = False

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    autorotate: bool = DEFAULT_AUTOROTATE


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise InvalidArgumentError(f"{name} must be a boolean flag, got {raw!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from the environment.

    Parameters
    ----------
    environ : Mapping[str, str] | None
        Optional mapping to read instead of ``os.environ``.

    Returns
    -------
    Settings
        ``autorotate`` taken from PIXFIT_AUTOROTATE when set.

    Raises
    ------
    InvalidArgumentError
        If PIXFIT_AUTOROTATE is not a recognisable flag.
    """
    if environ is None:
        environ = os.environ
    raw = environ.get(AUTOROTATE_ENV)
    if raw is None:
        return Settings()
    return Settings(autorotate=_parse_bool(AUTOROTATE_ENV, raw))


# Process default, resolved from the environment on first use.
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Settings) -> None:
    global _settings
    if not isinstance(settings, Settings):
        raise InvalidArgumentError(f"expected Settings, got {type(settings).__name__}")
    _settings = settings


def get_autorotate() -> bool:
    return get_settings().autorotate


def set_autorotate(value: object) -> None:
    """Set the process-wide autorotate default (coerced to bool)."""
    set_settings(replace(get_settings(), autorotate=bool(value)))


def resolve_autorotate(
    autorotate: Optional[bool] = None, settings: Optional[Settings] = None
) -> bool:
    """Pick the autorotate flag for one load call.

    An explicit ``autorotate`` wins, then ``settings``, then the process default.
    """
    if autorotate is not None:
        return bool(autorotate)
    if settings is not None:
        return settings.autorotate
    return get_autorotate()


__all__ = [
    "AUTOROTATE_ENV",
    "Settings",
    "load_settings",
    "get_settings",
    "set_settings",
    "get_autorotate",
    "set_autorotate",
    "resolve_autorotate",
]
