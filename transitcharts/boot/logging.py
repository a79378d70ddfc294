"""Root logger configuration for the CLI and embedding hosts."""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["configure_logging", "resolve_level"]

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Turn a level name or number into a ``logging`` level.

    Unknown names and blank strings resolve to ``default``.
    """

    if value is None:
        return default
    if isinstance(value, int):
        return value
    text = value.strip()
    if not text:
        return default
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else default


def configure_logging(*, level: str | int | None = None, settings: Any = None, **kwargs: Any) -> int:
    """Configure the root logger and return the level applied.

    Precedence: explicit ``level``, then ``LOG_LEVEL``, then
    ``settings.logging.level``.  Remaining ``kwargs`` go to
    :func:`logging.basicConfig`.
    """

    candidate = level
    if candidate is None:
        candidate = os.environ.get("LOG_LEVEL")
    if candidate is None and settings is not None:
        candidate = settings.logging.level
    effective = resolve_level(candidate)
    logging.basicConfig(
        level=effective,
        format=kwargs.pop("format", _FORMAT),
        datefmt=kwargs.pop("datefmt", _DATEFMT),
        force=kwargs.pop("force", True),
        **kwargs,
    )
    return effective
