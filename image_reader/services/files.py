"""Path resolution and raw file reads for tool requests."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from image_reader.errors import PathResolutionError

logger = logging.getLogger(__name__)


def resolve_path(image_path: Any, *, home: Path | None = None) -> Path:
    """Turn the caller-supplied path into an absolute :class:`Path`.

    Absolute paths pass through unchanged, a leading ``~`` is expanded, and
    anything else is taken relative to the caller's home directory.
    """

    if not isinstance(image_path, str):
        raise PathResolutionError(f"Image path must be a string, got {type(image_path).__name__}")
    if not image_path.strip():
        raise PathResolutionError("Image path must not be empty")
    if "\x00" in image_path:
        raise PathResolutionError("Image path must not contain NUL bytes")

    path = Path(image_path)
    if image_path.startswith("~"):
        try:
            path = path.expanduser()
        except RuntimeError as exc:  # unknown user in "~user/..."
            raise PathResolutionError(str(exc)) from exc
    if path.is_absolute():
        return path
    return (home or Path.home()) / path


def read_file_bytes(path: Path) -> bytes:
    """Read *path* fully.

    Raises ``FileNotFoundError`` if it does not exist and ``IsADirectoryError``
    or another ``OSError`` if it cannot be read.
    """

    if path.is_dir():
        raise IsADirectoryError(f"Not a file: {path}")
    data = path.read_bytes()
    logger.debug("Read %d bytes from %s", len(data), path)
    return data
