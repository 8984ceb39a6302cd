"""Exceptions raised while turning a path into an image payload.

Missing or unreadable files surface as the built-in ``FileNotFoundError`` /
``OSError``; everything image specific derives from :class:`ImageReaderError`.
"""
from __future__ import annotations


class ImageReaderError(Exception):
    """Base class for errors reported back to the caller as a failure envelope."""


class PathResolutionError(ImageReaderError, ValueError):
    """Raised when the requested path is not a usable string."""


class DecodeError(ImageReaderError):
    """Raised when bytes cannot be decoded as a supported image."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to decode image: {reason}")
        self.reason = reason


class EncodeError(ImageReaderError):
    """Raised when resizing or re-encoding an image fails."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to encode image: {reason}")
        self.reason = reason
