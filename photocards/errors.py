"""Exception types raised while building cards."""
from __future__ import annotations


class PhotocardsError(Exception):
    """Base class for all photocards errors."""


class DecodeFailure(PhotocardsError, ValueError):
    """Input bytes could not be decoded as an image."""


class PreconditionViolation(PhotocardsError, ValueError):
    """A parameter is outside the range the renderers can handle."""


class TextRenderingFailure(PhotocardsError, RuntimeError):
    """A font could not be loaded or text could not be rasterised."""


class UnsplashError(PhotocardsError, RuntimeError):
    """The Unsplash search request failed or returned an unusable payload."""
