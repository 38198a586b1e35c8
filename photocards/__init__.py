from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .api import generate_cards
from .config import CardConfig, Config, UnsplashConfig
from .errors import (
    DecodeFailure,
    PhotocardsError,
    PreconditionViolation,
    TextRenderingFailure,
    UnsplashError,
)
from .renderers import Corner, compose_card, render_card, round_corners

try:
    __version__ = version("photocards")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "CardConfig",
    "Config",
    "Corner",
    "DecodeFailure",
    "PhotocardsError",
    "PreconditionViolation",
    "TextRenderingFailure",
    "UnsplashConfig",
    "UnsplashError",
    "compose_card",
    "generate_cards",
    "render_card",
    "round_corners",
]
