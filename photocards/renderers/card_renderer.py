"""
Compose a social card from a photograph.

Pipeline for one image::

    decode → resize (nearest) → darken → Gaussian blur
           → headline (white) → description (gray) → rounded corners

Every step works on an in-memory RGBA image; nothing here touches disk.
"""
from __future__ import annotations

import io
from typing import Optional

from PIL import Image, ImageFilter, UnidentifiedImageError

from ..config import CardConfig
from ..errors import DecodeFailure, PreconditionViolation
from .corners import check_radius, round_corners
from .text import TextRenderer

_HEADLINE_COLOR = (255, 255, 255, 255)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_card(data: bytes, headline: str, description: str, *,
                font_size: int, border_radius: int,
                description_color_offset: int,
                config: Optional[CardConfig] = None,
                text_renderer: Optional[TextRenderer] = None) -> Image.Image:
    """Decode *data* and compose it into a finished card image."""
    return compose_card(
        decode_image(data), headline, description,
        font_size=font_size,
        border_radius=border_radius,
        description_color_offset=description_color_offset,
        config=config,
        text_renderer=text_renderer,
    )


def compose_card(img: Image.Image, headline: str, description: str, *,
                 font_size: int, border_radius: int,
                 description_color_offset: int,
                 config: Optional[CardConfig] = None,
                 text_renderer: Optional[TextRenderer] = None) -> Image.Image:
    """Turn a decoded photograph into a card.

    The source image is not modified.  Raises :class:`PreconditionViolation`
    for a non-positive *font_size* or a *border_radius* that does not fit the
    card, and :class:`~photocards.errors.TextRenderingFailure` when the text
    cannot be drawn.
    """
    config = config or CardConfig()
    text_renderer = text_renderer or TextRenderer()
    if font_size <= 0:
        raise PreconditionViolation(f"Font size must be positive, got {font_size}")
    if config.headline_bias <= 0:
        raise PreconditionViolation(
            f"headline_bias must be positive, got {config.headline_bias}"
        )
    # Radius must fit the output card, not the source photo
    check_radius(border_radius, config.width, config.height)

    card = img.convert("RGBA").resize((config.width, config.height), Image.NEAREST)
    card = brighten(card, config.brightness)
    card = card.filter(ImageFilter.GaussianBlur(radius=config.blur_sigma))

    # Headline, centred then pulled towards the left edge
    text_w, text_h = text_renderer.measure(headline, config.font, font_size)
    x = _div(_div(card.width - text_w, 2), config.headline_bias)
    y = _div(card.height - text_h, 2)
    card = text_renderer.draw(card, _HEADLINE_COLOR, x, y, config.font, font_size, headline)

    # Description at half size, below the headline; size 0 draws nothing
    desc_size = font_size // 2
    if description and desc_size > 0:
        _, desc_h = text_renderer.measure(description, config.font, desc_size)
        desc_y = y + desc_h + config.description_gap
        card = text_renderer.draw(
            card, description_color(description_color_offset), x, desc_y,
            config.font, desc_size, description,
        )

    return round_corners(card, border_radius)


def decode_image(data: bytes) -> Image.Image:
    """Decode raw image bytes, raising :class:`DecodeFailure` on bad input."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError,
            OSError, SyntaxError, ValueError) as exc:
        raise DecodeFailure(f"Could not decode image: {exc}") from exc
    return img


def description_color(offset: int) -> tuple[int, int, int, int]:
    """Return the gray used for the description; *offset* is clamped to 0–255."""
    level = 255 - max(0, min(255, offset))
    return (level, level, level, 255)


def brighten(img: Image.Image, amount: int) -> Image.Image:
    """Add *amount* to every RGB channel of an RGBA image, clamping to 0–255."""
    shifted = [max(0, min(255, v + amount)) for v in range(256)]
    identity = list(range(256))
    return img.point(shifted * 3 + identity)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _div(a: int, b: int) -> int:
    """Integer division truncating towards zero (text wider than the card goes negative)."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q
