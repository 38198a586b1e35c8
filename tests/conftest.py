"""
Shared pytest fixtures for photocards tests.

This module provides:
- Configuration fixtures (small card layout for fast rendering)
- Image fixtures (encoded photos, opaque RGBA rasters)
- A fake text renderer recording measure/draw calls
"""
from __future__ import annotations

import io

import pytest
from PIL import Image


# ==============================================================================
# Configuration fixtures
# ==============================================================================

@pytest.fixture
def small_card_config():
    """Return a small card layout so full renders stay fast."""
    from photocards.config import CardConfig
    return CardConfig(
        width=320,
        height=120,
        brightness=-85,
        blur_sigma=2.0,
        headline_bias=7,
        description_gap=30,
        font="",
    )


# ==============================================================================
# Image fixtures
# ==============================================================================

def make_photo(width: int = 64, height: int = 48, fmt: str = "PNG") -> bytes:
    """Encode a simple RGB gradient as *fmt* bytes."""
    img = Image.new("RGB", (width, height))
    img.putdata([
        ((x * 255) // width, (y * 255) // height, 128)
        for y in range(height)
        for x in range(width)
    ])
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def photo_factory():
    """Return the :func:`make_photo` helper for tests needing several photos."""
    return make_photo


@pytest.fixture
def photo_bytes():
    """Return a small PNG-encoded photograph."""
    return make_photo()


@pytest.fixture
def jpeg_bytes():
    """Return a small JPEG-encoded photograph (decodes to RGB, no alpha)."""
    return make_photo(80, 60, fmt="JPEG")


@pytest.fixture
def opaque_square():
    """Return a fully opaque 100x100 RGBA raster."""
    return Image.new("RGBA", (100, 100), (10, 20, 30, 255))


# ==============================================================================
# Text rendering fake
# ==============================================================================

class FakeTextRenderer:
    """Text renderer with predictable metrics: 10 px per character, 20 px tall."""

    def __init__(self):
        self.measured: list[tuple[str, str, int]] = []
        self.drawn: list[dict] = []

    def measure(self, text, font, size):
        self.measured.append((text, font, size))
        return len(text) * 10, 20

    def draw(self, img, color, x, y, font, size, text):
        self.drawn.append(
            {"color": color, "x": x, "y": y, "font": font, "size": size, "text": text}
        )
        return img


@pytest.fixture
def fake_text_renderer():
    """Return a fresh :class:`FakeTextRenderer`."""
    return FakeTextRenderer()
