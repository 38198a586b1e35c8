"""
Text measurement and drawing on top of Pillow's FreeType bindings.

:class:`TextRenderer` is the only place fonts are loaded; the card
compositor talks to it through ``measure`` and ``draw`` so that tests can
substitute a fake.
"""
from __future__ import annotations

import functools
import sys
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from ..errors import TextRenderingFailure

# ---------------------------------------------------------------------------
# Platform font candidates (first existing path wins)
# ---------------------------------------------------------------------------
_FONT_CANDIDATES: dict[str, list[str]] = {
    "linux": [
        "/usr/share/fonts/truetype/roboto/unhinted/RobotoTTF/Roboto-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSansBold.ttf",
    ],
    "darwin": [
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "/Library/Fonts/Arial Bold.ttf",
    ],
    "win32": [
        "C:/Windows/Fonts/arialbd.ttf",
        "C:/Windows/Fonts/segoeuib.ttf",
        "C:/Windows/Fonts/calibrib.ttf",
    ],
}


class TextRenderer:
    """Measure and draw single-line text with a TrueType font.

    *font* arguments are paths to font files; an empty string selects the
    first bold sans-serif font available on this platform, falling back to
    Pillow's built-in font.
    """

    def measure(self, text: str, font: str, size: int) -> tuple[int, int]:
        """Return the ``(width, height)`` in pixels of *text* rendered at *size*."""
        face = self._face(font, size)
        try:
            left, top, right, bottom = face.getbbox(text)
        except (UnicodeError, ValueError, OSError) as exc:
            raise TextRenderingFailure(f"Could not measure text {text!r}: {exc}") from exc
        return int(right - left), int(bottom - top)

    def draw(
        self,
        img: Image.Image,
        color: tuple[int, int, int, int],
        x: int,
        y: int,
        font: str,
        size: int,
        text: str,
    ) -> Image.Image:
        """Draw *text* onto *img* with its top-left corner at ``(x, y)`` and return *img*."""
        face = self._face(font, size)
        try:
            ImageDraw.Draw(img).text((x, y), text, font=face, fill=color)
        except (UnicodeError, ValueError, OSError) as exc:
            raise TextRenderingFailure(f"Could not draw text {text!r}: {exc}") from exc
        return img

    @staticmethod
    def _face(font: str, size: int):
        if size <= 0:
            raise TextRenderingFailure(f"Font size must be positive, got {size}")
        return _load_font(font, size)


# ---------------------------------------------------------------------------
# Font helpers
# ---------------------------------------------------------------------------

@functools.lru_cache(maxsize=32)
def _load_font(font: str, size: int):
    """Load *font* at *size*, or the platform default when *font* is empty."""
    if font:
        try:
            return ImageFont.truetype(font, size)
        except OSError as exc:
            raise TextRenderingFailure(f"Could not load font '{font}': {exc}") from exc

    path = _find_font()
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            pass
    # Pillow >=10.1 supports a `size` argument on the default font
    try:
        return ImageFont.load_default(size=size)  # type: ignore[call-arg]
    except TypeError:
        return ImageFont.load_default()


def _find_font() -> Optional[str]:
    """Return the path to the first available bold sans-serif font for the current platform."""
    platform = sys.platform
    if platform.startswith("linux"):
        candidates = _FONT_CANDIDATES["linux"]
    elif platform == "darwin":
        candidates = _FONT_CANDIDATES["darwin"]
    else:
        candidates = _FONT_CANDIDATES["win32"]

    for path in candidates:
        if Path(path).exists():
            return path
    return None
