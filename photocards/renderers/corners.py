"""
Anti-aliased rounded corners computed with integer arithmetic only.

Each corner is carved out of the alpha band by walking a midpoint-circle
arc at 16x scale.  A 16x16 sub-pixel grid gives 256 coverage levels per
physical pixel, which maps exactly onto an 8-bit alpha channel, so the
coverage of every boundary pixel is an integer in 1..256.

Only one octant of the arc is walked; every write is mirrored across the
diagonal.  The walk itself never knows which corner it is working on: a
coordinate remap turns canonical top-left coordinates into physical ones.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable

from PIL import Image

from ..errors import PreconditionViolation

Remap = Callable[[int, int], tuple[int, int]]

_SUPERSAMPLE = 16  # sub-samples per axis; 16 * 16 = 256 alpha levels


class Corner(Enum):
    """The four physical corners, each a fixed orientation of the same arc."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM_LEFT = "bottom-left"

    def remap(self, width: int, height: int) -> Remap:
        """Return the coordinate remap for this corner of a *width* x *height* raster.

        The arc walk hands over 1-based coordinates that grow towards the
        image edge; the remap reflects them onto the physical corner.
        """
        if self is Corner.TOP_LEFT:
            return lambda x, y: (x - 1, y - 1)
        if self is Corner.TOP_RIGHT:
            return lambda x, y: (width - x, y - 1)
        if self is Corner.BOTTOM_RIGHT:
            return lambda x, y: (width - x, height - y)
        return lambda x, y: (x - 1, height - y)


def round_corners(img: Image.Image, radius: int) -> Image.Image:
    """Clip *img* to a rounded rectangle with anti-aliased corners of *radius* pixels.

    RGBA images are modified in place and returned; other modes are
    converted to RGBA first.  Only the alpha channel changes.

    Raises :class:`PreconditionViolation` if *radius* is negative or larger
    than half the smaller image dimension (opposite corners would overlap).
    """
    check_radius(radius, img.width, img.height)
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    if radius == 0:
        return img

    alpha = img.getchannel("A")
    pixels = alpha.load()
    for corner in Corner:
        round_corner(pixels, radius, corner.remap(img.width, img.height))
    img.putalpha(alpha)
    return img


def check_radius(radius: int, width: int, height: int) -> None:
    """Reject radii the corner walk cannot handle for a *width* x *height* raster."""
    if radius < 0:
        raise PreconditionViolation(f"Border radius must be non-negative, got {radius}")
    if 2 * radius > min(width, height):
        raise PreconditionViolation(
            f"Border radius {radius} exceeds half of the {width}x{height} image; "
            f"opposite corners would overlap"
        )


def round_corner(alpha, r: int, coordinates: Remap) -> None:
    """Round one corner of the single-band pixel access object *alpha*.

    *coordinates* maps canonical local coordinates (1..r on each axis,
    growing away from the arc centre) to physical pixel positions.  The
    caller guarantees that the ``r x r`` corner square lies inside the
    raster.  ``r == 0`` leaves the raster untouched.
    """
    if r == 0:
        return
    r0 = r
    r = _SUPERSAMPLE * r

    def draw(coverage: int, i: int, j: int) -> None:
        pos = coordinates(r0 - i, r0 - j)
        alpha[pos] = (coverage * alpha[pos] + 128) // 256

    def clear(i: int, j: int) -> None:
        alpha[coordinates(r0 - i, r0 - j)] = 0

    x = 0
    y = r - 1
    p = 2 - r
    acc = 0
    skip_draw = True
    walking = True

    while walking:
        # Column below the frontier and its mirrored row are outside the circle
        col = x // 16
        for j in range(y // 16 + 1, r0):
            clear(col, j)
        for i in range(y // 16 + 1, r0):
            clear(i, col)

        # A full pixel column was walked: commit its coverage
        if not skip_draw:
            draw(acc, x // 16 - 1, y // 16)
            draw(acc, y // 16, x // 16 - 1)
            acc = 0

        for _ in range(_SUPERSAMPLE):
            skip_draw = False
            if x >= y:
                walking = False
                break

            acc += y % 16 + 1
            if p < 0:
                x += 1
                p += 2 * x + 2
            else:
                # Stepping down into the next pixel row: commit and reseed
                if y % 16 == 0:
                    draw(acc, x // 16, y // 16)
                    draw(acc, y // 16, x // 16)
                    skip_draw = True
                    acc = (x + 1) % 16 * 16

                x += 1
                p -= 2 * (y - x) + 2
                y -= 1

    # The pixel on the diagonal is shared by both octants
    if x // 16 == y // 16:
        if x == y:
            acc += y % 16 + 1
        s = y % 16 + 1
        draw(2 * acc - s * s, x // 16, y // 16)

    rest = range(y // 16 + 1, r0)
    for i in rest:
        for j in rest:
            clear(i, j)
