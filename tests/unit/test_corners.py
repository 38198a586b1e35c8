"""
Unit tests for anti-aliased corner rounding.

Tests the renderers/corners.py module: the supersampled arc walk, the four
corner remaps, and radius validation.
"""
import pytest
from PIL import Image

from photocards.errors import PreconditionViolation
from photocards.renderers.corners import (
    Corner,
    check_radius,
    round_corner,
    round_corners,
)


def _top_left_local(alpha, r, i, j):
    """Alpha of the pixel at local offset (i, j) from the top-left arc centre."""
    return alpha.getpixel((r - 1 - i, r - 1 - j))


class TestZeroRadius:
    """Radius 0 never changes the raster."""

    def test_bytes_identical(self, opaque_square):
        before = opaque_square.tobytes()
        result = round_corners(opaque_square, 0)
        assert result.tobytes() == before

    def test_round_corner_noop(self):
        alpha = Image.new("L", (10, 10), 123)
        round_corner(alpha.load(), 0, Corner.TOP_LEFT.remap(10, 10))
        assert set(alpha.getdata()) == {123}


class TestScenario100x100:
    """Buffer 100x100 with radius 20."""

    @pytest.fixture
    def alpha(self, opaque_square):
        return round_corners(opaque_square, 20).getchannel("A")

    def test_outer_corner_transparent(self, alpha):
        assert alpha.getpixel((0, 0)) == 0

    def test_arc_centre_unchanged(self, alpha):
        assert alpha.getpixel((19, 19)) == 255

    def test_boundary_partially_transparent(self, alpha):
        region = [alpha.getpixel((x, y)) for x in range(20) for y in range(20)]
        assert any(0 < a < 255 for a in region)

    def test_middle_untouched(self, alpha):
        middle = alpha.crop((20, 20, 80, 80))
        assert set(middle.getdata()) == {255}

    def test_edges_between_corners_untouched(self, alpha):
        assert alpha.getpixel((50, 0)) == 255
        assert alpha.getpixel((0, 50)) == 255
        assert alpha.getpixel((99, 50)) == 255
        assert alpha.getpixel((50, 99)) == 255

    def test_rgb_untouched(self, opaque_square):
        rgb_before = opaque_square.convert("RGB").tobytes()
        result = round_corners(opaque_square, 20)
        assert result.convert("RGB").tobytes() == rgb_before


class TestCoverageGeometry:
    """Pixels well inside keep their alpha; pixels beyond the radius become 0."""

    @pytest.mark.parametrize("r", [1, 2, 3, 5, 8, 13, 20, 33])
    def test_inside_and_outside(self, r):
        img = Image.new("RGBA", (2 * r + 4, 2 * r + 4), (0, 0, 0, 255))
        alpha = round_corners(img, r).getchannel("A")
        for i in range(r):
            for j in range(r):
                value = _top_left_local(alpha, r, i, j)
                # Farthest point of the pixel is inside r - 1
                if (i + 1) ** 2 + (j + 1) ** 2 < (r - 1) ** 2:
                    assert value == 255, (i, j)
                # Nearest point of the pixel is beyond r
                if i ** 2 + j ** 2 > r ** 2:
                    assert value == 0, (i, j)

    def test_single_pixel_radius_is_quarter_disc(self):
        """Radius 1: one pixel covering roughly pi/4 of its area."""
        img = Image.new("RGBA", (4, 4), (0, 0, 0, 255))
        value = round_corners(img, 1).getchannel("A").getpixel((0, 0))
        assert 190 < value < 215

    def test_coverage_decreases_along_diagonal(self):
        r = 30
        img = Image.new("RGBA", (64, 64), (0, 0, 0, 255))
        alpha = round_corners(img, r).getchannel("A")
        diagonal = [_top_left_local(alpha, r, k, k) for k in range(r)]
        assert diagonal == sorted(diagonal, reverse=True)
        assert diagonal[0] == 255
        assert diagonal[-1] == 0

    def test_existing_alpha_is_scaled(self):
        """Boundary coverage multiplies the alpha already present."""
        full = round_corners(Image.new("RGBA", (40, 40), (0, 0, 0, 255)), 16)
        half = round_corners(Image.new("RGBA", (40, 40), (0, 0, 0, 128)), 16)
        for a_full, a_half in zip(full.getchannel("A").getdata(),
                                  half.getchannel("A").getdata()):
            assert a_half <= a_full
            if a_full == 0:
                assert a_half == 0


class TestSymmetry:
    """One walk serves all four corners."""

    def test_square_mask_rotations(self, opaque_square):
        alpha = round_corners(opaque_square, 20).getchannel("A")
        for op in (Image.Transpose.ROTATE_90,
                   Image.Transpose.ROTATE_180,
                   Image.Transpose.ROTATE_270):
            assert alpha.transpose(op).tobytes() == alpha.tobytes()

    def test_rectangle_mask_mirrors(self):
        img = Image.new("RGBA", (120, 60), (0, 0, 0, 255))
        alpha = round_corners(img, 25).getchannel("A")
        assert alpha.transpose(Image.Transpose.FLIP_LEFT_RIGHT).tobytes() == alpha.tobytes()
        assert alpha.transpose(Image.Transpose.FLIP_TOP_BOTTOM).tobytes() == alpha.tobytes()

    def test_corner_mask_diagonal_symmetric(self, opaque_square):
        alpha = round_corners(opaque_square, 20).getchannel("A")
        corner = alpha.crop((0, 0, 20, 20))
        assert corner.transpose(Image.Transpose.TRANSPOSE).tobytes() == corner.tobytes()


class TestSecondPass:
    """Running the rounder again on a rounded raster."""

    def test_transparent_and_interior_stable(self, opaque_square):
        once = round_corners(opaque_square, 20).getchannel("A")
        twice = round_corners(opaque_square, 20).getchannel("A")
        for a1, a2 in zip(once.getdata(), twice.getdata()):
            if a1 == 0:
                assert a2 == 0
            if a1 == 255 and a2 != 255:
                pytest.fail("interior pixel changed on second pass")
            assert a2 <= a1


class TestCornerRemap:
    """Remaps send canonical (1, 1) to the outermost physical pixel."""

    @pytest.mark.parametrize("corner, expected", [
        (Corner.TOP_LEFT, (0, 0)),
        (Corner.TOP_RIGHT, (49, 0)),
        (Corner.BOTTOM_RIGHT, (49, 29)),
        (Corner.BOTTOM_LEFT, (0, 29)),
    ])
    def test_outermost_pixel(self, corner, expected):
        assert corner.remap(50, 30)(1, 1) == expected

    def test_single_corner_only(self):
        alpha = Image.new("L", (40, 40), 255)
        round_corner(alpha.load(), 10, Corner.BOTTOM_RIGHT.remap(40, 40))
        assert alpha.getpixel((39, 39)) == 0
        assert alpha.getpixel((0, 0)) == 255
        assert alpha.getpixel((39, 0)) == 255
        assert alpha.getpixel((0, 39)) == 255


class TestRadiusValidation:
    """Radii that do not fit are rejected before any pixel is touched."""

    def test_radius_half_of_side_allowed(self, opaque_square):
        alpha = round_corners(opaque_square, 50).getchannel("A")
        assert alpha.getpixel((50, 50)) == 255
        assert alpha.getpixel((0, 0)) == 0

    def test_radius_too_large(self, opaque_square):
        before = opaque_square.tobytes()
        with pytest.raises(PreconditionViolation):
            round_corners(opaque_square, 51)
        assert opaque_square.tobytes() == before

    def test_radius_checked_against_smaller_side(self):
        with pytest.raises(PreconditionViolation):
            check_radius(31, 200, 60)
        check_radius(30, 200, 60)

    def test_negative_radius(self, opaque_square):
        with pytest.raises(PreconditionViolation):
            round_corners(opaque_square, -1)

    def test_precondition_is_value_error(self):
        with pytest.raises(ValueError):
            check_radius(10, 5, 5)


class TestModes:
    """Non-RGBA inputs are converted."""

    def test_rgb_input_gets_alpha(self):
        img = Image.new("RGB", (50, 50), (200, 100, 50))
        result = round_corners(img, 10)
        assert result.mode == "RGBA"
        assert result.getpixel((0, 0))[3] == 0
        assert result.getpixel((25, 25)) == (200, 100, 50, 255)

    def test_rgba_modified_in_place(self, opaque_square):
        result = round_corners(opaque_square, 10)
        assert result is opaque_square
        assert opaque_square.getpixel((0, 0))[3] == 0
