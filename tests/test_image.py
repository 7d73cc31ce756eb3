"""Tests for bitmap payload packing."""

import pytest
from PIL import Image

from tsplprinter.errors import InvalidDimension, InvalidValue
from tsplprinter.image import image_to_bitmap, pack_pixels


class TestPackPixels:
    """Test packing pixel rows."""

    def test_full_byte_rows(self):
        """Black prints as 0 bits, white as 1 bits."""
        rows = [[1] * 8, [0] * 8]
        assert pack_pixels(rows) == (1, 2, "00FF")

    def test_pattern(self):
        """Alternating pixels, MSB first."""
        # B W B W B W B W = 01010101 = 0x55
        assert pack_pixels([[1, 0, 1, 0, 1, 0, 1, 0]]) == (1, 1, "55")

    def test_partial_byte(self):
        """Row padding is blank."""
        # 12 black bits then 4 blank: 00000000 00001111
        assert pack_pixels([[True] * 12]) == (2, 1, "000F")

    def test_ragged_rows(self):
        """All rows must have the same width."""
        with pytest.raises(InvalidValue):
            pack_pixels([[1] * 8, [1] * 7])

    def test_empty(self):
        """At least one pixel is needed."""
        with pytest.raises(InvalidDimension):
            pack_pixels([])
        with pytest.raises(InvalidDimension):
            pack_pixels([[]])


class TestImageToBitmap:
    """Test converting PIL images."""

    def test_one_bit_image(self):
        """1-bit images are packed directly."""
        img = Image.new("1", (8, 2), color=255)  # White background
        for x in range(8):
            img.putpixel((x, 0), 0)  # Black first row

        assert image_to_bitmap(img) == (1, 2, "00FF")

    def test_rgb_image(self):
        """RGB images are thresholded."""
        img = Image.new("RGB", (8, 1), color=(255, 255, 255))
        assert image_to_bitmap(img) == (1, 1, "FF")

    def test_grayscale_threshold(self):
        """Values below the threshold are black."""
        img = Image.new("L", (12, 1), color=100)
        assert image_to_bitmap(img) == (2, 1, "000F")
        assert image_to_bitmap(img, threshold=50) == (2, 1, "FFFF")

    def test_not_an_image(self):
        """Only PIL images are accepted."""
        with pytest.raises(InvalidValue):
            image_to_bitmap(b"BM...")
