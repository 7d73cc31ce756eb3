"""
Bitmap payloads for the BITMAP command.

Converts pixel data that is already in memory into the
(width_bytes, height, hex) triple BITMAP expects. Nothing here opens
files; callers load images themselves.

TSPL polarity: a 0 bit prints (black), a 1 bit leaves the dot blank.
Pixels are packed MSB first and each row is padded to a whole byte
with blank bits.
"""

from typing import Sequence

from PIL import Image

from .errors import InvalidDimension, InvalidValue


def _pack_row(row: Sequence) -> bytes:
    packed = bytearray()
    row_byte = 0
    bit_pos = 7

    for pixel in row:
        if not pixel:  # blank dot
            row_byte |= (1 << bit_pos)

        bit_pos -= 1
        if bit_pos < 0:
            packed.append(row_byte)
            row_byte = 0
            bit_pos = 7

    # Pad last byte with blank bits
    if bit_pos != 7:
        row_byte |= (1 << (bit_pos + 1)) - 1
        packed.append(row_byte)

    return bytes(packed)


def pack_pixels(rows: Sequence[Sequence]) -> tuple[int, int, str]:
    """
    Pack rows of pixels into a BITMAP payload.

    Args:
        rows: One sequence per row; a truthy pixel is black (printed)

    Returns:
        (width_bytes, height_dots, hex_data)

    Raises:
        InvalidDimension: If there are no rows or the rows are empty
        InvalidValue: If rows have different lengths
    """
    if not rows or not rows[0]:
        raise InvalidDimension("Bitmap must have at least one pixel")

    width = len(rows[0])
    width_bytes = (width + 7) // 8

    data = bytearray()
    for index, row in enumerate(rows):
        if len(row) != width:
            raise InvalidValue(
                f"Bitmap row {index} has {len(row)} pixels, expected {width}"
            )
        data.extend(_pack_row(row))

    return width_bytes, len(rows), bytes(data).hex().upper()


def image_to_bitmap(image: Image.Image, threshold: int = 128) -> tuple[int, int, str]:
    """
    Convert a PIL Image to a BITMAP payload.

    1-bit images are used as-is. Other modes are converted to grayscale
    and thresholded: values below threshold become black.

    Returns:
        (width_bytes, height_dots, hex_data)
    """
    if not isinstance(image, Image.Image):
        raise InvalidValue(f"Expected a PIL Image, got {type(image).__name__}")

    if image.mode != "1":
        image = image.convert("L")
        image = image.point(lambda x: 0 if x < threshold else 255, mode="1")

    width, height = image.size
    if width == 0 or height == 0:
        raise InvalidDimension(f"Image is empty ({width}x{height})")

    # In PIL "1" mode, 0 is black
    rows = [
        [image.getpixel((x, y)) == 0 for x in range(width)]
        for y in range(height)
    ]
    return pack_pixels(rows)
