"""
TSPL command encoder.

One function per TSPL command family. Each function is pure: it takes
typed parameters and returns the exact command line, CRLF included.
Invalid input raises a TSPLError subclass; nothing is clamped or coerced.

Coordinates, line widths and bitmap sizes are always in dots, whatever
measurement system the page uses. Only page geometry (SIZE, GAP, BLINE,
OFFSET) is scaled to the measurement system.
"""

import re
from decimal import Decimal
from enum import Enum
from typing import Optional, Type, Union

from .errors import (
    BitmapSizeMismatch,
    InvalidAlignment,
    InvalidBarcodeType,
    InvalidDimension,
    InvalidEccLevel,
    InvalidMode,
    InvalidMultiplier,
    InvalidRotation,
    InvalidThickness,
    InvalidValue,
    UnescapedPayload,
)
from .tspl import (
    CRLF,
    Alignment,
    BarcodeType,
    BitmapMode,
    Direction,
    EccLevel,
    Font,
    FontSpec,
    MeasurementSystem,
    Number,
    QRMode,
    RawSymbology,
    Readable,
    Rotation,
    SymbologySpec,
    format_number,
    is_finite_number,
    resolve_measurement_system,
)

HEX_PATTERN = re.compile(r"\A[0-9A-Fa-f]*\Z")

_RESERVED = ("\\", '"')


# ---- Escaping ----


def escape_text(text: str) -> str:
    """
    Escape a free-text payload for a quoted TSPL field.

    A backslash is prepended to every backslash and double quote. All
    other characters, non-ASCII included, are left untouched; the printer
    interprets them in its configured code page.
    """
    if not isinstance(text, str):
        raise InvalidValue(f"Expected text, got {type(text).__name__}")
    return "".join("\\" + ch if ch in _RESERVED else ch for ch in text)


def unescape_text(escaped: str) -> str:
    """
    Inverse of escape_text().

    Raises:
        UnescapedPayload: If escaped contains a bare quote or a dangling
            or unknown backslash sequence
    """
    result = []
    chars = iter(escaped)
    for ch in chars:
        if ch == "\\":
            following = next(chars, None)
            if following not in _RESERVED:
                raise UnescapedPayload(f"Invalid escape sequence in {escaped!r}")
            result.append(following)
        elif ch == '"':
            raise UnescapedPayload(f"Unescaped quote in {escaped!r}")
        else:
            result.append(ch)
    return "".join(result)


def quote(text: str) -> str:
    """Escape text exactly once and wrap it in double quotes."""
    escaped = escape_text(text)
    # Framing check: the quoted field must decode back to the input
    if unescape_text(escaped) != text:
        raise UnescapedPayload(f"Payload {text!r} did not survive escaping")
    return f'"{escaped}"'


# ---- Validation helpers ----


def _line(keyword: str, *tokens: str) -> str:
    if not tokens:
        return keyword + CRLF
    return f"{keyword} {','.join(tokens)}{CRLF}"


def _integer(name: str, value, minimum: int = 0,
             error: Type[InvalidValue] = InvalidValue) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise error(f"{name} must be >= {minimum}, got {value}")
    return str(int(value))


def _coordinate(name: str, value) -> str:
    return _integer(name, value, 0)


def _member(enum_cls: Type[Enum], value, name: str,
            error: Type[InvalidValue]) -> Enum:
    # IntEnum lookups would otherwise accept True and 1.0
    if isinstance(value, (bool, float)):
        raise error(f"Invalid {name}: {value!r}")
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise error(f"Invalid {name}: {value!r}. Expected one of {allowed}") from None


def _rotation(value) -> str:
    return str(_member(Rotation, value, "rotation", InvalidRotation).value)


def _thickness(value) -> str:
    return _integer("thickness", value, 1, InvalidThickness)


def _font(font: FontSpec) -> str:
    if isinstance(font, Font):
        return quote(font.value)
    if isinstance(font, int) and not isinstance(font, bool):
        return quote(_integer("font", font, 0))
    if isinstance(font, str) and font:
        return quote(font)
    raise InvalidValue(f"Invalid font: {font!r}")


def _distance(name: str, value: Number, unit: Union[MeasurementSystem, str, None],
              allow_zero: bool = False, allow_negative: bool = False) -> str:
    """Scale a physical distance to the measurement system's token."""
    system = resolve_measurement_system(unit)

    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidDimension(f"{name} must be a number, got {value!r}")
    if not is_finite_number(value):
        raise InvalidDimension(f"{name} must be finite, got {value!r}")
    if not allow_negative:
        if value < 0 or (value == 0 and not allow_zero):
            raise InvalidDimension(f"{name} must be positive, got {value!r}")

    if system is MeasurementSystem.DOTS:
        if value != int(value):
            raise InvalidDimension(f"{name} must be a whole number of dots, got {value!r}")
        return f"{int(value)} dot"

    token = format_number(value)
    if token == "0" and value != 0 and not (allow_zero or allow_negative):
        raise InvalidDimension(f"{name} rounds to zero: {value!r}")
    if system is MeasurementSystem.METRIC:
        return f"{token} mm"
    return token


# ---- Setup Commands ----


def size(width: Number, height: Number,
         unit: Union[MeasurementSystem, str, None] = None) -> str:
    """
    SIZE command: label width and height.

    Args:
        width: Label width in the unit's scale
        height: Label height in the unit's scale
        unit: Measurement system (default: DEFAULT_MEASUREMENT_SYSTEM)

    Raises:
        InvalidDimension: If width or height is not positive
    """
    return _line("SIZE", _distance("width", width, unit), _distance("height", height, unit))


def gap(distance: Number, offset: Number = 0,
        unit: Union[MeasurementSystem, str, None] = None) -> str:
    """
    GAP command: vertical gap between labels and its offset.

    Raises:
        InvalidDimension: If distance is not positive or offset is negative
    """
    return _line(
        "GAP",
        _distance("gap distance", distance, unit),
        _distance("gap offset", offset, unit, allow_zero=True),
    )


def bline(height: Number, offset: Number = 0,
          unit: Union[MeasurementSystem, str, None] = None) -> str:
    """BLINE command: black mark height and offset."""
    return _line(
        "BLINE",
        _distance("black mark height", height, unit, allow_zero=True),
        _distance("black mark offset", offset, unit, allow_zero=True),
    )


def offset(distance: Number, unit: Union[MeasurementSystem, str, None] = None) -> str:
    """OFFSET command: extra feed after printing (may be negative)."""
    return _line("OFFSET", _distance("offset", distance, unit, allow_negative=True))


def speed(value: Number) -> str:
    """
    SPEED command: print speed in inches per second.

    The value is not checked against the printer's supported steps.
    """
    if not is_finite_number(value) or value <= 0:
        raise InvalidValue(f"speed must be a positive number, got {value!r}")
    return _line("SPEED", format_number(value))


def density(value: int) -> str:
    """
    DENSITY command: print darkness.

    Printers accept 0-15; out of range levels are left to the firmware.
    """
    return _line("DENSITY", _integer("density", value, 0))


def direction(value: Union[Direction, int] = Direction.FORWARD, mirror: int = 0) -> str:
    """DIRECTION command: print direction and mirror image."""
    token = str(_member(Direction, value, "direction", InvalidValue).value)
    if isinstance(mirror, bool) or not isinstance(mirror, int) or mirror not in (0, 1):
        raise InvalidValue(f"mirror must be 0 or 1, got {mirror!r}")
    return _line("DIRECTION", token, str(int(mirror)))


def reference(x: int, y: int) -> str:
    """REFERENCE command: origin of the coordinate system."""
    return _line("REFERENCE", _coordinate("x", x), _coordinate("y", y))


# ---- Buffer Commands ----


def cls() -> str:
    """Clear the printer's image buffer (not the program buffer)."""
    return _line("CLS")


def home() -> str:
    """Feed label to home position."""
    return _line("HOME")


def formfeed() -> str:
    """Feed one label forward."""
    return _line("FORMFEED")


def feed(dots: int) -> str:
    """Feed paper by specified dots."""
    return _line("FEED", _integer("feed", dots, 1, InvalidDimension))


def backfeed(dots: int) -> str:
    """Feed paper backward by specified dots."""
    return _line("BACKFEED", _integer("backfeed", dots, 1, InvalidDimension))


# ---- Text Commands ----


def text(x: int, y: int, font: FontSpec, rotation: Union[Rotation, int],
         x_mul: int, y_mul: int, content: str) -> str:
    """
    TEXT command.

    Args:
        x, y: Position in dots
        font: Font enum, font name (e.g. "TSS24.BF2") or font number
        rotation: 0, 90, 180, or 270 degrees
        x_mul, y_mul: Horizontal and vertical multipliers (>= 1)
        content: Text to print, escaped here

    Raises:
        InvalidRotation: If rotation is not 0, 90, 180 or 270
        InvalidMultiplier: If either multiplier is below 1
    """
    return _line(
        "TEXT",
        _coordinate("x", x),
        _coordinate("y", y),
        _font(font),
        _rotation(rotation),
        _integer("x multiplier", x_mul, 1, InvalidMultiplier),
        _integer("y multiplier", y_mul, 1, InvalidMultiplier),
        quote(content),
    )


def block(x: int, y: int, width: int, height: int, font: FontSpec,
          rotation: Union[Rotation, int], x_mul: int, y_mul: int,
          line_spacing: int, alignment: Union[Alignment, str], content: str) -> str:
    """
    BLOCK command: text wrapped inside a width x height area.

    Raises:
        InvalidDimension: If width or height is not positive
        InvalidAlignment: If alignment is not L, C, R or J
    """
    return _line(
        "BLOCK",
        _coordinate("x", x),
        _coordinate("y", y),
        _integer("block width", width, 1, InvalidDimension),
        _integer("block height", height, 1, InvalidDimension),
        _font(font),
        _rotation(rotation),
        _integer("x multiplier", x_mul, 1, InvalidMultiplier),
        _integer("y multiplier", y_mul, 1, InvalidMultiplier),
        _integer("line spacing", line_spacing, 0),
        _member(Alignment, alignment, "alignment", InvalidAlignment).value,
        quote(content),
    )


# ---- Barcode Commands ----


def resolve_symbology(barcode_type: SymbologySpec) -> str:
    """
    Resolve a barcode type to its TSPL type token.

    BarcodeType members map to their token. Plain strings may name a
    member ("CODE128") or be a known token ("128"). RawSymbology values
    are passed through unresolved; that is the only way to send a token
    BarcodeType does not list.

    Raises:
        InvalidBarcodeType: For any other value
    """
    if isinstance(barcode_type, RawSymbology):
        if not barcode_type:
            raise InvalidBarcodeType("Raw symbology token must not be empty")
        return str(barcode_type)
    if isinstance(barcode_type, BarcodeType):
        return barcode_type.value
    if isinstance(barcode_type, str):
        key = barcode_type.upper()
        if key in BarcodeType.__members__:
            return BarcodeType[key].value
        try:
            return BarcodeType(key).value
        except ValueError:
            pass
    raise InvalidBarcodeType(
        f"Unknown barcode type: {barcode_type!r}. "
        "Use RawSymbology(...) to send an unlisted type token"
    )


def barcode(x: int, y: int, barcode_type: SymbologySpec, height: int,
            readable: Union[Readable, int], rotation: Union[Rotation, int],
            narrow: int, wide: int, content: str) -> str:
    """
    BARCODE command: 1D barcode.

    Args:
        x, y: Position in dots
        barcode_type: BarcodeType, member name/token, or RawSymbology
        height: Bar height in dots
        readable: 0=none, 1=left, 2=center, 3=right
        rotation: 0, 90, 180, or 270 degrees
        narrow, wide: Narrow and wide bar widths in dots
        content: Barcode data, escaped here
    """
    return _line(
        "BARCODE",
        _coordinate("x", x),
        _coordinate("y", y),
        quote(resolve_symbology(barcode_type)),
        _integer("barcode height", height, 1, InvalidDimension),
        str(_member(Readable, readable, "readable", InvalidValue).value),
        _rotation(rotation),
        _integer("narrow", narrow, 1),
        _integer("wide", wide, 1),
        quote(content),
    )


def qrcode(x: int, y: int, ecc: Union[EccLevel, str], cell_width: int,
           mode: Union[QRMode, str], rotation: Union[Rotation, int], content: str) -> str:
    """
    QRCODE command.

    Args:
        x, y: Position in dots
        ecc: Error correction level (L, M, Q, H)
        cell_width: Module width in dots
        mode: A=auto, M=manual
        rotation: 0, 90, 180, or 270 degrees
        content: QR code data, escaped here
    """
    return _line(
        "QRCODE",
        _coordinate("x", x),
        _coordinate("y", y),
        _member(EccLevel, ecc, "ECC level", InvalidEccLevel).value,
        _integer("cell width", cell_width, 1),
        _member(QRMode, mode, "QR mode", InvalidMode).value,
        _rotation(rotation),
        quote(content),
    )


# ---- Drawing Commands ----


def box(x: int, y: int, x_end: int, y_end: int, thickness: int = 1,
        radius: Optional[int] = None) -> str:
    """Draw a rectangle outline, optionally with rounded corners."""
    tokens = [
        _coordinate("x", x),
        _coordinate("y", y),
        _coordinate("x end", x_end),
        _coordinate("y end", y_end),
        _thickness(thickness),
    ]
    if radius is not None:
        tokens.append(_integer("radius", radius, 0))
    return _line("BOX", *tokens)


def line(x: int, y: int, x_end: int, y_end: int, thickness: int = 1) -> str:
    """Draw a straight line between two points (DIAGONAL)."""
    return _line(
        "DIAGONAL",
        _coordinate("x", x),
        _coordinate("y", y),
        _coordinate("x end", x_end),
        _coordinate("y end", y_end),
        _thickness(thickness),
    )


def circle(x: int, y: int, diameter: int, thickness: int = 1) -> str:
    """Draw a circle whose bounding box starts at x, y."""
    return _line(
        "CIRCLE",
        _coordinate("x", x),
        _coordinate("y", y),
        _integer("diameter", diameter, 1, InvalidDimension),
        _thickness(thickness),
    )


def ellipse(x: int, y: int, width: int, height: int, thickness: int = 1) -> str:
    """Draw an ellipse whose bounding box starts at x, y."""
    return _line(
        "ELLIPSE",
        _coordinate("x", x),
        _coordinate("y", y),
        _integer("ellipse width", width, 1, InvalidDimension),
        _integer("ellipse height", height, 1, InvalidDimension),
        _thickness(thickness),
    )


def _area(keyword: str, x: int, y: int, width: int, height: int) -> str:
    return _line(
        keyword,
        _coordinate("x", x),
        _coordinate("y", y),
        _integer("width", width, 1, InvalidDimension),
        _integer("height", height, 1, InvalidDimension),
    )


def bar(x: int, y: int, width: int, height: int) -> str:
    """Draw a filled black rectangle."""
    return _area("BAR", x, y, width, height)


def erase(x: int, y: int, width: int, height: int) -> str:
    """Erase (white out) a rectangular area."""
    return _area("ERASE", x, y, width, height)


def reverse(x: int, y: int, width: int, height: int) -> str:
    """Reverse (invert) a rectangular area."""
    return _area("REVERSE", x, y, width, height)


# ---- Bitmap Commands ----


def bitmap(x: int, y: int, width_bytes: int, height_dots: int,
           mode: Union[BitmapMode, int], hex_data: Union[str, bytes]) -> str:
    """
    BITMAP command with a hexadecimal payload.

    Args:
        x, y: Position in dots
        width_bytes: Row width in bytes (8 dots per byte)
        height_dots: Number of rows
        mode: 0=overwrite, 1=XOR
        hex_data: Hex string (emitted verbatim) or raw bytes (hex encoded)

    Raises:
        InvalidMode: If mode is not 0 or 1
        BitmapSizeMismatch: If the payload is not width_bytes * height_dots bytes
        InvalidValue: If hex_data contains non-hex characters
    """
    width_token = _integer("bitmap width", width_bytes, 1, InvalidDimension)
    height_token = _integer("bitmap height", height_dots, 1, InvalidDimension)
    mode_token = str(_member(BitmapMode, mode, "bitmap mode", InvalidMode).value)

    if isinstance(hex_data, (bytes, bytearray)):
        hex_data = bytes(hex_data).hex().upper()
    if not isinstance(hex_data, str):
        raise InvalidValue(f"Bitmap data must be a hex string, got {type(hex_data).__name__}")

    expected = 2 * width_bytes * height_dots
    if len(hex_data) != expected:
        raise BitmapSizeMismatch(
            f"Bitmap {width_bytes}x{height_dots} needs {expected} hex digits, "
            f"got {len(hex_data)}"
        )
    if not HEX_PATTERN.match(hex_data):
        raise InvalidValue("Bitmap data contains non-hexadecimal characters")

    return _line(
        "BITMAP",
        _coordinate("x", x),
        _coordinate("y", y),
        width_token,
        height_token,
        mode_token,
        hex_data,
    )


def putbmp(x: int, y: int, filename: str) -> str:
    """
    PUTBMP command: draw a BMP stored on the printer.

    The filename refers to printer storage and is not checked locally.
    """
    if not isinstance(filename, str) or not filename:
        raise InvalidValue(f"Invalid BMP filename: {filename!r}")
    return _line("PUTBMP", _coordinate("x", x), _coordinate("y", y), quote(filename))


# ---- Print Commands ----


def print_label(copies: int = 1, sets: Optional[int] = None) -> str:
    """
    PRINT command.

    Args:
        copies: Number of copies (PRINT m)
        sets: Optional number of sets, emitted as PRINT m,n
    """
    tokens = [_integer("copies", copies, 1)]
    if sets is not None:
        tokens.append(_integer("sets", sets, 1))
    return _line("PRINT", *tokens)
