"""
TSPL (TSC Printer Language) value types.

TSPL is a text-based command language used by TSC and compatible label printers.
Commands are ASCII strings terminated with CRLF (\\r\\n).

This module holds the enumerations and value objects shared by the command
encoder and the program builder, plus the two pieces of policy both of them
depend on: measurement system resolution and numeric token formatting.

Reference: TSPL/TSPL2 Programming Manual
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional, Union

from .errors import InvalidValue


CRLF = "\r\n"

# Decimal places kept for millimetre and inch dimensions
DECIMAL_PLACES = 3


class MeasurementSystem(str, Enum):
    """Unit system for page geometry (SIZE, GAP, BLINE, OFFSET)."""
    METRIC = "metric"    # millimetres, "mm" suffix
    ENGLISH = "english"  # inches, no suffix
    DOTS = "dots"        # device dots, "dot" suffix


DEFAULT_MEASUREMENT_SYSTEM = MeasurementSystem.ENGLISH


class Rotation(IntEnum):
    """Clockwise rotation of text, barcodes and QR codes."""
    NO_ROTATION = 0
    ROTATE_90 = 90
    ROTATE_180 = 180
    ROTATE_270 = 270


class Font(str, Enum):
    """Resident printer fonts."""
    FONT_0 = "0"  # Monotype CG Triumvirate Bold Condensed
    FONT_1 = "1"  # 8 x 12 fixed pitch
    FONT_2 = "2"  # 12 x 20 fixed pitch
    FONT_3 = "3"  # 16 x 24 fixed pitch
    FONT_4 = "4"  # 24 x 32 fixed pitch
    FONT_5 = "5"  # 32 x 48 fixed pitch
    FONT_6 = "6"  # 14 x 19 OCR-B
    FONT_7 = "7"  # 21 x 27 OCR-B
    FONT_8 = "8"  # 14 x 25 OCR-A
    ROMAN = "ROMAN.TTF"


class BarcodeType(str, Enum):
    """1D symbologies and their TSPL type tokens."""
    CODE128 = "128"
    CODE128M = "128M"
    EAN128 = "EAN128"
    ITF25 = "25"
    ITF25C = "25C"
    ITF14 = "ITF14"
    CODE39 = "39"
    CODE39C = "39C"
    CODE39S = "39S"
    CODE93 = "93"
    EAN13 = "EAN13"
    EAN13_2 = "EAN13+2"
    EAN13_5 = "EAN13+5"
    EAN8 = "EAN8"
    EAN8_2 = "EAN8+2"
    EAN8_5 = "EAN8+5"
    UPCA = "UPCA"
    UPCA_2 = "UPCA+2"
    UPCA_5 = "UPCA+5"
    UPCE = "UPCE"
    UPCE_2 = "UPCE+2"
    UPCE_5 = "UPCE+5"
    CODABAR = "CODA"
    POSTNET = "POST"
    MSI = "MSI"
    MSIC = "MSIC"
    PLESSEY = "PLESSEY"
    TELEPEN = "TELEPEN"
    TELEPENN = "TELEPENN"
    LOGMARS = "LOGMARS"
    CPOST = "CPOST"


class RawSymbology(str):
    """
    Barcode type token sent to the printer as-is.

    Use this for symbologies a particular firmware supports but
    BarcodeType does not list. No lookup or validation is done on it.
    """

    def __repr__(self) -> str:
        return f"RawSymbology({str.__repr__(self)})"


class Readable(IntEnum):
    """Placement of the human-readable line under a barcode."""
    NONE = 0
    LEFT = 1
    CENTER = 2
    RIGHT = 3


class Alignment(str, Enum):
    """Text block alignment."""
    LEFT = "L"
    CENTER = "C"
    RIGHT = "R"
    JUSTIFY = "J"


class EccLevel(str, Enum):
    """QR code error correction level (ascending redundancy)."""
    L = "L"  # 7%
    M = "M"  # 15%
    Q = "Q"  # 25%
    H = "H"  # 30%


class QRMode(str, Enum):
    """QR code encoding mode."""
    AUTO = "A"
    MANUAL = "M"


class BitmapMode(IntEnum):
    """Bitmap overlay modes."""
    OVERWRITE = 0  # Replace existing content
    XOR = 1        # XOR with existing content


class Direction(IntEnum):
    """Print direction."""
    FORWARD = 0   # Normal
    BACKWARD = 1  # Rotated 180 degrees


Number = Union[int, float, Decimal]
FontSpec = Union[Font, str, int]
SymbologySpec = Union[BarcodeType, RawSymbology, str]


@dataclass
class LabelConfig:
    """Page setup consumed by TSPLPrinter.initialize()."""
    width: Number
    height: Number
    speed: Number = 3
    density: int = 8
    gap: Number = 3
    gap_offset: Number = 0
    measurement_system: Optional[MeasurementSystem] = None  # None = builder default


@dataclass
class TextOptions:
    """Parameters of a single TEXT command."""
    x: int
    y: int
    font: FontSpec
    text: str
    rotation: Union[Rotation, int] = Rotation.NO_ROTATION
    x_multiplier: int = 1
    y_multiplier: int = 1


@dataclass(frozen=True)
class Command:
    """
    One entry of a program buffer.

    Typed entries come from the encoder and carry its guarantees. Raw
    entries are caller text appended verbatim and are never validated.
    """
    name: str
    line: str
    raw: bool = False


def resolve_measurement_system(
    override: Optional[Union[MeasurementSystem, str]] = None,
    default: Optional[Union[MeasurementSystem, str]] = None,
) -> MeasurementSystem:
    """
    Pick the measurement system for a command.

    Precedence: call-level override, then the instance default, then
    DEFAULT_MEASUREMENT_SYSTEM.

    Raises:
        InvalidValue: If the chosen value is not a MeasurementSystem
    """
    for candidate in (override, default):
        if candidate is None:
            continue
        try:
            return MeasurementSystem(candidate)
        except ValueError:
            raise InvalidValue(
                f"Invalid measurement system: {candidate!r}. "
                f"Expected one of {[m.value for m in MeasurementSystem]}"
            ) from None
    return DEFAULT_MEASUREMENT_SYSTEM


def is_finite_number(value) -> bool:
    """True for a real, finite int, float or Decimal (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def format_number(value: Number, decimals: int = DECIMAL_PLACES) -> str:
    """
    Format a number as a TSPL numeric token.

    Always uses '.' as decimal separator, never groups digits and never
    uses exponent notation. Integral values are printed without a
    fractional part.

    Args:
        value: Number to format
        decimals: Maximum number of decimal places kept

    Raises:
        InvalidValue: If value is not a finite real number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidValue(f"Expected a number, got {value!r}")
    if isinstance(value, int):
        return str(value)
    if not is_finite_number(value):
        raise InvalidValue(f"Expected a finite number, got {value!r}")

    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text
