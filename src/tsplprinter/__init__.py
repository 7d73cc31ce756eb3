"""TSPL label program encoder for TSC-compatible thermal printers."""

__version__ = "0.1.0"

from . import commands
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
    NotInitialized,
    TSPLError,
    UnescapedPayload,
)
from .image import image_to_bitmap, pack_pixels
from .printer import TSPLPrinter
from .tspl import (
    DEFAULT_MEASUREMENT_SYSTEM,
    Alignment,
    BarcodeType,
    BitmapMode,
    Command,
    Direction,
    EccLevel,
    Font,
    LabelConfig,
    MeasurementSystem,
    QRMode,
    RawSymbology,
    Readable,
    Rotation,
    TextOptions,
    format_number,
    resolve_measurement_system,
)

__all__ = [
    "TSPLPrinter",
    "commands",
    "TSPLError",
    "InvalidValue",
    "InvalidDimension",
    "InvalidRotation",
    "InvalidMultiplier",
    "InvalidThickness",
    "InvalidAlignment",
    "InvalidEccLevel",
    "InvalidMode",
    "InvalidBarcodeType",
    "BitmapSizeMismatch",
    "UnescapedPayload",
    "NotInitialized",
    "MeasurementSystem",
    "DEFAULT_MEASUREMENT_SYSTEM",
    "Rotation",
    "Font",
    "BarcodeType",
    "RawSymbology",
    "Readable",
    "Alignment",
    "EccLevel",
    "QRMode",
    "BitmapMode",
    "Direction",
    "LabelConfig",
    "TextOptions",
    "Command",
    "resolve_measurement_system",
    "format_number",
    "image_to_bitmap",
    "pack_pixels",
]
