"""
Exception hierarchy for TSPL encoding.

Every encoder failure is raised before a command line is produced, so a
malformed command never reaches the program buffer.
"""


# --- Exception Classes ---


class TSPLError(Exception):
    """Base exception for all TSPL encoding errors."""

    pass


class InvalidValue(TSPLError, ValueError):
    """A parameter has the wrong type, sign, or is outside its enumerated set."""

    pass


class InvalidDimension(InvalidValue):
    """Non-positive width, height, or distance."""

    pass


class InvalidRotation(InvalidValue):
    """Rotation is not one of 0, 90, 180 or 270."""

    pass


class InvalidMultiplier(InvalidValue):
    """Font scale factor is not a positive integer."""

    pass


class InvalidThickness(InvalidValue):
    """Line thickness is not a positive integer."""

    pass


class InvalidAlignment(InvalidValue):
    """Text block alignment is not one of L, C, R, J."""

    pass


class InvalidEccLevel(InvalidValue):
    """QR code error correction level is not one of L, M, Q, H."""

    pass


class InvalidMode(InvalidValue):
    """QR code or bitmap mode is outside its enumerated set."""

    pass


class InvalidBarcodeType(InvalidValue):
    """Barcode type is neither a known symbology nor an explicit raw token."""

    pass


class BitmapSizeMismatch(InvalidValue):
    """Hex payload length does not match the declared bitmap dimensions."""

    pass


class UnescapedPayload(TSPLError):
    """A quoted field would carry an unescaped quote or backslash."""

    pass


class NotInitialized(TSPLError):
    """A drawing command was issued before page setup."""

    pass
