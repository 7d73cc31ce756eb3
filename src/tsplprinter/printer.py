"""
TSPL Label Program Builder.

Accumulates encoded TSPL commands into one printable program. Every
drawing method appends exactly one command and returns the builder, so
a label can be written as a single chained expression:

    program = (
        TSPLPrinter(MeasurementSystem.METRIC)
        .initialize(width=40, height=30)
        .add_text(x=10, y=10, font="3", text="Hello")
        .print(1)
        .get_buffer()
    )

The builder does not talk to a printer. Hand get_buffer() or get_bytes()
to whatever transport delivers the job.
"""

import logging
from dataclasses import replace
from typing import Optional, Union

from PIL import Image

from . import commands
from .errors import NotInitialized
from .image import image_to_bitmap
from .tspl import (
    Alignment,
    BitmapMode,
    Command,
    Direction,
    EccLevel,
    FontSpec,
    LabelConfig,
    MeasurementSystem,
    Number,
    QRMode,
    Readable,
    Rotation,
    SymbologySpec,
    TextOptions,
    resolve_measurement_system,
)

logger = logging.getLogger(__name__)


class TSPLPrinter:
    """
    Chainable TSPL program builder.

    The builder is either uninitialized (no page setup issued) or
    initialized. With require_initialize set, drawing and print calls in
    the uninitialized state raise NotInitialized. add_command() is always
    accepted.

    Instances are not thread-safe; each one owns its buffer.
    """

    DEFAULT_SPEED = 3
    DEFAULT_DENSITY = 8
    DEFAULT_GAP = 3
    DEFAULT_GAP_OFFSET = 0

    def __init__(self, measurement_system: Union[MeasurementSystem, str, None] = MeasurementSystem.ENGLISH,
                 require_initialize: bool = True):
        """
        Create a builder.

        Args:
            measurement_system: Default unit for page geometry
            require_initialize: Reject drawing commands before initialize()
        """
        self.measurement_system = resolve_measurement_system(measurement_system)
        self.require_initialize = require_initialize
        self._commands: list[Command] = []
        self._active_system: Optional[MeasurementSystem] = None
        self._debug = False

    def set_debug(self, enabled: bool) -> "TSPLPrinter":
        """Enable/disable debug logging of appended commands."""
        self._debug = enabled
        return self

    def _log(self, message: str):
        """Log debug message if enabled."""
        if self._debug:
            logger.debug("[TSPL] %s", message)

    # ---- Buffer ----

    @property
    def is_initialized(self) -> bool:
        """True once initialize() has issued page setup."""
        return self._active_system is not None

    @property
    def commands(self) -> tuple[Command, ...]:
        """Buffered entries in program order."""
        return tuple(self._commands)

    def _append(self, line: str, raw: bool = False):
        name = "RAW" if raw else line.split(" ", 1)[0].rstrip("\r\n")
        self._commands.append(Command(name=name, line=line, raw=raw))
        self._log(repr(line))

    def _add(self, line: str) -> "TSPLPrinter":
        # Encoding already succeeded; a failed encode never gets here
        if self.require_initialize and not self.is_initialized:
            raise NotInitialized(
                f"{line.split(' ', 1)[0].strip()} issued before initialize()"
            )
        self._append(line)
        return self

    def get_buffer(self) -> str:
        """Get the complete program text."""
        return "".join(cmd.line for cmd in self._commands)

    def get_bytes(self, encoding: str = "utf-8") -> bytes:
        """Get the program encoded for a transport."""
        return self.get_buffer().encode(encoding)

    def reset(self) -> "TSPLPrinter":
        """Discard all buffered commands and page setup."""
        self._commands.clear()
        self._active_system = None
        self._log("buffer reset")
        return self

    # ---- Setup Commands ----

    def initialize(self, config: Optional[LabelConfig] = None, **fields) -> "TSPLPrinter":
        """
        Start a new program with page setup.

        Clears the buffer, then emits SIZE, SPEED, DENSITY, GAP and CLS in
        that order.

        Args:
            config: Label configuration
            **fields: LabelConfig fields, overriding those in config

        Returns:
            The builder for chaining
        """
        if config is None:
            config = LabelConfig(**fields)
        elif fields:
            config = replace(config, **fields)

        system = resolve_measurement_system(config.measurement_system, self.measurement_system)
        setup = [
            commands.size(config.width, config.height, system),
            commands.speed(self.DEFAULT_SPEED if config.speed is None else config.speed),
            commands.density(self.DEFAULT_DENSITY if config.density is None else config.density),
            commands.gap(
                self.DEFAULT_GAP if config.gap is None else config.gap,
                self.DEFAULT_GAP_OFFSET if config.gap_offset is None else config.gap_offset,
                system,
            ),
            commands.cls(),
        ]

        self.reset()
        for line in setup:
            self._append(line)
        self._active_system = system
        return self

    def set_gap(self, gap: Number, offset: Number = 0,
                measurement_system: Union[MeasurementSystem, str, None] = None) -> "TSPLPrinter":
        """Set the gap between labels in the program's measurement system."""
        system = resolve_measurement_system(
            measurement_system, self._active_system or self.measurement_system
        )
        return self._add(commands.gap(gap, offset, system))

    def set_direction(self, direction: Union[Direction, int] = Direction.FORWARD,
                      mirror: int = 0) -> "TSPLPrinter":
        """Set print direction and mirroring."""
        return self._add(commands.direction(direction, mirror))

    def set_reference(self, x: int, y: int) -> "TSPLPrinter":
        """Set reference point for coordinates."""
        return self._add(commands.reference(x, y))

    def add_command(self, command: str) -> "TSPLPrinter":
        """
        Append raw TSPL text verbatim.

        The text is neither validated nor terminated; include the CRLF
        yourself. Raw entries are flagged in commands.
        """
        if not isinstance(command, str):
            raise TypeError(f"Raw command must be a string, got {type(command).__name__}")
        self._append(command, raw=True)
        return self

    # ---- Text Commands ----

    def add_text(self, options: Optional[TextOptions] = None, **fields) -> "TSPLPrinter":
        """
        Add a TEXT command.

        Args:
            options: Text options
            **fields: TextOptions fields, overriding those in options
        """
        if options is None:
            options = TextOptions(**fields)
        elif fields:
            options = replace(options, **fields)

        return self._add(commands.text(
            options.x,
            options.y,
            options.font,
            options.rotation,
            options.x_multiplier,
            options.y_multiplier,
            options.text,
        ))

    def add_text_block(self, x: int, y: int, width: int, height: int, font: FontSpec,
                       text: str, rotation: Union[Rotation, int] = Rotation.NO_ROTATION,
                       x_multiplier: int = 1, y_multiplier: int = 1,
                       line_spacing: int = 0,
                       alignment: Union[Alignment, str] = Alignment.LEFT) -> "TSPLPrinter":
        """Add text wrapped inside a width x height block."""
        return self._add(commands.block(
            x, y, width, height, font, rotation,
            x_multiplier, y_multiplier, line_spacing, alignment, text,
        ))

    # ---- Barcode Commands ----

    def add_barcode(self, x: int, y: int, barcode_type: SymbologySpec, height: int,
                    content: str, readable: Union[Readable, int] = Readable.LEFT,
                    rotation: Union[Rotation, int] = Rotation.NO_ROTATION,
                    narrow: int = 2, wide: int = 4) -> "TSPLPrinter":
        """
        Add a 1D barcode.

        Args:
            x, y: Position in dots
            barcode_type: BarcodeType, its name or token, or RawSymbology
            height: Bar height in dots
            content: Barcode data
            readable: Human readable line placement (0 hides it)
            rotation: 0, 90, 180, or 270 degrees
            narrow, wide: Narrow and wide bar widths in dots
        """
        return self._add(commands.barcode(
            x, y, barcode_type, height, readable, rotation, narrow, wide, content,
        ))

    def add_qrcode(self, x: int, y: int, content: str,
                   ecc_level: Union[EccLevel, str] = EccLevel.M, cell_width: int = 6,
                   mode: Union[QRMode, str] = QRMode.AUTO,
                   rotation: Union[Rotation, int] = Rotation.NO_ROTATION) -> "TSPLPrinter":
        """Add a QR code."""
        return self._add(commands.qrcode(x, y, ecc_level, cell_width, mode, rotation, content))

    # ---- Drawing Commands ----

    def add_box(self, x: int, y: int, x_end: int, y_end: int, thickness: int = 1,
                radius: Optional[int] = None) -> "TSPLPrinter":
        """Add a rectangle outline."""
        return self._add(commands.box(x, y, x_end, y_end, thickness, radius))

    def add_line(self, x: int, y: int, x_end: int, y_end: int,
                 thickness: int = 1) -> "TSPLPrinter":
        """Add a line between two points."""
        return self._add(commands.line(x, y, x_end, y_end, thickness))

    def add_circle(self, x: int, y: int, diameter: int, thickness: int = 1) -> "TSPLPrinter":
        """Add a circle."""
        return self._add(commands.circle(x, y, diameter, thickness))

    def add_ellipse(self, x: int, y: int, width: int, height: int,
                    thickness: int = 1) -> "TSPLPrinter":
        """Add an ellipse."""
        return self._add(commands.ellipse(x, y, width, height, thickness))

    def add_bar(self, x: int, y: int, width: int, height: int) -> "TSPLPrinter":
        """Add a filled black rectangle."""
        return self._add(commands.bar(x, y, width, height))

    def add_erase(self, x: int, y: int, width: int, height: int) -> "TSPLPrinter":
        """Erase (white out) a rectangular area."""
        return self._add(commands.erase(x, y, width, height))

    def add_reverse(self, x: int, y: int, width: int, height: int) -> "TSPLPrinter":
        """Reverse (invert) a rectangular area."""
        return self._add(commands.reverse(x, y, width, height))

    # ---- Bitmap Commands ----

    def add_bitmap(self, x: int, y: int, width: int, height: int, bitmap: Union[str, bytes],
                   mode: Union[BitmapMode, int] = BitmapMode.OVERWRITE) -> "TSPLPrinter":
        """
        Add a bitmap.

        Args:
            x, y: Position in dots
            width: Row width in bytes
            height: Height in dots
            bitmap: Hex string of exactly width * height bytes
            mode: 0=overwrite, 1=XOR
        """
        return self._add(commands.bitmap(x, y, width, height, mode, bitmap))

    def add_image(self, x: int, y: int, image: Image.Image,
                  mode: Union[BitmapMode, int] = BitmapMode.OVERWRITE,
                  threshold: int = 128) -> "TSPLPrinter":
        """Add a PIL Image as a bitmap."""
        width_bytes, height, data = image_to_bitmap(image, threshold)
        return self.add_bitmap(x, y, width_bytes, height, data, mode)

    def add_bmp(self, x: int, y: int, filename: str) -> "TSPLPrinter":
        """Add a BMP already stored on the printer."""
        return self._add(commands.putbmp(x, y, filename))

    # ---- Print Commands ----

    def print(self, copies: int = 1, sets: Optional[int] = None) -> "TSPLPrinter":
        """Print the label."""
        return self._add(commands.print_label(copies, sets))

    def clear(self) -> "TSPLPrinter":
        """Clear the printer's image buffer (CLS), not this program."""
        return self._add(commands.cls())

    def feed(self, dots: int) -> "TSPLPrinter":
        """Feed paper by specified dots."""
        return self._add(commands.feed(dots))

    def formfeed(self) -> "TSPLPrinter":
        """Feed one label forward."""
        return self._add(commands.formfeed())
