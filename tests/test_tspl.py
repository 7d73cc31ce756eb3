"""Tests for TSPL value types and formatting."""

import math
from decimal import Decimal

import pytest

from tsplprinter.errors import InvalidValue
from tsplprinter.tspl import (
    DEFAULT_MEASUREMENT_SYSTEM,
    BarcodeType,
    Command,
    LabelConfig,
    MeasurementSystem,
    RawSymbology,
    Rotation,
    TextOptions,
    format_number,
    resolve_measurement_system,
)


class TestFormatNumber:
    """Test numeric token formatting."""

    @pytest.mark.parametrize("value,expected", [
        (40, "40"),
        (40.0, "40"),
        (2.5, "2.5"),
        (0.125, "0.125"),
        (1.23456, "1.235"),
        (Decimal("2.50"), "2.5"),
        (1e20, "100000000000000000000"),
        (1e-7, "0"),
        (-0.0001, "0"),
        (-1.5, "-1.5"),
    ])
    def test_format(self, value, expected):
        """Numbers use '.' and never exponent notation."""
        assert format_number(value) == expected

    def test_custom_precision(self):
        """Decimal places can be reduced."""
        assert format_number(0.125, decimals=2) == "0.12"

    @pytest.mark.parametrize("value", [True, "3", None, math.nan, math.inf])
    def test_rejects_non_numbers(self, value):
        """Booleans, strings and non-finite values are rejected."""
        with pytest.raises(InvalidValue):
            format_number(value)


class TestResolveMeasurementSystem:
    """Test measurement system precedence."""

    def test_global_default(self):
        """With nothing set the global default applies."""
        assert resolve_measurement_system() is DEFAULT_MEASUREMENT_SYSTEM
        assert DEFAULT_MEASUREMENT_SYSTEM is MeasurementSystem.ENGLISH

    def test_instance_default(self):
        """The instance default beats the global default."""
        assert resolve_measurement_system(None, MeasurementSystem.DOTS) is MeasurementSystem.DOTS

    def test_override_wins(self):
        """A call-level override beats the instance default."""
        result = resolve_measurement_system(MeasurementSystem.METRIC, MeasurementSystem.DOTS)
        assert result is MeasurementSystem.METRIC

    def test_string_values(self):
        """Enum values are accepted as strings."""
        assert resolve_measurement_system("dots") is MeasurementSystem.DOTS

    def test_invalid(self):
        """Unknown systems are rejected rather than ignored."""
        with pytest.raises(InvalidValue):
            resolve_measurement_system("furlongs", MeasurementSystem.METRIC)


class TestValueTypes:
    """Test dataclasses and enums."""

    def test_label_config_defaults(self):
        """LabelConfig defaults."""
        config = LabelConfig(width=40, height=30)
        assert config.speed == 3
        assert config.density == 8
        assert config.gap == 3
        assert config.gap_offset == 0
        assert config.measurement_system is None

    def test_text_options_defaults(self):
        """TextOptions defaults."""
        options = TextOptions(x=1, y=2, font="1", text="x")
        assert options.rotation == Rotation.NO_ROTATION
        assert options.x_multiplier == 1
        assert options.y_multiplier == 1

    def test_rotation_values(self):
        """Rotation has exactly four members."""
        assert [int(r) for r in Rotation] == [0, 90, 180, 270]

    def test_barcode_tokens(self):
        """Symbologies map to TSPL tokens."""
        assert BarcodeType.CODE128.value == "128"
        assert BarcodeType.CODE39.value == "39"
        assert BarcodeType.EAN13.value == "EAN13"

    def test_raw_symbology_is_str(self):
        """RawSymbology behaves as its token."""
        raw = RawSymbology("DPI")
        assert raw == "DPI"
        assert repr(raw) == "RawSymbology('DPI')"

    def test_command_is_frozen(self):
        """Buffer entries cannot be modified."""
        cmd = Command(name="CLS", line="CLS\r\n")
        assert cmd.raw is False
        with pytest.raises(AttributeError):
            cmd.line = "HOME\r\n"
