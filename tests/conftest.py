"""
Pytest configuration for tsplprinter tests.

Provides builder fixtures in the uninitialized and initialized states.
"""

import pytest

from tsplprinter import MeasurementSystem, TSPLPrinter


@pytest.fixture
def blank_printer():
    """Builder with no page setup issued (English default)."""
    return TSPLPrinter()


@pytest.fixture
def printer():
    """Builder initialized for a 40 x 30 mm label."""
    return TSPLPrinter(MeasurementSystem.METRIC).initialize(width=40, height=30)

