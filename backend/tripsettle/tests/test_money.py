"""
Tests for minor-unit conversion and rounding helpers.
"""
import pytest
from decimal import Decimal
from fractions import Fraction

from tripsettle.services.money import (
    allocate_minor_units,
    from_minor_units,
    minor_unit_factor,
    round_half_even,
    to_minor_units,
)


def test_round_half_even_ties_go_to_even():
    """Test banker's rounding on exact halves."""
    assert round_half_even(Fraction(5, 2)) == 2
    assert round_half_even(Fraction(7, 2)) == 4
    assert round_half_even(Decimal("-2.5")) == -2
    assert round_half_even(Fraction(1, 3)) == 0
    assert round_half_even(Fraction(2, 3)) == 1


def test_round_half_even_rejects_float():
    """Test binary floats never enter money arithmetic."""
    with pytest.raises(TypeError):
        round_half_even(2.5)


def test_minor_unit_factor():
    """Test per-currency minor unit factors."""
    assert minor_unit_factor() == 100
    assert minor_unit_factor("USD") == 100
    assert minor_unit_factor("jpy") == 1
    assert minor_unit_factor("KWD") == 1000
    assert minor_unit_factor("XYZ") == 100


def test_to_minor_units():
    """Test major to minor unit conversion."""
    assert to_minor_units("12.34") == 1234
    assert to_minor_units(Decimal("0.125")) == 12
    assert to_minor_units(Decimal("0.135")) == 14
    assert to_minor_units(19.99) == 1999
    assert to_minor_units(0.1 + 0.2) == 30
    assert to_minor_units(1000, "JPY") == 1000
    assert to_minor_units(Decimal("1.2345"), "BHD") == 1234
    assert to_minor_units(5, minor_factor=10) == 50


def test_from_minor_units():
    """Test minor to major unit conversion."""
    assert from_minor_units(1234) == Decimal("12.34")
    assert from_minor_units(500, "JPY") == Decimal(500)
    assert from_minor_units(1234, "BHD") == Decimal("1.234")
    assert from_minor_units(-50) == Decimal("-0.5")


def test_allocate_three_way_sums_exactly():
    """Test 100 split three ways gives 34/33/33, not 99 or 102."""
    parts = allocate_minor_units(100, {"a": 1, "b": 1, "c": 1})
    assert parts == {"a": 34, "b": 33, "c": 33}
    assert sum(parts.values()) == 100


def test_allocate_takes_back_over_rounding():
    """Test residual is removed when every share rounds up."""
    parts = allocate_minor_units(200, {"a": 1, "b": 1, "c": 1})
    assert parts == {"a": 66, "b": 67, "c": 67}


def test_allocate_uses_bankers_rounding_before_residual():
    """Test exact halves round to even, then the residual goes by key order."""
    assert allocate_minor_units(5, {"a": 1, "b": 1}) == {"a": 3, "b": 2}
    assert allocate_minor_units(6, {"a": 1, "b": 1}) == {"a": 3, "b": 3}


def test_allocate_unnormalized_and_zero_weights():
    """Test weights need not sum to one and zero weights get nothing."""
    assert allocate_minor_units(400, {"a": Decimal("0.2"), "b": Decimal("0.2")}) == {"a": 200, "b": 200}
    assert allocate_minor_units(10, {"a": 1, "b": 0}) == {"a": 10, "b": 0}


def test_allocate_negative_amount():
    """Test refunds split symmetrically."""
    parts = allocate_minor_units(-100, {"a": 1, "b": 1, "c": 1})
    assert parts == {"a": -34, "b": -33, "c": -33}


def test_allocate_invalid_weights():
    """Test negative or all-zero weights are rejected."""
    with pytest.raises(ValueError):
        allocate_minor_units(100, {"a": -1, "b": 2})
    with pytest.raises(ValueError):
        allocate_minor_units(100, {"a": 0, "b": 0})
    with pytest.raises(TypeError):
        allocate_minor_units(100, {"a": 0.5, "b": 0.5})
