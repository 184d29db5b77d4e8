"""
Money helpers: minor-unit conversion and exact integer rounding.

All arithmetic runs on int, Decimal and Fraction values. Binary floats are
only accepted by `to_minor_units`, which is where UI amounts enter the engine.
"""
from decimal import Decimal
from fractions import Fraction
from typing import Dict, Mapping, Optional, Union

Number = Union[int, Decimal, Fraction]

DEFAULT_MINOR_UNIT_EXPONENT = 2

# ISO 4217 currencies whose minor unit is not 1/100
CURRENCY_EXPONENTS: Dict[str, int] = {
    "BIF": 0, "CLP": 0, "DJF": 0, "GNF": 0, "ISK": 0, "JPY": 0, "KMF": 0,
    "KRW": 0, "PYG": 0, "RWF": 0, "UGX": 0, "UYI": 0, "VND": 0, "VUV": 0,
    "XAF": 0, "XOF": 0, "XPF": 0,
    "BHD": 3, "IQD": 3, "JOD": 3, "KWD": 3, "LYD": 3, "OMR": 3, "TND": 3,
}


def _exact(value: Number) -> Fraction:
    if isinstance(value, float):
        raise TypeError("Binary floats are not accepted in money arithmetic; use Decimal or int")
    if isinstance(value, (int, Decimal, Fraction)):
        return Fraction(value)
    raise TypeError(f"Unsupported numeric type: {type(value).__name__}")


def minor_unit_factor(currency: Optional[str] = None) -> int:
    """Number of minor units in one major unit of `currency` (100 when unknown)."""
    if currency is None:
        return 10 ** DEFAULT_MINOR_UNIT_EXPONENT
    exponent = CURRENCY_EXPONENTS.get(currency.upper(), DEFAULT_MINOR_UNIT_EXPONENT)
    return 10 ** exponent


def round_half_even(value: Number) -> int:
    """Round an exact value to the nearest integer, ties to even.

    Examples:
        >>> round_half_even(Fraction(5, 2))
        2
        >>> round_half_even(Decimal("3.5"))
        4
        >>> round_half_even(Fraction(-1, 2))
        0
    """
    return round(_exact(value))


def to_minor_units(
    amount_major: Union[Number, str, float],
    currency: Optional[str] = None,
    minor_factor: Optional[int] = None,
) -> int:
    """
    Convert a major-unit amount (e.g. 12.34 USD) to integer minor units (1234).

    Args:
        amount_major: Amount in major units. Floats are read through their
            shortest decimal representation.
        currency: Currency code used to pick the minor-unit exponent
        minor_factor: Explicit factor, overrides `currency`

    Returns:
        Amount in minor units, rounded half-to-even
    """
    if isinstance(amount_major, (float, str)):
        amount_major = Decimal(str(amount_major).strip())
    factor = minor_factor if minor_factor is not None else minor_unit_factor(currency)
    return round_half_even(_exact(amount_major) * factor)


def from_minor_units(
    amount_minor: int,
    currency: Optional[str] = None,
    minor_factor: Optional[int] = None,
) -> Decimal:
    """Convert integer minor units back to a major-unit Decimal."""
    factor = minor_factor if minor_factor is not None else minor_unit_factor(currency)
    return Decimal(amount_minor) / Decimal(factor)


def allocate_minor_units(amount: int, weights: Mapping[str, Number]) -> Dict[str, int]:
    """
    Split `amount` across `weights` so the parts sum to exactly `amount`.

    Each part is first rounded half-to-even from its exact proportional value.
    The rounding residual is then handed out one minor unit at a time by
    largest remainder, ties broken by key ascending. Zero-weight keys always
    receive 0.

    Args:
        amount: Integer amount to split
        weights: Non-negative weights keyed by participant id, not necessarily
            summing to 1

    Returns:
        Parts keyed like `weights`

    Raises:
        ValueError: if a weight is negative or all weights are zero

    Examples:
        >>> allocate_minor_units(100, {"a": 1, "b": 1, "c": 1})
        {'a': 34, 'b': 33, 'c': 33}
    """
    exact_weights = {key: _exact(weight) for key, weight in weights.items()}
    if any(weight < 0 for weight in exact_weights.values()):
        raise ValueError("weights must be non-negative")
    total = sum(exact_weights.values(), Fraction(0))
    if total == 0:
        raise ValueError("weights must not all be zero")

    exact_parts = {key: amount * weight / total for key, weight in exact_weights.items()}
    parts = {key: round(value) for key, value in exact_parts.items()}

    residual = amount - sum(parts.values())
    if residual:
        step = 1 if residual > 0 else -1
        candidates = [key for key, weight in exact_weights.items() if weight > 0]
        # Positive residual: the most under-rounded parts go up first
        candidates.sort(key=lambda key: (-step * (exact_parts[key] - parts[key]), key))
        for key in candidates[:abs(residual)]:
            parts[key] += step

    return parts
