"""
Foreign exchange service for currency conversion.

Rates are supplied by the caller as a table of `ExchangeRate` quotes; nothing
is fetched or cached here.
"""
from datetime import date
from fractions import Fraction
from typing import Iterable, Optional
import logging

from tripsettle.core.exceptions import MissingRateError
from tripsettle.models.exchange_rate import ExchangeRate
from tripsettle.models.expense import normalize_currency
from tripsettle.services.money import minor_unit_factor, round_half_even

logger = logging.getLogger(__name__)


def _applies_on(rate: ExchangeRate, as_of: Optional[date]) -> bool:
    if rate.as_of is None:
        return True
    return as_of is not None and rate.as_of == as_of


def _pick(candidates: list) -> Optional[ExchangeRate]:
    # A quote dated for the expense day wins over an undated one
    dated = [r for r in candidates if r.as_of is not None]
    if dated:
        return dated[0]
    return candidates[0] if candidates else None


def find_rate(
    rates: Iterable[ExchangeRate],
    from_currency: str,
    to_currency: str,
    as_of: Optional[date] = None,
) -> Fraction:
    """
    Get the multiplicative rate converting `from_currency` into `to_currency`.

    Looks for a direct quote first (base=from, quote=to), then for the inverse
    quote (base=to, quote=from) and uses 1/rate.

    Args:
        rates: Exchange rate table for this call
        from_currency: Currency to convert FROM
        to_currency: Currency to convert TO
        as_of: Date of the expense. Dated quotes must match it; undated quotes
            match any date.

    Returns:
        Exact rate (1 from_currency = rate to_currency)

    Raises:
        MissingRateError: if neither a direct nor an inverse quote applies
    """
    from_upper = normalize_currency(from_currency)
    to_upper = normalize_currency(to_currency)

    if from_upper == to_upper:
        return Fraction(1)

    applicable = [r for r in rates if _applies_on(r, as_of)]

    direct = _pick([
        r for r in applicable
        if r.base_currency == from_upper and r.quote_currency == to_upper
    ])
    if direct is not None:
        return Fraction(direct.rate)

    inverse = _pick([
        r for r in applicable
        if r.base_currency == to_upper and r.quote_currency == from_upper
    ])
    if inverse is not None:
        return 1 / Fraction(inverse.rate)

    logger.debug(f"No exchange rate for {from_upper}/{to_upper} on {as_of}")
    raise MissingRateError(from_upper, to_upper, as_of)


def convert_minor_units(
    amount: int,
    from_currency: str,
    to_currency: str,
    rates: Iterable[ExchangeRate],
    as_of: Optional[date] = None,
) -> int:
    """
    Convert an amount in minor units of one currency to minor units of another.

    Rates are quoted per major unit, so the minor-unit exponents of both
    currencies are applied around the rate (1000 JPY at 0.0067 USD/JPY is
    670 US cents).

    Returns:
        Converted amount rounded half-to-even
    """
    rate = find_rate(rates, from_currency, to_currency, as_of)
    scale = Fraction(minor_unit_factor(to_currency), minor_unit_factor(from_currency))
    return round_half_even(amount * rate * scale)
