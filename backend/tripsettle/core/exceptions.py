"""
Error types raised by the settlement engine.
"""
from datetime import date
from decimal import Decimal
from typing import Optional


class SettlementError(ValueError):
    """Base class for settlement failures. Always fatal for the whole call."""
    pass


class MissingRateError(SettlementError):
    """No conversion path from an expense currency to the settlement currency."""

    def __init__(self, from_currency: str, to_currency: str, as_of: Optional[date] = None):
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.as_of = as_of
        message = f"Missing FX rate {from_currency}/{to_currency}"
        if as_of is not None:
            message += f" @ {as_of.isoformat()}"
        super().__init__(message)


class InvalidSplitError(SettlementError):
    """A split carries a negative share ratio."""

    def __init__(self, participant_id: str, ratio: Decimal):
        self.participant_id = participant_id
        self.ratio = ratio
        super().__init__(
            f"Share ratio for participant '{participant_id}' must be non-negative, got {ratio}"
        )
