"""
Exchange rate model for currency conversion.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date
from decimal import Decimal

from tripsettle.models.expense import normalize_currency


class ExchangeRate(BaseModel):
    """A quote of 1 unit of `base_currency` = `rate` units of `quote_currency`.

    Rates without `as_of` apply to expenses on any date.
    """
    model_config = ConfigDict(frozen=True)

    base_currency: str
    quote_currency: str
    rate: Decimal = Field(gt=0)
    as_of: Optional[date] = None

    @field_validator("base_currency", "quote_currency", mode="before")
    @classmethod
    def validate_currency(cls, v):
        return normalize_currency(v)
