"""
Expense model for shared spending.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List
from datetime import datetime
from decimal import Decimal


def normalize_currency(value: str) -> str:
    """Upper-case and validate an ISO 4217 style currency code."""
    if not isinstance(value, str):
        raise ValueError("currency must be a string")
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError(f"Invalid currency code: {value!r}")
    return code


class Split(BaseModel):
    """One participant's proportional share of an expense."""
    model_config = ConfigDict(frozen=True)

    participant_id: str = Field(min_length=1)
    ratio: Decimal  # Not required to sum to 1 across the expense; sign is checked during aggregation


class Expense(BaseModel):
    """A single payment made by one participant on behalf of a group."""
    model_config = ConfigDict(frozen=True)

    payer_id: str = Field(min_length=1)
    amount: int  # Minor units of `currency`
    currency: str
    timestamp: datetime
    splits: List[Split] = []

    @field_validator("currency", mode="before")
    @classmethod
    def validate_currency(cls, v):
        return normalize_currency(v)

