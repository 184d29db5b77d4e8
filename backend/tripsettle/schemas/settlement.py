"""
Pydantic schemas for the settlement calculation endpoint.
"""
from pydantic import BaseModel, field_validator
from typing import List

from tripsettle.models.expense import Expense, normalize_currency
from tripsettle.models.exchange_rate import ExchangeRate
from tripsettle.models.settlement import Balance, Transfer


class SettlementRequest(BaseModel):
    """Schema for a settlement calculation request."""
    settlement_currency: str  # Chosen by the caller, never defaulted
    expenses: List[Expense] = []
    rates: List[ExchangeRate] = []
    include_settled: bool = False

    @field_validator("settlement_currency", mode="before")
    @classmethod
    def validate_currency(cls, v):
        return normalize_currency(v)


class SettlementResponse(BaseModel):
    """Schema for settlement calculation response."""
    settlement_currency: str
    balances: List[Balance]
    transfers: List[Transfer]
    total_expenses: int  # Settlement-currency minor units
    participant_count: int
    
    class Config:
        from_attributes = True
