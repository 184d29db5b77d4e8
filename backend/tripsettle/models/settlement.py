"""
Settlement models: balances, transfers and the combined result of one pass.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List


class Balance(BaseModel):
    """Net position of one participant in settlement-currency minor units.

    Positive means the participant is owed money, negative means they owe.
    """
    model_config = ConfigDict(frozen=True)

    participant_id: str
    amount: int


class Transfer(BaseModel):
    """Represents a single payment from a debtor to a creditor."""
    model_config = ConfigDict(frozen=True)

    from_participant_id: str
    to_participant_id: str
    amount: int = Field(gt=0)


class SettlementResult(BaseModel):
    """Balances and transfers computed for one set of expenses."""
    model_config = ConfigDict(frozen=True)

    settlement_currency: str
    balances: List[Balance]
    transfers: List[Transfer]
    total_expenses: int  # Sum of converted expense amounts, settlement-currency minor units
    participant_count: int
