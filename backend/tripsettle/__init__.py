"""Tripsettle - expense settlement engine for group trips."""
from tripsettle.core.exceptions import InvalidSplitError, MissingRateError, SettlementError
from tripsettle.models import Balance, ExchangeRate, Expense, SettlementResult, Split, Transfer
from tripsettle.services.settlement_service import (
    calculate_settlement,
    compute_balances,
    minimal_transfers,
)

__all__ = [
    "Balance",
    "ExchangeRate",
    "Expense",
    "SettlementResult",
    "Split",
    "Transfer",
    "SettlementError",
    "MissingRateError",
    "InvalidSplitError",
    "calculate_settlement",
    "compute_balances",
    "minimal_transfers",
]
