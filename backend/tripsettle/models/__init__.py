"""Models package - immutable records consumed and produced by the engine."""
from tripsettle.models.expense import Expense, Split
from tripsettle.models.exchange_rate import ExchangeRate
from tripsettle.models.settlement import Balance, Transfer, SettlementResult

__all__ = [
    "Expense",
    "Split",
    "ExchangeRate",
    "Balance",
    "Transfer",
    "SettlementResult",
]
