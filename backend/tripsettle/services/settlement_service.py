"""
Settlement service for automated fair settlement calculation.

Two pure steps: expenses are folded into one signed balance per participant,
then balances are matched greedily into debtor -> creditor transfers.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple
import logging

from tripsettle.core.exceptions import InvalidSplitError
from tripsettle.models.exchange_rate import ExchangeRate
from tripsettle.models.expense import Expense, normalize_currency
from tripsettle.models.settlement import Balance, SettlementResult, Transfer
from tripsettle.services.fx_service import convert_minor_units
from tripsettle.services.money import allocate_minor_units

logger = logging.getLogger(__name__)

# Balances within this many minor units of zero count as settled
SETTLEMENT_EPSILON = 1


def _expense_date(timestamp: datetime) -> date:
    """Calendar date used to pick a dated exchange rate, in the timestamp's own offset."""
    return timestamp.date()


def _split_weights(expense: Expense) -> Dict[str, Decimal]:
    """Merge the expense's splits into one ratio per participant."""
    weights: Dict[str, Decimal] = {}
    for split in expense.splits:
        if split.ratio < 0:
            raise InvalidSplitError(split.participant_id, split.ratio)
        weights[split.participant_id] = weights.get(split.participant_id, Decimal(0)) + split.ratio
    return weights


def _aggregate(
    expenses: Iterable[Expense],
    settlement_currency: str,
    rates: Iterable[ExchangeRate],
) -> Tuple[Dict[str, int], int]:
    """Fold expenses into net balances. Returns (net balances, total converted spend)."""
    currency = normalize_currency(settlement_currency)
    rate_table = tuple(rates)

    net_balances: Dict[str, int] = {}  # participant_id -> net balance (positive = owed, negative = owes)
    total = 0
    expense_count = 0

    for expense in expenses:
        expense_count += 1
        weights = _split_weights(expense)

        amount = convert_minor_units(
            expense.amount,
            expense.currency,
            currency,
            rate_table,
            as_of=_expense_date(expense.timestamp),
        )

        net_balances.setdefault(expense.payer_id, 0)
        for participant_id in weights:
            net_balances.setdefault(participant_id, 0)

        if sum(weights.values()) == 0:
            # Unsplit expense: the payer absorbs the whole cost
            logger.debug(f"Expense paid by {expense.payer_id} has no positive share ratio; skipped")
            continue

        total += amount
        net_balances[expense.payer_id] += amount

        # Subtract what each participant owes
        for participant_id, share in allocate_minor_units(amount, weights).items():
            net_balances[participant_id] -= share

    logger.debug(
        f"Aggregated {expense_count} expenses into {len(net_balances)} balances ({currency})"
    )
    return net_balances, total


def _to_balances(net_balances: Dict[str, int], include_settled: bool) -> List[Balance]:
    return [
        Balance(participant_id=participant_id, amount=amount)
        for participant_id, amount in sorted(net_balances.items())
        if amount != 0 or include_settled
    ]


def compute_balances(
    expenses: Iterable[Expense],
    settlement_currency: str,
    rates: Iterable[ExchangeRate] = (),
    include_settled: bool = False,
) -> List[Balance]:
    """
    Calculate each participant's net balance in settlement-currency minor units.

    Every expense credits its payer with the converted amount and debits each
    participant their share. Share ratios are normalized per expense; shares
    are rounded half-to-even and the rounding residual is assigned by largest
    remainder, so every expense nets to exactly zero.

    Args:
        expenses: Expense records, any currency
        settlement_currency: Currency the balances are expressed in
        rates: Exchange rate table for this call
        include_settled: Also emit participants whose balance is exactly zero

    Returns:
        One Balance per participant, ordered by participant id

    Raises:
        MissingRateError: if an expense currency cannot be converted
        InvalidSplitError: if a share ratio is negative
    """
    net_balances, _ = _aggregate(expenses, settlement_currency, rates)
    return _to_balances(net_balances, include_settled)


def _by_size(parties: List[List]) -> List[List]:
    # Largest first, ties by id
    return sorted(parties, key=lambda x: (-x[1], x[0]))


def _match(
    debtors: List[List],
    creditors: List[List],
    epsilon: int,
    transfers: List[Transfer],
) -> Tuple[int, int]:
    """Pair debtors with creditors in order, appending transfers.

    Each entry is a mutable [participant_id, remaining] pair with remaining
    stored as a positive amount. Returns the indices of the first unsettled
    debtor and creditor.
    """
    cred_idx = 0
    debt_idx = 0

    while cred_idx < len(creditors) and debt_idx < len(debtors):
        creditor = creditors[cred_idx]
        debtor = debtors[debt_idx]

        transfer_amount = min(creditor[1], debtor[1])
        transfers.append(Transfer(
            from_participant_id=debtor[0],
            to_participant_id=creditor[0],
            amount=transfer_amount,
        ))

        creditor[1] -= transfer_amount
        debtor[1] -= transfer_amount

        if creditor[1] <= epsilon:
            cred_idx += 1
        if debtor[1] <= epsilon:
            debt_idx += 1

    return debt_idx, cred_idx


def minimal_transfers(
    balances: Iterable[Balance],
    epsilon: int = SETTLEMENT_EPSILON,
) -> List[Transfer]:
    """
    Minimize the number of transfers needed to settle debts.

    Greedy: the largest debtor pays the largest creditor the smaller of the
    two remainders; whichever side is within `epsilon` of zero advances.
    Ties in magnitude are broken by participant id ascending. This is not
    always the absolute minimum number of transfers.

    Balances within `epsilon` of zero take no part in the greedy pass. If a
    party is still more than `epsilon` from zero once the other side runs
    out, that dust (the skipped small balances plus leftovers of settled
    parties) pays it down, largest first, until it is within `epsilon`.

    Args:
        balances: Signed balances, duplicate participant ids are summed
        epsilon: Rounding tolerance in minor units

    Returns:
        Transfers in the order they were matched

    Examples:
        >>> [(t.from_participant_id, t.to_participant_id, t.amount) for t in minimal_transfers([
        ...     Balance(participant_id="A", amount=6000),
        ...     Balance(participant_id="B", amount=-3000),
        ...     Balance(participant_id="C", amount=-3000),
        ... ])]
        [('B', 'A', 3000), ('C', 'A', 3000)]
    """
    if epsilon < 0:
        raise ValueError(f"epsilon must be non-negative, got {epsilon}")

    net: Dict[str, int] = {}
    for balance in balances:
        net[balance.participant_id] = net.get(balance.participant_id, 0) + balance.amount

    # Separate creditors (positive balance) and debtors (negative balance)
    creditors = _by_size([[pid, amount] for pid, amount in net.items() if amount > epsilon])
    debtors = _by_size([[pid, -amount] for pid, amount in net.items() if amount < -epsilon])  # Store as positive

    transfers: List[Transfer] = []
    debt_idx, cred_idx = _match(debtors, creditors, epsilon, transfers)

    if cred_idx < len(creditors):
        dust = [[pid, -amount] for pid, amount in net.items() if -epsilon <= amount < 0]
        dust += [d for d in debtors if d[1] > 0]
        _match(_by_size(dust), creditors[cred_idx:], epsilon, transfers)
    elif debt_idx < len(debtors):
        dust = [[pid, amount] for pid, amount in net.items() if 0 < amount <= epsilon]
        dust += [c for c in creditors if c[1] > 0]
        _match(debtors[debt_idx:], _by_size(dust), epsilon, transfers)

    return transfers


def calculate_settlement(
    expenses: Iterable[Expense],
    settlement_currency: str,
    rates: Iterable[ExchangeRate] = (),
    epsilon: int = SETTLEMENT_EPSILON,
    include_settled: bool = False,
) -> SettlementResult:
    """
    Run both settlement steps and bundle the outcome.

    Raises:
        MissingRateError: if an expense currency cannot be converted
        InvalidSplitError: if a share ratio is negative
    """
    currency = normalize_currency(settlement_currency)
    net_balances, total = _aggregate(expenses, currency, rates)

    balances = _to_balances(net_balances, include_settled)
    transfers = minimal_transfers(balances, epsilon=epsilon)

    logger.info(
        f"Settlement in {currency}: {len(net_balances)} participants, "
        f"{len(transfers)} transfers, total {total}"
    )

    return SettlementResult(
        settlement_currency=currency,
        balances=balances,
        transfers=transfers,
        total_expenses=total,
        participant_count=len(net_balances),
    )
