"""
Greedy Settlement Module

This module implements the settlement engine for a trip's shared expenses.
Given the trip's expense records it computes each participant's net position
(paid minus owed share) and a sequence of pairwise transfers that zeroes
those positions.

The computation works by:
1. Aggregating paid and share totals per participant, in first-seen order
2. Rounding paid and share to cents, then deriving net from the rounded values
3. Splitting participants into creditors (net > 0) and debtors (net < 0)
4. Greedily matching the largest debtor with the largest creditor until
   either side runs out

The matching is a cash-flow heuristic, not a minimum-transaction solver.
The exact trace (ordering, zero-amount transfers, rounding at every step)
is part of the contract and must not be altered.

Time Complexity: O(e) for aggregation + O(p log p) for sorting
Space Complexity: O(p) for balances and transfers

Example Usage:
    from app.utils.greedy_settlement import compute_settlement

    expenses = [
        {"id": "e1", "paidBy": "A", "amount": 100, "participants": ["A", "B"]},
    ]

    report = compute_settlement(expenses, {"A": "alice", "B": "bob"})

    # report.transfers -> [Transfer(from_name="bob", to_name="alice", amount=50.0)]
"""

import logging
import math
import sys
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from app.schemas.expense_schema import ExpenseRecord
from app.schemas.settlement_schema import PersonBalance, Residual, SettlementReport, Transfer

logger = logging.getLogger(__name__)

EPSILON = sys.float_info.epsilon

# A debtor or creditor whose remaining net falls below this is treated as settled.
SETTLED_THRESHOLD = 0.001

NameLookup = Union[Mapping[str, str], Callable[[str], Optional[str]]]


def round2(value: float) -> float:
    """
    Round a float to 2 decimal places, half away from negative infinity.

    Machine epsilon is added before scaling to compensate for binary
    representation error, so values such as 1.005 (stored as
    1.00499999999999989...) round up to 1.01.

    This is half-up rounding (floor(x + 0.5)), not the half-even rounding
    of the built-in round().

    Args:
        value: The float value to round

    Returns:
        Rounded float value

    Example:
        >>> round2(1.005)
        1.01
        >>> round2(100 / 3)
        33.33
    """
    return math.floor((value + EPSILON) * 100 + 0.5) / 100


def _resolve_name(participant_id: str, names: Optional[NameLookup]) -> str:
    if names is None:
        return participant_id
    if callable(names):
        name = names(participant_id)
    else:
        name = names.get(participant_id)
    return name or participant_id


def _as_record(expense: Union[ExpenseRecord, Mapping]) -> ExpenseRecord:
    if isinstance(expense, ExpenseRecord):
        return expense
    return ExpenseRecord.model_validate(expense)


def aggregate_balances(
    expenses: Iterable[Union[ExpenseRecord, Mapping]]
) -> Dict[str, Dict[str, float]]:
    """
    Accumulate raw paid and share totals for every participant.

    Each expense credits its full amount to the payer's ``paid`` and splits
    the amount evenly into the ``share`` of every listed participant.

    An expense with an empty participant list still counts toward the
    payer's ``paid`` but contributes to nobody's ``share`` (the divisor is
    clamped to 1 and the split loop has nothing to visit).

    Args:
        expenses: Expense records, or mappings accepted by ExpenseRecord

    Returns:
        Insertion-ordered dict mapping participant_id -> {"paid", "share"},
        with unrounded float accumulators. Keys appear in order of first
        appearance as payer or participant.

    Example:
        >>> aggregate_balances([{"id": "e1", "paidBy": "A", "amount": 90,
        ...                      "participants": ["A", "B", "C"]}])
        {'A': {'paid': 90.0, 'share': 30.0}, 'B': {...}, 'C': {...}}
    """
    persons: Dict[str, Dict[str, float]] = {}

    for expense in expenses:
        record = _as_record(expense)

        if record.paid_by not in persons:
            persons[record.paid_by] = {"paid": 0.0, "share": 0.0}
        persons[record.paid_by]["paid"] += record.amount

        participant_count = max(1, len(record.participants))
        per_share = record.amount / participant_count

        if not record.participants:
            logger.warning(
                f"Expense {record.id} has no participants; "
                f"{record.amount} counted as paid by {record.paid_by} but shared by nobody"
            )

        for participant_id in record.participants:
            if participant_id not in persons:
                persons[participant_id] = {"paid": 0.0, "share": 0.0}
            persons[participant_id]["share"] += per_share

    return persons


def compute_nets(
    persons: Mapping[str, Mapping[str, float]],
    names: Optional[NameLookup] = None
) -> List[PersonBalance]:
    """
    Round the raw accumulators and derive each participant's net position.

    ``net`` is computed from the already rounded ``paid`` and ``share``, so
    it may differ by a cent from rounding the raw difference.

    Args:
        persons: Output of aggregate_balances()
        names: Mapping or callable resolving participant_id -> display name.
            Unresolved ids fall back to the id itself.

    Returns:
        PersonBalance list in the iteration order of ``persons``
    """
    nets = []
    for participant_id, totals in persons.items():
        paid = round2(totals["paid"])
        share = round2(totals["share"])
        nets.append(PersonBalance(
            id=participant_id,
            name=_resolve_name(participant_id, names),
            paid=paid,
            share=share,
            net=round2(paid - share)
        ))
    return nets


def validate_zero_sum(balances: Iterable[PersonBalance], tolerance: float = 0.01) -> None:
    """
    Check that net positions sum to zero within tolerance.

    Diagnostic only: compute_settlement() never calls this, since the
    settlement must still be produced for inconsistent totals.

    Raises:
        ValueError: If the absolute sum exceeds the tolerance
    """
    total = sum(balance.net for balance in balances)
    if round2(abs(total)) > tolerance:
        raise ValueError(
            f"Balances not zero-sum: total={total}, tolerance={tolerance}. "
            f"This indicates unbalanced expense data."
        )


def settle_detailed(
    nets: List[PersonBalance]
) -> Tuple[List[Transfer], List[Residual], List[str]]:
    """
    Greedy settlement with a step-by-step trace.

    Creditors are sorted by net descending and debtors by net ascending,
    both stably, so ties keep the order of ``nets``. On each step the
    current debtor pays the current creditor ``round2(min(owe, receive))``,
    even when that rounds to zero. A side whose remaining net drops below
    0.001 advances its cursor; both may advance on the same step. The loop
    ends as soon as either list is exhausted.

    Args:
        nets: Net positions as produced by compute_nets(). Not mutated.

    Returns:
        Tuple of (transfers, residuals, trace_lines). ``residuals`` lists
        every participant left with abs(net) >= 0.001, which only happens
        when credits and debits do not balance.
    """
    # Working copies: [id, name, net]
    creditors = [
        [balance.id, balance.name, balance.net]
        for balance in sorted(
            (b for b in nets if b.net > 0), key=lambda b: b.net, reverse=True
        )
    ]
    debtors = [
        [balance.id, balance.name, balance.net]
        for balance in sorted((b for b in nets if b.net < 0), key=lambda b: b.net)
    ]

    trace = [
        f"Creditors (to receive): {[(c[0], c[2]) for c in creditors]}",
        f"Debtors (to pay): {[(d[0], d[2]) for d in debtors]}",
    ]

    transfers: List[Transfer] = []
    c_idx, d_idx = 0, 0
    step = 0

    while d_idx < len(debtors) and c_idx < len(creditors):
        step += 1
        debtor = debtors[d_idx]
        creditor = creditors[c_idx]

        owe = -debtor[2]
        receive = creditor[2]
        pay = round2(min(owe, receive))

        transfers.append(Transfer(
            from_user_id=debtor[0],
            to_user_id=creditor[0],
            from_name=debtor[1],
            to_name=creditor[1],
            amount=pay
        ))

        debtor[2] = round2(debtor[2] + pay)
        creditor[2] = round2(creditor[2] - pay)

        trace.append(
            f"Step {step}: {debtor[0]} pays {creditor[0]} {pay:.2f} "
            f"(remaining: {debtor[0]}={debtor[2]}, {creditor[0]}={creditor[2]})"
        )

        if abs(debtor[2]) < SETTLED_THRESHOLD:
            trace.append(f"  {debtor[0]} settled, advancing debtor cursor")
            d_idx += 1
        if abs(creditor[2]) < SETTLED_THRESHOLD:
            trace.append(f"  {creditor[0]} settled, advancing creditor cursor")
            c_idx += 1

    residuals = [
        Residual(id=entry[0], name=entry[1], amount=entry[2])
        for entry in creditors[c_idx:] + debtors[d_idx:]
        if abs(entry[2]) >= SETTLED_THRESHOLD
    ]

    trace.append(f"Completed in {step} steps with {len(transfers)} transfers")
    if residuals:
        trace.append(f"Unmatched remainder: {[(r.id, r.amount) for r in residuals]}")

    return transfers, residuals, trace


def settle(nets: List[PersonBalance]) -> List[Transfer]:
    """
    Produce the greedy transfer plan for a list of net positions.

    See settle_detailed() for the matching rules.

    Example:
        >>> nets = [PersonBalance(id="A", name="A", paid=100, share=50, net=50),
        ...         PersonBalance(id="B", name="B", paid=0, share=50, net=-50)]
        >>> settle(nets)
        [Transfer(from_user_id='B', to_user_id='A', ..., amount=50.0)]
    """
    transfers, _, _ = settle_detailed(nets)
    return transfers


def compute_settlement(
    expenses: List[Union[ExpenseRecord, Mapping]],
    names: Optional[NameLookup] = None
) -> SettlementReport:
    """
    Compute the full settlement report for one trip.

    Pure function of its inputs: the expense list is only read, and every
    call builds its own working state.

    Args:
        expenses: The trip's expense records in source order
        names: Optional participant_id -> display name lookup

    Returns:
        SettlementReport with balances, transfers, trip total, expense count
        and any unmatched residuals. Empty input yields an empty report with
        trip_total 0.
    """
    records = [_as_record(expense) for expense in expenses]

    balances = compute_nets(aggregate_balances(records), names)
    transfers, residuals, _ = settle_detailed(balances)

    trip_total = round2(sum(record.amount for record in records))
    unsettled_total = round2(sum(abs(residual.amount) for residual in residuals))

    if residuals:
        logger.warning(
            f"Settlement left {len(residuals)} participant(s) unmatched, "
            f"unsettled total {unsettled_total}: {[(r.id, r.amount) for r in residuals]}"
        )

    logger.debug(
        f"Computed settlement: {len(records)} expenses, {len(balances)} participants, "
        f"{len(transfers)} transfers, total {trip_total}"
    )

    return SettlementReport(
        balances=balances,
        transfers=transfers,
        trip_total=trip_total,
        expense_count=len(records),
        residuals=residuals,
        unsettled_total=unsettled_total
    )
