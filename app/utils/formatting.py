"""
Presentation helpers for settlement reports.

Amounts are shown the way the trip dashboard shows them: two fixed decimals
with Indian digit grouping (last three digits, then groups of two).
"""

import math
from typing import List, Optional

from app.core.config import settings
from app.schemas.settlement_schema import PersonBalance
from app.utils.greedy_settlement import round2


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value: Optional[float]) -> str:
    """
    Format a monetary value with two decimals and en-IN grouping.

    Example:
        >>> format_amount(1234567.5)
        '12,34,567.50'
        >>> format_amount(-999.999)
        '-1,000.00'
    """
    if value is None or not math.isfinite(value):
        return "0.00"

    # Halves round away from zero, as the dashboard shows them
    text = f"{round2(abs(value)):.2f}"
    whole, fraction = text.split(".")
    sign = "-" if value < 0 and text != "0.00" else ""
    return f"{sign}{_group_indian(whole)}.{fraction}"


def format_currency(value: Optional[float], symbol: Optional[str] = None) -> str:
    """Amount prefixed with the configured currency symbol"""
    return f"{settings.currency_symbol if symbol is None else symbol}{format_amount(value)}"


def balance_label(net: float) -> str:
    if net > 0:
        return "owed"
    if net < 0:
        return "owes"
    return ""


def balances_for_display(balances: List[PersonBalance]) -> List[PersonBalance]:
    """Balances ordered by display name, leaving the report's own order intact"""
    return sorted(balances, key=lambda balance: balance.name)
