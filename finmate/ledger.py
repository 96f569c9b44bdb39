"""
ledger.py - aggregates derived from the transaction list

All functions are pure: they take the full transaction sequence and return
fresh values. Nothing here is cached; the tracker calls them on every query.

Spend figures only count positive amounts. Top-ups and refunds are negative
entries; they raise the balance through side income, not by reducing spend.
"""

import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from finmate import config
from finmate.models import Category, Jar, Mode, Transaction, round_half_up


def spend_so_far(transactions: Iterable[Transaction]) -> float:
    """Sum of all positive amounts."""
    return sum(t.amount for t in transactions if t.is_spend)


def spend_by_category(transactions: Iterable[Transaction]) -> Dict[Category, float]:
    """
    Positive spend per category.
    Every category is present, even with nothing spent.
    """
    totals: Dict[Category, float] = {c: 0 for c in Category}
    for t in transactions:
        if t.is_spend:
            totals[t.category] += t.amount
    return totals


def month_start(today: datetime.date) -> datetime.date:
    return today.replace(day=1)


def daily_series(transactions: Iterable[Transaction], today: datetime.date) -> List[float]:
    """
    Spend per calendar day from the first of today's month through today.

    Index 0 is the 1st of the month. Entries dated before the month start,
    after today, or with a non-positive amount are dropped without error.
    """
    start = month_start(today)
    series: List[float] = [0] * max(1, (today - start).days + 1)
    for t in transactions:
        if not t.is_spend or t.date < start:
            continue
        idx = (t.date - start).days
        if 0 <= idx < len(series):
            series[idx] += t.amount
    return series


def budgets_for_mode(mode: Mode, base: Optional[Mapping[str, float]] = None) -> Dict[Category, int]:
    """Category budgets scaled by the mode factor, rounded to whole units."""
    base = base if base is not None else config.BASE_BUDGETS
    return {c: round_half_up(base.get(c.value, 0) * mode.factor) for c in Category}


def is_discretionary(category: Category) -> bool:
    return category.value in config.DISCRETIONARY_CATEGORIES


def jar_locked(jars: Iterable[Jar]) -> float:
    """Total currently saved across every jar."""
    return sum(j.saved for j in jars)


def percent_of(num: float, den: float) -> int:
    """Progress percentage for bars, clamped to 0..100."""
    if den <= 0:
        return 0
    return max(0, min(100, round_half_up(num / den * 100)))
