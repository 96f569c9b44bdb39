"""
settlement.py - settle-up suggestions for squads

Net balances use equal-split accounting: every member in split_with owes
amount / len(split_with), the payer is credited the full amount.
Positive balance => member should receive money.
Negative balance => member owes money.

Suggestions greedily match the largest debtor with the largest creditor.
That keeps the list short (at most debtors + creditors - 1 transfers) but is
not guaranteed to be the minimum possible number of transfers.
"""

from typing import Dict, List, Tuple

from finmate import config
from finmate.models import Group, Settlement, round_half_up


def net_balances(group: Group) -> Dict[str, float]:
    """Net position per member, in member order. Sums to zero up to float drift."""
    net: Dict[str, float] = {m: 0.0 for m in group.members}
    for t in group.transactions:
        share = t.share
        for m in t.split_with:
            net.setdefault(m, 0.0)
            net[m] -= share
        net.setdefault(t.paid_by, 0.0)
        net[t.paid_by] += t.amount
    return net


def suggest_settlements(group: Group) -> List[Settlement]:
    """
    Produce transfers that bring every member back to (roughly) zero.

    Members within SETTLE_TOLERANCE of zero are treated as settled. Each
    suggested amount is rounded to whole units; the running remainders use
    the unrounded value so rounding never accumulates.
    """
    debtors: List[Tuple[str, float]] = []
    creditors: List[Tuple[str, float]] = []
    for member, amt in net_balances(group).items():
        if amt < -config.SETTLE_TOLERANCE:
            debtors.append((member, -amt))  # store positive owed for debtors
        elif amt > config.SETTLE_TOLERANCE:
            creditors.append((member, amt))
    # sorted() is stable, so equal amounts keep member order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    i = j = 0
    suggestions: List[Settlement] = []
    while i < len(debtors) and j < len(creditors):
        d_name, d_amt = debtors[i]
        c_name, c_amt = creditors[j]
        take = min(d_amt, c_amt)
        suggestions.append(Settlement(from_member=d_name, to_member=c_name, amount=round_half_up(take)))
        d_amt -= take
        c_amt -= take
        debtors[i] = (d_name, d_amt)
        creditors[j] = (c_name, c_amt)
        if d_amt < config.SETTLE_MIN_TRANSFER:
            i += 1
        if c_amt < config.SETTLE_MIN_TRANSFER:
            j += 1
    return suggestions


def format_settlement(s: Settlement) -> str:
    return f"{s.from_member} → {s.to_member}: {config.CURRENCY}{s.amount}"
