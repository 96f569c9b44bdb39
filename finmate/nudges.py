"""
nudges.py - "Buddy Bot" rule-based advice

A static, ordered table of (predicate, message) rules. Every rule whose
predicate holds contributes its message, in table order. When nothing
fires the single default message is returned, so the result is never empty.
"""

from typing import Callable, Iterable, List, Mapping, NamedTuple

from finmate import config
from finmate.models import Category, Jar


class NudgeInput(NamedTuple):
    spend_by_category: Mapping[Category, float]
    budgets: Mapping[Category, float]
    days_left: float
    jars: List[Jar]


class NudgeRule(NamedTuple):
    name: str
    predicate: Callable[[NudgeInput], bool]
    message: str


def _outings_over_budget(ctx: NudgeInput) -> bool:
    return ctx.spend_by_category.get(Category.OUTINGS, 0) > ctx.budgets.get(Category.OUTINGS, 0)


def _runout_soon(ctx: NudgeInput) -> bool:
    return ctx.days_left < config.RUNOUT_WARNING_DAYS


def _emergency_low(ctx: NudgeInput) -> bool:
    jar = next((j for j in ctx.jars if j.key == config.EMERGENCY_JAR), None)
    return jar is not None and jar.saved < config.EMERGENCY_FLOOR


NUDGE_RULES = (
    NudgeRule(
        "outings_overspend",
        _outings_over_budget,
        "Outings went over budget. Maybe switch to Tight mode for a bit? 🙈",
    ),
    NudgeRule(
        "runout_soon",
        _runout_soon,
        f"At this burn rate the money runs out in under {config.RUNOUT_WARNING_DAYS} days. "
        "Turn micro-savings on and cut Misc by 25%.",
    ),
    NudgeRule(
        "emergency_low",
        _emergency_low,
        f"Emergency jar is running low. Auto-save {config.CURRENCY}5 on every UPI payment?",
    ),
)

ALL_GOOD_MESSAGE = f"All set for today! ☕️ Drop {config.CURRENCY}5 into the Chai Jar on your next spend?"


def build_nudges(
    spend_by_category: Mapping[Category, float],
    budgets: Mapping[Category, float],
    days_left: float,
    jars: Iterable[Jar],
) -> List[str]:
    ctx = NudgeInput(spend_by_category, budgets, days_left, list(jars))
    msgs = [rule.message for rule in NUDGE_RULES if rule.predicate(ctx)]
    if not msgs:
        msgs.append(ALL_GOOD_MESSAGE)
    return msgs
