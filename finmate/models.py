"""
models.py - Data model definitions

Enums and dataclasses shared by the ledger, forecaster, settlement engine,
nudge rules and the Streamlit UI. Everything is held in memory for the
lifetime of one session; to_dict() exists so the UI can build DataFrames.
"""

import datetime
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Category(str, Enum):
    """Closed set of spending categories, in display order."""
    MESS = "Mess"
    OUTINGS = "Outings"
    RENT = "Rent"
    UTILITIES = "Utilities"
    TRAVEL = "Travel"
    GROCERIES = "Groceries"
    MISC = "Misc"


class Channel(str, Enum):
    """How the money moved."""
    UPI = "UPI"
    CASH = "Cash"
    WALLET = "Wallet"


class Mode(str, Enum):
    """Global budget-tightness setting. factor scales every category budget."""
    TIGHT = "Tight"
    NORMAL = "Normal"
    CHILL = "Chill"

    @property
    def factor(self) -> float:
        return _MODE_FACTORS[self]


_MODE_FACTORS = {
    Mode.TIGHT: 0.75,
    Mode.NORMAL: 1.0,
    Mode.CHILL: 1.15,
}


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Transaction:
    """
    A single ledger entry.

    Fields:
      - id: identifier assigned by the tracker
      - date: calendar day the money moved
      - amount: positive = spend, negative = top-up/refund
      - category / channel: closed enums
      - note: optional free text
    """
    id: str
    date: datetime.date
    amount: float
    category: Category
    channel: Channel
    note: str = ""

    @property
    def is_spend(self) -> bool:
        return self.amount > 0

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "amount": self.amount,
            "category": self.category.value,
            "channel": self.channel.value,
            "note": self.note,
        }


@dataclass
class Jar:
    """Savings bucket. saved may exceed target; it never goes below zero."""
    key: str
    name: str
    target: float
    saved: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "key": self.key,
            "name": self.name,
            "target": self.target,
            "saved": self.saved,
        }


@dataclass(frozen=True)
class GroupTransaction:
    """
    One shared expense, split equally across split_with.
    split_with may include the payer and must not be empty.
    """
    id: str
    date: datetime.date
    description: str
    amount: float
    paid_by: str
    split_with: List[str]

    def __post_init__(self):
        if not self.split_with:
            raise ValueError("split_with must name at least one member")

    @property
    def share(self) -> float:
        return self.amount / len(self.split_with)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "paid_by": self.paid_by,
            "split_with": list(self.split_with),
        }


@dataclass
class Group:
    """A squad of people sharing expenses. transactions are newest first."""
    id: str
    name: str
    members: List[str] = field(default_factory=list)
    transactions: List[GroupTransaction] = field(default_factory=list)


@dataclass
class Event:
    """Calendar event; reserved grows with each reservation and mirrors the fest jar."""
    id: str
    name: str
    date: datetime.date
    expected_spend: float
    reserved: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat(),
            "expected_spend": self.expected_spend,
            "reserved": self.reserved,
        }


@dataclass(frozen=True)
class Settlement:
    """Suggested transfer of a whole-unit amount between two group members."""
    from_member: str
    to_member: str
    amount: int


@dataclass(frozen=True)
class Forecast:
    """
    Output of the run-out predictor.
    days_left is math.inf and runout_date is None when there is no burn.
    """
    balance: float
    burn: float
    days_left: float
    runout_date: Optional[datetime.date]

    @property
    def has_runout(self) -> bool:
        return self.runout_date is not None
