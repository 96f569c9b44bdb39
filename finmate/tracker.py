"""
tracker.py - the session object behind the FinMate screen

Responsibilities:
 - own every piece of mutable state for one user session: allowance, side
   income, mode, transactions, jars, squads and calendar events
 - expose discrete mutation methods consumed by the UI:
     add_transaction, top_up, create_jar, adjust_jar, create_group,
     add_group_transaction, create_event, reserve_for_event, set_mode,
     set_allowance, reset
 - answer read-only queries by calling the pure functions in ledger,
   forecast, settlement and nudges (nothing derived is stored)
 - notify subscribed listeners after each mutation

State lives in memory only. The dashboard keeps one tracker per browser
session in st.session_state.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from finmate import config
from finmate.forecast import predict_runout
from finmate.ledger import (
    budgets_for_mode,
    daily_series,
    is_discretionary,
    jar_locked,
    spend_by_category,
    spend_so_far,
)
from finmate.models import (
    Category,
    Channel,
    Event,
    Forecast,
    Group,
    GroupTransaction,
    Jar,
    Mode,
    Settlement,
    Transaction,
)
from finmate.nudges import build_nudges
from finmate.settlement import suggest_settlements

# ensure a logger is available
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

DateLike = Union[datetime.date, str]
Listener = Callable[[str, "FinanceTracker"], None]


def _as_date(value: DateLike) -> datetime.date:
    """Accept a date or an ISO "YYYY-MM-DD" string."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value).strip())


@dataclass(frozen=True)
class Snapshot:
    """Every derived value the dashboard renders, computed in one pass."""
    mode: Mode
    allowance: float
    side_income: float
    spend_so_far: float
    spend_by_category: Dict[Category, float]
    budgets: Dict[Category, int]
    daily_series: List[float]
    forecast: Forecast
    jar_locked: float
    nudges: List[str]


class FinanceTracker:
    """
    Single-session state store. The UI creates one FinanceTracker() and uses
    its methods to read/write data.
    """

    def __init__(self, seed: bool = True, today: Callable[[], datetime.date] = datetime.date.today):
        self._today = today
        self._listeners: List[Listener] = []
        self._reset_state(seed)

    def _reset_state(self, seed: bool):
        self.allowance: float = 0.0
        self.side_income: float = 0.0
        self.mode: Mode = Mode.NORMAL
        # newest first
        self.transactions: List[Transaction] = []
        self.jars: List[Jar] = []
        self.groups: List[Group] = []
        # newest first
        self.events: List[Event] = []
        self._next_id = 1
        if seed:
            self._seed_demo()

    def _seed_demo(self):
        """Starter data so a fresh screen has something to show."""
        today = self.today()
        self.allowance = config.DEFAULT_ALLOWANCE
        # seeded spends do not trigger micro-savings
        for amount, category, channel, note in (
            (120, Category.MESS, Channel.UPI, "Breakfast"),
            (300, Category.OUTINGS, Channel.WALLET, "Cafe"),
            (4000, Category.RENT, Channel.UPI, "Hostel rent"),
        ):
            self.transactions.append(
                Transaction(id=self._new_id(), date=today, amount=amount, category=category, channel=channel, note=note)
            )
        self.jars = [
            Jar(key=config.CHAI_JAR, name="Chai Jar", target=1000, saved=50),
            Jar(key=config.EMERGENCY_JAR, name="Emergency", target=3000, saved=200),
            Jar(key=config.FEST_JAR, name="Fest Fund", target=1500, saved=0),
        ]
        self.groups = [Group(id=self._new_id(), name="Room 108", members=["You", "Aarav", "Sara"])]
        self.events = [Event(id=self._new_id(), name="TechFest", date=today, expected_spend=800)]

    def _new_id(self) -> str:
        new_id = str(self._next_id)
        self._next_id += 1
        return new_id

    def today(self) -> datetime.date:
        return self._today()

    # -----------------------
    # Observers
    # -----------------------
    def subscribe(self, listener: Listener) -> None:
        """Register listener(action, tracker), called after every mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, action: str) -> None:
        for listener in list(self._listeners):
            listener(action, self)

    # -----------------------
    # Ledger
    # -----------------------
    def add_transaction(
        self,
        amount: float,
        date: DateLike,
        category: Union[Category, str],
        channel: Union[Channel, str],
        note: str = "",
    ) -> Transaction:
        """
        Record a transaction (newest first).
        Discretionary spends also drop a micro-saving into the chai jar.
        """
        txn = self._record_transaction(amount, date, category, channel, note)
        self._notify("add_transaction")
        return txn

    def _record_transaction(self, amount, date, category, channel, note) -> Transaction:
        txn = Transaction(
            id=self._new_id(),
            date=_as_date(date),
            amount=amount,
            category=Category(category),
            channel=Channel(channel),
            note=note or "",
        )
        self.transactions.insert(0, txn)
        logger.info(
            "Added transaction id=%s amount=%s category=%s channel=%s",
            txn.id, txn.amount, txn.category.value, txn.channel.value,
        )
        if is_discretionary(txn.category):
            self._deposit(config.CHAI_JAR, config.MICRO_SAVING_AMOUNT)
        return txn

    def top_up(self, amount: float, note: str = "Side income") -> Transaction:
        """
        Record side income. It is stored as a negative Misc/UPI transaction
        dated today, and the running side-income total grows by amount.
        """
        txn = self._record_transaction(
            amount=-amount,
            date=self.today(),
            category=Category.MISC,
            channel=Channel.UPI,
            note=note,
        )
        self.side_income += amount
        logger.info("Top-up of %s recorded (side income now %s)", amount, self.side_income)
        self._notify("top_up")
        return txn

    def set_allowance(self, amount: float) -> None:
        self.allowance = amount
        logger.info("Monthly allowance set to %s", amount)
        self._notify("set_allowance")

    def set_mode(self, mode: Union[Mode, str]) -> None:
        self.mode = Mode(mode)
        logger.info("Mode set to %s", self.mode.value)
        self._notify("set_mode")

    # -----------------------
    # Jars
    # -----------------------
    def get_jar(self, key: str) -> Optional[Jar]:
        return next((j for j in self.jars if j.key == key), None)

    def create_jar(self, name: str, target: float) -> Jar:
        jar = Jar(key=f"jar-{self._new_id()}", name=name, target=target, saved=0)
        self.jars.append(jar)
        logger.info("Created jar key=%s name=%s target=%s", jar.key, jar.name, jar.target)
        self._notify("create_jar")
        return jar

    def adjust_jar(self, key: str, delta: float) -> Optional[Jar]:
        """
        Deposit (delta > 0) or withdraw (delta < 0). saved never drops below 0.
        Returns the jar, or None when the key is unknown.
        """
        jar = self.get_jar(key)
        if jar is None:
            logger.warning("Jar key=%s not found; adjustment of %s ignored", key, delta)
            return None
        jar.saved = max(0, jar.saved + delta)
        logger.info("Adjusted jar key=%s by %s (saved=%s)", key, delta, jar.saved)
        self._notify("adjust_jar")
        return jar

    def _deposit(self, key: str, amount: float) -> Optional[Jar]:
        # silent for a missing jar: automatic deposits are best effort
        jar = self.get_jar(key)
        if jar is not None:
            jar.saved += amount
        return jar

    # -----------------------
    # Squads
    # -----------------------
    def get_group(self, group_id: str) -> Optional[Group]:
        return next((g for g in self.groups if g.id == group_id), None)

    def create_group(self, name: str, members: List[str]) -> Group:
        """Create a squad. Duplicate member names are collapsed, order kept."""
        unique_members: List[str] = []
        for m in members:
            m = (m or "").strip()
            if m and m not in unique_members:
                unique_members.append(m)
        group = Group(id=self._new_id(), name=name, members=unique_members)
        self.groups.append(group)
        logger.info("Created group id=%s name=%s members=%s", group.id, group.name, group.members)
        self._notify("create_group")
        return group

    def add_group_transaction(
        self,
        group_id: str,
        amount: float,
        description: str,
        date: DateLike,
        paid_by: str,
        split_with: List[str],
    ) -> Optional[GroupTransaction]:
        """
        Record a shared expense on a squad (newest first).
        Returns None when the group does not exist.
        """
        group = self.get_group(group_id)
        if group is None:
            logger.warning("Group id=%s not found; expense %r ignored", group_id, description)
            return None
        txn = GroupTransaction(
            id=self._new_id(),
            date=_as_date(date),
            description=description,
            amount=amount,
            paid_by=paid_by,
            split_with=list(split_with),
        )
        group.transactions.insert(0, txn)
        logger.info(
            "Added group expense id=%s to group=%s amount=%s paid_by=%s split=%d",
            txn.id, group.id, txn.amount, txn.paid_by, len(txn.split_with),
        )
        self._notify("add_group_transaction")
        return txn

    def get_settlements(self, group_id: str) -> List[Settlement]:
        """Settle-up suggestions for one squad, recomputed on every call."""
        group = self.get_group(group_id)
        if group is None:
            logger.warning("Group id=%s not found; no settlements", group_id)
            return []
        return suggest_settlements(group)

    # -----------------------
    # Calendar
    # -----------------------
    def get_event(self, event_id: str) -> Optional[Event]:
        return next((e for e in self.events if e.id == event_id), None)

    def create_event(self, name: str, date: DateLike, expected_spend: float) -> Event:
        event = Event(id=self._new_id(), name=name, date=_as_date(date), expected_spend=expected_spend)
        self.events.insert(0, event)
        logger.info("Created event id=%s name=%s expected=%s", event.id, event.name, event.expected_spend)
        self._notify("create_event")
        return event

    def reserve_for_event(self, event_id: str, amount: float) -> Optional[Event]:
        """
        Put money aside for an event. The same amount lands in the fest jar.
        Over-reserving is allowed.
        """
        event = self.get_event(event_id)
        if event is None:
            logger.warning("Event id=%s not found; reservation of %s ignored", event_id, amount)
            return None
        event.reserved += amount
        self._deposit(config.FEST_JAR, amount)
        logger.info("Reserved %s for event id=%s (reserved=%s)", amount, event.id, event.reserved)
        self._notify("reserve_for_event")
        return event

    # -----------------------
    # Derived values
    # -----------------------
    def get_spend_so_far(self) -> float:
        return spend_so_far(self.transactions)

    def get_spend_by_category(self) -> Dict[Category, float]:
        return spend_by_category(self.transactions)

    def get_budgets(self) -> Dict[Category, int]:
        return budgets_for_mode(self.mode)

    def get_daily_series(self) -> List[float]:
        return daily_series(self.transactions, self.today())

    def get_jar_locked(self) -> float:
        return jar_locked(self.jars)

    def get_forecast(self) -> Forecast:
        return predict_runout(
            allowance=self.allowance,
            side_income=self.side_income,
            spend_so_far=self.get_spend_so_far(),
            daily_series=self.get_daily_series(),
            today=self.today(),
        )

    def get_nudges(self) -> List[str]:
        return build_nudges(
            spend_by_category=self.get_spend_by_category(),
            budgets=self.get_budgets(),
            days_left=self.get_forecast().days_left,
            jars=self.jars,
        )

    def snapshot(self) -> Snapshot:
        by_category = self.get_spend_by_category()
        budgets = self.get_budgets()
        forecast = self.get_forecast()
        return Snapshot(
            mode=self.mode,
            allowance=self.allowance,
            side_income=self.side_income,
            spend_so_far=self.get_spend_so_far(),
            spend_by_category=by_category,
            budgets=budgets,
            daily_series=self.get_daily_series(),
            forecast=forecast,
            jar_locked=self.get_jar_locked(),
            nudges=build_nudges(by_category, budgets, forecast.days_left, self.jars),
        )

    def reset(self, seed: bool = True) -> None:
        """
        Drop all session state and start over (with the demo data by default).
        Listeners stay subscribed.
        """
        self._reset_state(seed)
        logger.info("Session reset (seed=%s)", seed)
        self._notify("reset")
