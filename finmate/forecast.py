"""
forecast.py - "Allowance GPS": burn rate and run-out date

burn is an exponentially weighted moving average of daily spend; the
runway is the non-negative balance divided by that burn, truncated to whole
days.
"""

import datetime
import math
from typing import Sequence

from finmate import config
from finmate.models import Forecast


def ewma(values: Sequence[float], alpha: float = config.EWMA_ALPHA) -> float:
    """Seed with the first value, then state = alpha*v + (1-alpha)*state."""
    if not values:
        return 0.0
    state = float(values[0])
    for v in values[1:]:
        state = alpha * v + (1 - alpha) * state
    return state


def predict_runout(
    allowance: float,
    side_income: float,
    spend_so_far: float,
    daily_series: Sequence[float],
    today: datetime.date,
) -> Forecast:
    """
    Predict balance, burn, days left and run-out date.

    With no burn the runway is unbounded: days_left is math.inf and
    runout_date is None. A negative balance gives zero days left.
    """
    balance = allowance + side_income - spend_so_far
    burn = ewma([v for v in daily_series if v >= 0])
    if burn <= 0:
        return Forecast(balance=balance, burn=0.0, days_left=math.inf, runout_date=None)
    days_left = math.floor(max(0, balance) / burn)
    return Forecast(
        balance=balance,
        burn=burn,
        days_left=days_left,
        runout_date=today + datetime.timedelta(days=days_left),
    )
