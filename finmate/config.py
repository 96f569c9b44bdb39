"""
config.py - tunable constants and environment overrides

Everything the core needs to agree on lives here so the ledger, forecaster,
nudge rules and the dashboard read the same numbers.

Environment overrides (all optional):
  - FINMATE_LOG_LEVEL: logging level name for the tracker logger (default INFO)
  - FINMATE_DEFAULT_ALLOWANCE: monthly allowance for a freshly seeded session
  - FINMATE_SEED_DEMO: "0"/"false" starts the dashboard with an empty session
"""

import os


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw not in ("0", "false", "no", "off")


LOG_LEVEL = (os.getenv("FINMATE_LOG_LEVEL") or "INFO").strip().upper()
DEFAULT_ALLOWANCE = _env_float("FINMATE_DEFAULT_ALLOWANCE", 8000.0)
SEED_DEMO = _env_bool("FINMATE_SEED_DEMO", True)

CURRENCY = "₹"

# forecasting
EWMA_ALPHA = 0.4

# micro-savings
MICRO_SAVING_AMOUNT = 5
DISCRETIONARY_CATEGORIES = ("Outings", "Misc", "Travel")

# well-known jar keys
CHAI_JAR = "chai"
EMERGENCY_JAR = "emergency"
FEST_JAR = "fest"

# settlement: nets within this distance of zero count as settled
SETTLE_TOLERANCE = 0.5
# a side's remainder below this is considered paid off
SETTLE_MIN_TRANSFER = 1.0

# nudges
RUNOUT_WARNING_DAYS = 7
EMERGENCY_FLOOR = 1000

# monthly budget per category before the mode multiplier is applied
BASE_BUDGETS = {
    "Mess": 2500,
    "Outings": 1500,
    "Rent": 4000,
    "Utilities": 600,
    "Travel": 600,
    "Groceries": 800,
    "Misc": 500,
}

# dashboard quick actions
JAR_STEP = 50
RESERVE_STEPS = (100, 200)
