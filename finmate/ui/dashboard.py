"""
dashboard.py - Streamlit UI entrypoint and orchestration

This module wires the UI components (finmate.ui.components) with the session
state store (finmate.tracker). The main() function builds the sidebar menu
and routes actions to components and tracker methods.

Design notes:
 - Keep the dashboard responsible only for UI orchestration and presentation.
 - All financial rules live in the core modules behind FinanceTracker.
 - One FinanceTracker per browser session, kept in st.session_state.
"""

import streamlit as st

from finmate import config
from finmate.ledger import month_start
from finmate.models import Mode
from finmate.tracker import FinanceTracker
from finmate.ui import components

SESSION_KEY = "finmate_tracker"
# sidebar widgets that mirror tracker state; dropped on reset so they re-read it
MODE_KEY = "finmate_mode"
ALLOWANCE_KEY = "finmate_allowance"


def get_tracker() -> FinanceTracker:
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = FinanceTracker(seed=config.SEED_DEMO)
    return st.session_state[SESSION_KEY]


def _sidebar(tracker: FinanceTracker):
    modes = list(Mode)
    mode = st.sidebar.selectbox(
        "Mode",
        options=modes,
        index=modes.index(tracker.mode),
        format_func=lambda m: f"{m.value} (x{m.factor:g})",
        key=MODE_KEY,
    )
    if mode != tracker.mode:
        tracker.set_mode(mode)

    allowance = st.sidebar.number_input(
        f"Monthly allowance ({config.CURRENCY})",
        min_value=0.0,
        value=float(tracker.allowance),
        step=500.0,
        key=ALLOWANCE_KEY,
    )
    if allowance != tracker.allowance:
        tracker.set_allowance(allowance)

    components.display_top_up_form(tracker.top_up)


def main():
    """
    Streamlit page: sidebar menu controls which view is shown.
    Views:
      - Dashboard: allowance GPS, budgets vs spend, jars
      - Transactions: add form + table
      - Jars: create jar, +/- quick adjustments
      - Squads: group expenses and settle suggestions per squad
      - Calendar: events and fest-jar reservations
      - Buddy: rule-based nudges
    """
    st.title("FinMate – Student Finance")
    tracker = get_tracker()
    _sidebar(tracker)

    menu = ["Dashboard", "Transactions", "Jars", "Squads", "Calendar", "Buddy"]
    choice = st.sidebar.selectbox("Select a view", menu, key="finmate_view")

    if st.sidebar.button("Reset session"):
        tracker.reset(seed=config.SEED_DEMO)
        for key in (MODE_KEY, ALLOWANCE_KEY):
            st.session_state.pop(key, None)
        components.trigger_rerun()

    snap = tracker.snapshot()

    if choice == "Dashboard":
        col1, col2, col3 = st.columns(3)
        with col1:
            components.display_forecast(snap)
        with col2:
            components.display_budgets(snap.spend_by_category, snap.budgets)
        with col3:
            st.subheader("Jars")
            components.display_jars(tracker.jars)
        st.subheader("Daily spend this month")
        components.display_daily_series(snap.daily_series, month_start(tracker.today()))

    elif choice == "Transactions":
        def on_submit(txn_input: components.TransactionInput):
            tracker.add_transaction(
                amount=txn_input.amount,
                date=txn_input.date,
                category=txn_input.category,
                channel=txn_input.channel,
                note=txn_input.note,
            )

        components.display_transaction_form(on_submit)
        components.display_transaction_list(tracker.transactions)

    elif choice == "Jars":
        st.header("Manage Jars")
        components.display_jars(tracker.jars, on_adjust=tracker.adjust_jar)
        components.display_jar_table(tracker.jars)
        components.display_jar_form(tracker.create_jar)

    elif choice == "Squads":
        st.header("Squads")
        for group in tracker.groups:
            with st.container(border=True):
                components.display_group(group)

                # bind the group id now; the form callback runs later in the loop
                def on_submit(gt_input: components.GroupTransactionInput, group_id=group.id):
                    tracker.add_group_transaction(
                        group_id=group_id,
                        amount=gt_input.amount,
                        description=gt_input.description,
                        date=gt_input.date,
                        paid_by=gt_input.paid_by,
                        split_with=gt_input.split_with,
                    )

                components.display_group_transaction_form(group, on_submit)
                components.display_settlements(tracker.get_settlements(group.id))
        components.display_squad_form(tracker.create_group)

    elif choice == "Calendar":
        st.header("Campus Calendar")
        components.display_event_table(tracker.events)
        for event in tracker.events:
            components.display_event(event, tracker.reserve_for_event)
        components.display_event_form(tracker.create_event)

    elif choice == "Buddy":
        components.display_nudges(snap.nudges)


if __name__ == "__main__":
    main()
