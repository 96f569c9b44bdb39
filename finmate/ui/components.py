"""
components.py - reusable Streamlit components / forms / displays

This module contains pure-UI helpers used by the dashboard:
 - forms: transaction, top-up, jar, squad, squad expense, event
 - displays: forecast card, budgets vs spend, jars, transaction table,
   squad settlements, events, nudges

The forms enforce validation before anything reaches the tracker:
 - amounts / targets must be > 0
 - names and descriptions are required where the tracker needs them
 - a squad expense needs a payer from the squad and at least one split member
"""

import datetime
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from finmate import config
from finmate.ledger import percent_of
from finmate.models import Category, Channel, Event, Group, Jar, Settlement, Transaction
from finmate.settlement import format_settlement
from finmate.tracker import Snapshot

CUR = config.CURRENCY


def trigger_rerun():
    # redraw from the top so lists above a form pick up what it just added
    st.rerun()


def _split_names(text: str) -> List[str]:
    return [p.strip() for p in (text or "").split(",") if p.strip()]


@dataclass
class TransactionInput:
    """Lightweight container passed to the on_submit callback."""
    amount: float
    date: str  # ISO date string
    category: Category
    channel: Channel
    note: str


@dataclass
class GroupTransactionInput:
    amount: float
    description: str
    date: str  # ISO date string
    paid_by: str
    split_with: List[str]


# -----------------------
# Forms
# -----------------------
def display_transaction_form(on_submit: Callable[[TransactionInput], None]):
    """Display the 'Add Transaction' form."""
    st.header("Add Transaction")
    with st.form(key="transaction_form"):
        amount = st.number_input(f"Amount ({CUR})", min_value=0.0, step=10.0, format="%.2f")
        date_val = st.date_input("Date", value=datetime.date.today())
        category = st.selectbox("Category", options=list(Category), format_func=lambda c: c.value)
        channel = st.selectbox("Channel", options=list(Channel), format_func=lambda c: c.value)
        note = st.text_input("Note (optional)", placeholder="e.g., Birthday treat")
        submit_button = st.form_submit_button("Add")

        if submit_button:
            if amount <= 0:
                st.error("Amount must be greater than 0.")
                return
            on_submit(TransactionInput(
                amount=round(amount, 2),
                date=date_val.isoformat(),
                category=category,
                channel=channel,
                note=note.strip(),
            ))
            st.success("Transaction added.")


def display_top_up_form(on_submit: Callable[[float, str], None]):
    """Side-income form, rendered in the sidebar."""
    with st.sidebar.form(key="top_up_form"):
        st.markdown("**Top-up**")
        amount = st.number_input(f"Amount ({CUR})", min_value=0.0, value=1000.0, step=100.0, format="%.2f")
        note = st.text_input("Note", value="Part-time gig")
        if st.form_submit_button("Add side income"):
            if amount <= 0:
                st.error("Amount must be greater than 0.")
                return
            on_submit(round(amount, 2), note.strip() or "Side income")
            st.success("Top-up recorded.")


def display_jar_form(on_submit: Callable[[str, float], None]):
    with st.form(key="jar_form"):
        st.subheader("New Jar")
        name = st.text_input("Jar name", placeholder="Goa Trip", key="jar_name")
        target = st.number_input(f"Target ({CUR})", min_value=0.0, value=1000.0, step=100.0)
        if st.form_submit_button("Create"):
            if not name.strip():
                st.error("Jar name is required.")
                return
            if target <= 0:
                st.error("Target must be greater than 0.")
                return
            on_submit(name.strip(), target)
            st.success(f"Jar '{name.strip()}' created.")
            trigger_rerun()


def display_squad_form(on_submit: Callable[[str, List[str]], None]):
    with st.form(key="squad_form"):
        st.subheader("New Squad")
        name = st.text_input("Squad name", placeholder="Hostel 108", key="squad_name")
        members = st.text_input("Members", value="You, Aarav, Sara", help="Comma-separated names", key="squad_members")
        if st.form_submit_button("Create"):
            if not name.strip():
                st.error("Squad name is required.")
                return
            member_list = _split_names(members)
            if not member_list:
                st.error("At least one member is required.")
                return
            on_submit(name.strip(), member_list)
            st.success(f"Squad '{name.strip()}' created.")
            trigger_rerun()


def display_group_transaction_form(group: Group, on_submit: Callable[[GroupTransactionInput], None]):
    """Shared-expense form for one squad; equal split only."""
    with st.form(key=f"group_txn_form_{group.id}"):
        st.markdown("**Add Group Expense**")
        amount = st.number_input(f"Amount ({CUR})", min_value=0.0, step=10.0, format="%.2f", key=f"gt_amount_{group.id}")
        description = st.text_input("Description", placeholder="Pizza night", key=f"gt_desc_{group.id}")
        date_val = st.date_input("Date", value=datetime.date.today(), key=f"gt_date_{group.id}")
        paid_by = st.selectbox("Paid by", options=group.members, key=f"gt_payer_{group.id}")
        split_with = st.multiselect("Split with", options=group.members, default=group.members, key=f"gt_split_{group.id}")
        if st.form_submit_button("Add"):
            if amount <= 0:
                st.error("Amount must be greater than 0.")
                return
            if not description.strip():
                st.error("Description is required.")
                return
            if not split_with:
                st.error("Pick at least one member to split with.")
                return
            on_submit(GroupTransactionInput(
                amount=round(amount, 2),
                description=description.strip(),
                date=date_val.isoformat(),
                paid_by=paid_by,
                split_with=list(split_with),
            ))
            st.success("Group expense added.")
            trigger_rerun()


def display_event_form(on_submit: Callable[[str, str, float], None]):
    with st.form(key="event_form"):
        st.subheader("New Event")
        name = st.text_input("Event name", placeholder="College Fest", key="event_name")
        date_val = st.date_input("Date", value=datetime.date.today())
        expected = st.number_input(f"Expected spend ({CUR})", min_value=0.0, value=500.0, step=50.0)
        if st.form_submit_button("Add"):
            if not name.strip():
                st.error("Event name is required.")
                return
            if expected <= 0:
                st.error("Expected spend must be greater than 0.")
                return
            on_submit(name.strip(), date_val.isoformat(), expected)
            st.success(f"Event '{name.strip()}' added.")
            trigger_rerun()


# -----------------------
# Displays
# -----------------------
def display_forecast(snap: Snapshot):
    """Allowance GPS card."""
    st.subheader("Allowance GPS")
    st.caption(f"Mode: {snap.mode.value}")
    col1, col2 = st.columns(2)
    col1.metric("Monthly allowance", f"{CUR}{snap.allowance:,.0f}")
    col2.metric("Side income", f"{CUR}{snap.side_income:,.0f}")
    st.write(f"Spend so far: {CUR}{max(0, snap.spend_so_far):,.0f}")
    st.write(f"Locked in jars: {CUR}{snap.jar_locked:,.0f}")
    st.write(f"Balance: {CUR}{snap.forecast.balance:,.0f}")

    burn = snap.forecast.burn
    st.markdown("**Predicted daily burn**")
    st.progress(percent_of(burn, 500))
    st.caption(f"{CUR}{burn:,.0f} / day")

    if snap.forecast.has_runout:
        st.write(
            f"Run-out in **{snap.forecast.days_left}** days "
            f"({snap.forecast.runout_date.strftime('%a %b %d %Y')})"
        )
    else:
        st.write("No run-out predicted")


def display_budgets(spend: Dict[Category, float], budgets: Dict[Category, int]):
    """Budgets vs spend: text rows with progress bars plus a grouped bar chart."""
    st.subheader("Budgets vs Spend")
    for c in Category:
        st.write(f"{c.value}: {CUR}{spend[c]:,.0f}/{budgets[c]:,}")
        st.progress(percent_of(spend[c], budgets[c]))

    rows = []
    for c in Category:
        rows.append({"category": c.value, "kind": "Spent", "amount": float(spend[c])})
        rows.append({"category": c.value, "kind": "Budget", "amount": float(budgets[c])})
    df = pd.DataFrame(rows)
    ordered = [c.value for c in Category]
    chart = alt.Chart(df).mark_bar().encode(
        x=alt.X("category:N", title="Category", sort=ordered),
        xOffset="kind:N",
        y=alt.Y("amount:Q", title=f"Amount ({CUR})"),
        color=alt.Color("kind:N", legend=alt.Legend(title="")),
        tooltip=[
            alt.Tooltip("category:N", title="Category"),
            alt.Tooltip("kind:N", title=""),
            alt.Tooltip("amount:Q", title="Amount", format=",.0f"),
        ],
    ).properties(height=280)
    st.altair_chart(chart, width="stretch")


def display_daily_series(series: List[float], month_start: datetime.date):
    """Spend per day since the start of the month."""
    if not series or sum(series) <= 0:
        st.info("No spend recorded this month.")
        return
    df = pd.DataFrame({
        "day": [month_start + datetime.timedelta(days=i) for i in range(len(series))],
        "amount": [float(v) for v in series],
    })
    chart = alt.Chart(df).mark_bar().encode(
        x=alt.X("day:T", title="Day", axis=alt.Axis(format="%d %b")),
        y=alt.Y("amount:Q", title=f"Spend ({CUR})"),
        tooltip=[alt.Tooltip("day:T", format="%Y-%m-%d"), alt.Tooltip("amount:Q", format=",.0f")],
    ).properties(height=200)
    st.altair_chart(chart, width="stretch")


def display_jars(jars: List[Jar], on_adjust: Optional[Callable[[str, float], None]] = None):
    """Jar progress; with on_adjust, each jar gets +/- step buttons."""
    if not jars:
        st.write("No jars yet.")
        return
    step = config.JAR_STEP
    for j in jars:
        st.write(f"{j.name}: {CUR}{j.saved:,.0f}/{j.target:,.0f}")
        st.progress(percent_of(j.saved, j.target))
        if on_adjust is None:
            continue
        col1, col2 = st.columns(2)
        if col1.button(f"+ {CUR}{step}", key=f"jar_plus_{j.key}"):
            on_adjust(j.key, step)
            trigger_rerun()
        if col2.button(f"- {CUR}{step}", key=f"jar_minus_{j.key}"):
            on_adjust(j.key, -step)
            trigger_rerun()


def display_transaction_list(transactions: List[Transaction]):
    """Render transactions as a table, spends negative and inflows positive."""
    st.header("Transactions")
    if not transactions:
        st.write("No transactions recorded.")
        return
    df = pd.DataFrame([t.to_dict() for t in transactions], columns=["id", "date", "category", "channel", "note", "amount"])
    # flip sign for display: spend shows as money out
    df["amount"] = -df["amount"]
    st.dataframe(df.style.format({"amount": "{:+,.2f}"}), width="stretch")


def display_settlements(settlements: List[Settlement]):
    st.markdown("**Suggested Settlements**")
    if not settlements:
        st.write("All settled 🎉")
        return
    for s in settlements:
        st.write(format_settlement(s))


def display_group(group: Group):
    st.markdown(f"**{group.name}** ({', '.join(group.members)})")
    if not group.transactions:
        st.caption("No group expenses yet.")
        return
    df = pd.DataFrame(
        [t.to_dict() for t in group.transactions],
        columns=["date", "description", "amount", "paid_by", "split_with"],
    )
    # split_with is a list -> join into string for display
    df["split_with"] = df["split_with"].apply(", ".join)
    st.dataframe(df.style.format({"amount": "{:,.2f}"}), width="stretch", hide_index=True)


def display_jar_table(jars: List[Jar]):
    """Jars as a table with a progress column."""
    if not jars:
        return
    df = pd.DataFrame([j.to_dict() for j in jars], columns=["key", "name", "target", "saved"])
    df["progress %"] = [percent_of(j.saved, j.target) for j in jars]
    st.dataframe(df.style.format({"target": "{:,.0f}", "saved": "{:,.0f}"}), width="stretch", hide_index=True)


def display_event_table(events: List[Event]):
    """Events with how much of the expected spend is already reserved."""
    if not events:
        st.write("No events yet.")
        return
    df = pd.DataFrame([e.to_dict() for e in events], columns=["date", "name", "expected_spend", "reserved"])
    df["covered %"] = [percent_of(e.reserved, e.expected_spend) for e in events]
    st.dataframe(
        df.style.format({"expected_spend": "{:,.0f}", "reserved": "{:,.0f}"}),
        width="stretch",
        hide_index=True,
    )


def display_event(event: Event, on_reserve: Callable[[str, float], None]):
    st.markdown(f"**{event.name}**")
    st.caption(
        f"{event.date.isoformat()} • Expected {CUR}{event.expected_spend:,.0f} • "
        f"Reserved {CUR}{event.reserved:,.0f}"
    )
    cols = st.columns(len(config.RESERVE_STEPS))
    for col, step in zip(cols, config.RESERVE_STEPS):
        if col.button(f"Reserve {CUR}{step}", key=f"reserve_{event.id}_{step}"):
            on_reserve(event.id, step)
            trigger_rerun()


def display_nudges(nudges: List[str]):
    st.header("Buddy Bot")
    for msg in nudges:
        st.info(msg)
    st.caption("Rule-based tips from your spending, forecast and jars.")
