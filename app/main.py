import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from dataclasses import replace
from datetime import date

import pandas as pd
import streamlit as st
import plotly.express as px
import plotly.graph_objects as go

from fintrack import config
from fintrack.aggregation import (
    member_aggregate,
    newest_first,
    plan_progress,
    plan_summary,
    share_of_total,
    spent_by_category,
)
from fintrack.domain import EXPENSE, INCOME, PARENT, CHILD, DANGER, WARNING, SUCCESS
from fintrack.formatting import money, signed_money, percent_label
from fintrack.frames import transactions_frame, usage_frame, limits_frame, members_frame, plans_frame
from fintrack.functional import (
    resolve_category,
    safe_member,
    validate_category_form,
    validate_limit_input,
    validate_member_form,
    validate_plan_form,
    validate_transaction_form,
)
from fintrack.services import default_budget_service, default_report_service
from fintrack.transforms import (
    load_seed,
    new_id,
    add_transaction,
    delete_transaction,
    add_category,
    upsert_limit,
    add_plan,
    delete_plan,
    add_member,
)

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("fintrack.app")

st.set_page_config(page_title="FinTrack", layout="wide")

if "state" not in st.session_state:
    st.session_state.state = load_seed(config.seed_path())
if "form_error" not in st.session_state:
    st.session_state.form_error = None

state = st.session_state.state
month = config.REPORT_MONTH
report = default_budget_service().monthly_report(month, state)
result = report["result"]

SEVERITY_ICONS = {DANGER: "🔴", WARNING: "🟠", SUCCESS: "🟢"}


def commit(**changes):
    st.session_state.state = replace(st.session_state.state, **changes)
    st.session_state.form_error = None
    st.rerun()


def accept(parsed, apply):
    """Apply a validated form value, or keep the error for the next render."""
    if parsed.is_left():
        err = parsed.get_error()
        logger.info("Form rejected: %s", err["error"])
        st.session_state.form_error = err["message"]
        st.rerun()
    apply(parsed.get_or_else(None))


def show_form_error():
    if st.session_state.form_error:
        st.error(st.session_state.form_error)


def category_options(tx_type):
    cats = [c for c in state.categories if c.type == tx_type]
    return {f"{c.name}": c.id for c in cats}


def transaction_list(trans, key_prefix):
    if not trans:
        st.info("No transactions yet.")
        return
    for t in newest_first(trans):
        cat = resolve_category(state.categories, t.category_id, t.type)
        who = safe_member(state.members, t.member_id).map(lambda m: f" · {m.avatar} {m.name}").get_or_else("")
        sign = "+" if t.type == INCOME else "−"
        c1, c2, c3 = st.columns([6, 2, 1])
        with c1:
            st.markdown(f"**{t.description}**  \n{cat.name} · {t.date}{who}")
        with c2:
            st.markdown(f"**{sign}{money(t.amount)}**")
        with c3:
            if st.button("🗑", key=f"{key_prefix}_del_{t.id}"):
                commit(transactions=delete_transaction(state.transactions, t.id))


def transaction_form(key, member_id=None):
    tx_type = st.radio("Type", [EXPENSE, INCOME], horizontal=True, key=f"{key}_type")
    options = category_options(tx_type)
    with st.form(f"{key}_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input("Amount")
            tx_date = st.date_input("Date", value=date.today())
        with col2:
            category = st.selectbox("Category", [""] + list(options))
            description = st.text_input("Description")
        if st.form_submit_button("Add transaction"):
            accept(
                validate_transaction_form(
                    new_id(), amount, tx_type, options.get(category, ""), description,
                    tx_date.isoformat(), member_id,
                ),
                lambda t: commit(transactions=add_transaction(state.transactions, t)),
            )


# --- sidebar: notifications

notes = result["notifications"]
counts = result["notification_counts"]
st.sidebar.markdown(f"### 🔔 Notifications ({len(notes)})")
st.sidebar.caption(f"{counts[DANGER]} critical · {counts[WARNING]} warnings")
if not notes:
    st.sidebar.success("All good! No active notifications.")
for n in notes:
    st.sidebar.markdown(f"{SEVERITY_ICONS[n.severity]} **{n.title}**  \n{n.message}")

for entry in report["validation"]:
    for msg in entry["messages"]:
        st.sidebar.caption(f"⚠️ {msg}")

menu = st.sidebar.radio(
    "Menu",
    ["💰 Budget", "🏷 Categories", "📊 Statistics", "👨‍👩‍👧 Family", "📈 Family stats", "🗓 Planning"]
)
st.sidebar.caption(f"Reporting month: {month}")

if menu == "💰 Budget":
    st.title("💰 Budget")
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Balance", signed_money(result["balance"]))
    with k2:
        st.metric("Income", money(result["income"]))
    with k3:
        st.metric("Expenses", money(result["expense"]))
    with k4:
        st.metric("Savings rate", percent_label(result["savings_rate"]))

    st.subheader("➕ New transaction")
    show_form_error()
    transaction_form("budget")

    st.subheader("🧾 Transactions")
    transaction_list(state.transactions, "budget")

elif menu == "🏷 Categories":
    st.title("🏷 Categories")
    show_form_error()
    progress_by_cat = {p.category_id: p for p in result["limits"]}
    for tx_type, header in ((EXPENSE, "Expenses"), (INCOME, "Income")):
        st.header(header)
        for cat in (c for c in state.categories if c.type == tx_type):
            c1, c2 = st.columns([3, 2])
            with c1:
                st.markdown(f"<span style='color:{cat.color}'>●</span> **{cat.name}**", unsafe_allow_html=True)
                if tx_type == EXPENSE:
                    p = progress_by_cat.get(cat.id)
                    if p is not None and p.limit > 0:
                        st.progress(p.percentage / 100)
                        over = " · over limit!" if p.is_over else ""
                        st.caption(f"{money(p.spent)} of {money(p.limit)}{over}")
                    else:
                        st.caption(f"Spent {money(spent_by_category(state.transactions, cat.id))} · no limit")
            with c2:
                if tx_type == EXPENSE:
                    with st.form(f"limit_{cat.id}", clear_on_submit=True):
                        raw = st.text_input("Limit", key=f"limit_in_{cat.id}")
                        if st.form_submit_button("Save limit"):
                            accept(
                                validate_limit_input(cat.id, raw),
                                lambda b: commit(limits=upsert_limit(state.limits, b.category_id, b.limit)),
                            )

    if result["limits"]:
        st.subheader("📏 Limits overview")
        st.dataframe(limits_frame(result["limits"], state.categories), use_container_width=True)

    st.subheader("➕ New category")
    with st.form("category_form", clear_on_submit=True):
        name = st.text_input("Name")
        cat_type = st.radio("Type", [EXPENSE, INCOME], horizontal=True)
        icon = st.selectbox("Icon", config.ICON_OPTIONS)
        color = st.selectbox("Color", config.COLOR_OPTIONS)
        if st.form_submit_button("Add category"):
            accept(
                validate_category_form(new_id(), name, icon, color, cat_type),
                lambda c: commit(categories=add_category(state.categories, c)),
            )

    st.subheader("🔎 Category details")
    picked = st.selectbox("Category", state.categories, format_func=lambda c: c.name)
    picked_id = picked.id if picked else ""
    details = default_report_service().category_report(picked_id, state)["result"]
    d1, d2, d3 = st.columns(3)
    d1.metric("Total", money(details["amount"]))
    d2.metric("Share", percent_label(details["share"]))
    d3.metric("Limit", money(details["limit"]) if details["limit"] else "—")
    st.dataframe(transactions_frame(details["transactions"], state.categories, state.members), use_container_width=True)

elif menu == "📊 Statistics":
    st.title("📊 Statistics")
    k1, k2, k3 = st.columns(3)
    k1.metric("Income", money(result["income"]))
    k2.metric("Expenses", money(result["expense"]))
    k3.metric("Balance", signed_money(result["balance"]))

    usage = usage_frame(result["expense_usage"])
    if not usage.empty:
        st.subheader("Expenses by category")
        fig = px.pie(
            usage, values="amount", names="category",
            color="category", color_discrete_map=dict(zip(usage["category"], usage["color"])),
        )
        st.plotly_chart(fig, use_container_width=True)
        table = usage.assign(
            amount=usage["amount"].map(money),
            share=usage["share"].map(percent_label),
            limit_pct=usage["limit_pct"].map(lambda v: percent_label(v) if pd.notna(v) else "—"),
        ).drop(columns=["color"])
        st.table(table)
    else:
        st.info("No expenses yet.")

    income_rows = result["income_by_category"]
    if income_rows:
        st.subheader("Income by category")
        fig_inc = go.Figure(go.Bar(
            x=[r.amount for r in income_rows],
            y=[r.category.name for r in income_rows],
            orientation="h",
            marker_color=[r.category.color for r in income_rows],
        ))
        st.plotly_chart(fig_inc, use_container_width=True)

    st.subheader("Savings rate")
    st.progress(min(result["savings_rate_display"], 100) / 100)
    st.caption(percent_label(result["savings_rate_display"]))
    if result["savings_rate"] < 0:
        st.warning("Spending is above income.")

elif menu == "👨‍👩‍👧 Family":
    st.title("👨‍👩‍👧 Family")
    show_form_error()
    if state.members:
        labels = {f"{m.avatar} {m.name}": m.id for m in state.members}
        selected = labels[st.radio("Member", list(labels), horizontal=True)]
        totals = member_aggregate(state.transactions, selected)
        k1, k2, k3 = st.columns(3)
        k1.metric("Income", money(totals.income))
        k2.metric("Expenses", money(totals.expense))
        k3.metric("Balance", signed_money(totals.balance))

        st.subheader("➕ New transaction")
        transaction_form("family", member_id=selected)
        st.subheader("🧾 Transactions")
        transaction_list(tuple(t for t in state.transactions if t.member_id == selected), "family")
    else:
        st.info("Add the first family member.")

    st.subheader("➕ New member")
    with st.form("member_form", clear_on_submit=True):
        name = st.text_input("Name")
        role = st.radio("Role", [PARENT, CHILD], horizontal=True)
        if st.form_submit_button("Add member"):
            accept(
                validate_member_form(new_id(), name, role, state.members),
                lambda m: commit(members=add_member(state.members, m)),
            )

elif menu == "📈 Family stats":
    st.title("📈 Family stats")
    st.metric(f"Family balance · {month}", signed_money(result["balance"]))

    members = members_frame(result["members"])
    if not members.empty:
        fig = go.Figure()
        fig.add_trace(go.Bar(x=members["member"], y=members["income"], name="Income"))
        fig.add_trace(go.Bar(x=members["member"], y=members["expense"], name="Expenses"))
        fig.add_trace(go.Scatter(x=members["member"], y=members["plan_expense"], mode="markers", name="Planned expenses"))
        fig.update_layout(barmode="group", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)

        for s in result["members"]:
            with st.expander(f"{s.member.avatar} {s.member.name}: {signed_money(s.balance)}"):
                if s.income_pct is not None:
                    st.caption(f"Income plan: {money(s.income)} of {money(s.plan_income)}")
                    st.progress(s.income_pct / 100)
                if s.expense_pct is not None:
                    over = " · over plan!" if s.expense_over else ""
                    st.caption(f"Expense plan: {money(s.expense)} of {money(s.plan_expense)}{over}")
                    st.progress(s.expense_pct / 100)

    st.subheader(f"Top {config.TOP_CATEGORIES} expenses")
    for row in result["top_expenses"]:
        share = share_of_total(row.amount, result["expense"])
        st.markdown(f"**{row.category.name}**: {money(row.amount)} ({percent_label(share)})")

    st.subheader("Savings rate")
    st.progress(min(result["savings_rate_display"], 100) / 100)
    st.caption(percent_label(result["savings_rate_display"]))

elif menu == "🗓 Planning":
    st.title(f"🗓 Planning · {month}")
    show_form_error()
    if not state.members:
        st.info("Add family members before planning.")
    else:
        labels = {f"{m.avatar} {m.name}": m.id for m in state.members}
        selected = labels[st.radio("Member", list(labels), horizontal=True)]

        summary = plan_summary(state.plans, state.transactions, selected, month)
        k1, k2 = st.columns(2)
        k1.metric("Income: fact / plan", f"{money(summary.fact_income)} / {money(summary.plan_income)}")
        k2.metric("Expenses: fact / plan", f"{money(summary.fact_expense)} / {money(summary.plan_expense)}")

        progress = plan_progress(state.plans, state.transactions, selected, month)
        for p in progress:
            cat = resolve_category(state.categories, p.plan.category_id, p.plan.type)
            c1, c2 = st.columns([8, 1])
            with c1:
                over = " · over budget!" if p.is_over_budget else ""
                st.markdown(f"**{cat.name}** ({p.plan.type}): {money(p.fact_amount)} of {money(p.plan.planned_amount)}{over}")
                st.progress(p.percentage / 100)
            with c2:
                if st.button("🗑", key=f"plan_del_{p.plan.id}"):
                    commit(plans=delete_plan(state.plans, p.plan.id))
        if progress:
            st.download_button(
                "⬇ Download plan CSV",
                plans_frame(progress, state.categories).to_csv(index=False),
                file_name=f"plan_{month}.csv",
                mime="text/csv",
            )

        st.subheader("➕ New plan")
        plan_type = st.radio("Type", [EXPENSE, INCOME], horizontal=True, key="plan_type")
        options = category_options(plan_type)
        with st.form("plan_form", clear_on_submit=True):
            category = st.selectbox("Category", [""] + list(options))
            amount = st.text_input("Planned amount")
            if st.form_submit_button("Add plan"):
                accept(
                    validate_plan_form(new_id(), selected, options.get(category, ""), plan_type, amount, month),
                    lambda p: commit(plans=add_plan(state.plans, p)),
                )
