"""pandas views for tables and charts."""

import pandas as pd

from fintrack.aggregation import CategoryUsage, LimitProgress, MemberStats, PlanProgress
from fintrack.domain import EXPENSE, Category, FamilyMember, Transaction
from fintrack.functional import resolve_category, safe_member

TX_COLUMNS = ["id", "date", "type", "amount", "signed_amount", "category", "color", "member", "description"]


def transactions_frame(
    trans: tuple[Transaction, ...],
    cats: tuple[Category, ...],
    members: tuple[FamilyMember, ...] = (),
) -> pd.DataFrame:
    """One row per transaction, categories and members resolved to names.

    Rows keep the input order; ``date`` is parsed to a timestamp.
    """
    rows = []
    for t in trans:
        cat = resolve_category(cats, t.category_id, t.type)
        member = safe_member(members, t.member_id).map(lambda m: m.name).get_or_else("")
        rows.append({
            "id": t.id,
            "date": t.date,
            "type": t.type,
            "amount": t.amount,
            "signed_amount": -t.amount if t.type == EXPENSE else t.amount,
            "category": cat.name,
            "color": cat.color,
            "member": member,
            "description": t.description,
        })
    df = pd.DataFrame(rows, columns=TX_COLUMNS)
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


def usage_frame(usage: tuple[CategoryUsage, ...]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "category": u.category.name,
                "color": u.category.color,
                "amount": u.amount,
                "share": u.share,
                "limit_pct": u.limit_pct,
                "over": u.is_over,
            }
            for u in usage
        ],
        columns=["category", "color", "amount", "share", "limit_pct", "over"],
    )


def limits_frame(progress: tuple[LimitProgress, ...], cats: tuple[Category, ...]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "category": resolve_category(cats, p.category_id).name,
                "spent": p.spent,
                "limit": p.limit,
                "remaining": p.limit - p.spent,
                "percentage": p.percentage,
                "over": p.is_over,
            }
            for p in progress
        ],
        columns=["category", "spent", "limit", "remaining", "percentage", "over"],
    )


def plans_frame(progress: tuple[PlanProgress, ...], cats: tuple[Category, ...]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": p.plan.id,
                "category": resolve_category(cats, p.plan.category_id, p.plan.type).name,
                "type": p.plan.type,
                "planned": p.plan.planned_amount,
                "fact": p.fact_amount,
                "percentage": p.percentage,
                "over": p.is_over_budget,
            }
            for p in progress
        ],
        columns=["id", "category", "type", "planned", "fact", "percentage", "over"],
    )


def members_frame(stats: tuple[MemberStats, ...]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "member": f"{s.member.avatar} {s.member.name}",
                "color": s.member.color,
                "income": s.income,
                "expense": s.expense,
                "balance": s.balance,
                "plan_income": s.plan_income,
                "plan_expense": s.plan_expense,
            }
            for s in stats
        ],
        columns=["member", "color", "income", "expense", "balance", "plan_income", "plan_expense"],
    )
