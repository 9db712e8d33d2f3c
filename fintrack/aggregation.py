from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from fintrack import config
from fintrack.domain import (
    EXPENSE,
    INCOME,
    BudgetLimit,
    BudgetPlan,
    Category,
    FamilyMember,
    Transaction,
)
from fintrack.formatting import round_half_away


@dataclass(frozen=True)
class CategoryAmount:
    category: Category
    amount: float


@dataclass(frozen=True)
class MemberTotals:
    income: float
    expense: float
    balance: float


@dataclass(frozen=True)
class PlanProgress:
    plan: BudgetPlan
    fact_amount: float
    percentage: float
    is_over_budget: bool


@dataclass(frozen=True)
class LimitProgress:
    category_id: str
    spent: float
    limit: float
    percentage: float
    is_over: bool


@dataclass(frozen=True)
class CategoryUsage:
    category: Category
    amount: float
    share: float                    # % of the type total
    limit_pct: Optional[float]      # None when the category has no limit
    is_over: bool


@dataclass(frozen=True)
class MemberStats:
    member: FamilyMember
    income: float
    expense: float
    balance: float
    plan_income: float
    plan_expense: float
    income_pct: Optional[float]
    expense_pct: Optional[float]
    expense_over: bool


@dataclass(frozen=True)
class PlanSummary:
    plan_income: float
    plan_expense: float
    fact_income: float
    fact_expense: float


# --- predicates


def by_type(tx_type: str) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t.type == tx_type

    return _filter


def by_category(category_id: str) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t.category_id == category_id

    return _filter


def by_member(member_id: str) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t.member_id == member_id

    return _filter


def in_month(month: str) -> Callable[[Transaction], bool]:
    """Prefix match: "2026-02-17" is in "2026-02"."""
    def _filter(t: Transaction) -> bool:
        return t.date.startswith(month)

    return _filter


def _total(trans: Iterable[Transaction], *preds: Callable[[Transaction], bool]) -> float:
    return sum((t.amount for t in trans if all(p(t) for p in preds)), 0)


def percent_of(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100


def capped_percent(part: float, whole: float) -> float:
    return min(percent_of(part, whole), 100.0)


# --- totals


def sum_by_type(trans: tuple[Transaction, ...], tx_type: str) -> float:
    return _total(trans, by_type(tx_type))


def balance(trans: tuple[Transaction, ...]) -> float:
    return sum_by_type(trans, INCOME) - sum_by_type(trans, EXPENSE)


def savings_ratio(trans: tuple[Transaction, ...]) -> float:
    income = sum_by_type(trans, INCOME)
    if income <= 0:
        return 0.0
    return (income - sum_by_type(trans, EXPENSE)) / income * 100


def savings_rate_signed(trans: tuple[Transaction, ...]) -> int:
    """Savings rate in whole percent; negative when spending exceeds income."""
    return round_half_away(savings_ratio(trans))


def savings_rate_clamped(trans: tuple[Transaction, ...]) -> int:
    return max(0, savings_rate_signed(trans))


def spent_by_category(trans: tuple[Transaction, ...], category_id: str) -> float:
    return _total(trans, by_category(category_id), by_type(EXPENSE))


def share_of_total(amount: float, total: float) -> float:
    return percent_of(amount, total)


# --- breakdowns


def category_breakdown(
    trans: tuple[Transaction, ...], cats: tuple[Category, ...], tx_type: str
) -> tuple[CategoryAmount, ...]:
    """Totals per category of ``tx_type``, largest first.

    Categories with nothing booked are left out. ``sorted`` is stable, so
    equal amounts keep the order of ``cats``.
    """
    rows = (
        CategoryAmount(c, _total(trans, by_category(c.id), by_type(tx_type)))
        for c in cats
        if c.type == tx_type
    )
    return tuple(sorted((r for r in rows if r.amount > 0), key=lambda r: r.amount, reverse=True))


def top_n(breakdown: tuple[CategoryAmount, ...], n: int = config.TOP_CATEGORIES) -> tuple[CategoryAmount, ...]:
    return breakdown[: max(0, n)]


def limit_for(limits: tuple[BudgetLimit, ...], category_id: str) -> float:
    return next((lim.limit for lim in limits if lim.category_id == category_id), 0)


def category_limit_usage(
    trans: tuple[Transaction, ...],
    cats: tuple[Category, ...],
    limits: tuple[BudgetLimit, ...],
    tx_type: str = EXPENSE,
) -> tuple[CategoryUsage, ...]:
    total = sum_by_type(trans, tx_type)
    usage = []
    for row in category_breakdown(trans, cats, tx_type):
        limit = limit_for(limits, row.category.id)
        usage.append(
            CategoryUsage(
                category=row.category,
                amount=row.amount,
                share=share_of_total(row.amount, total),
                limit_pct=capped_percent(row.amount, limit) if limit > 0 else None,
                is_over=limit > 0 and row.amount > limit,
            )
        )
    return tuple(usage)


def limit_progress(
    limits: tuple[BudgetLimit, ...], trans: tuple[Transaction, ...]
) -> tuple[LimitProgress, ...]:
    result = []
    for lim in limits:
        spent = spent_by_category(trans, lim.category_id)
        result.append(
            LimitProgress(
                category_id=lim.category_id,
                spent=spent,
                limit=lim.limit,
                percentage=capped_percent(spent, lim.limit),
                is_over=spent > lim.limit,
            )
        )
    return tuple(result)


# --- family and plans


def member_aggregate(trans: tuple[Transaction, ...], member_id: str) -> MemberTotals:
    own = tuple(filter(by_member(member_id), trans))
    income = sum_by_type(own, INCOME)
    expense = sum_by_type(own, EXPENSE)
    return MemberTotals(income=income, expense=expense, balance=income - expense)


def member_plans(
    plans: tuple[BudgetPlan, ...], member_id: str, month: str
) -> tuple[BudgetPlan, ...]:
    return tuple(p for p in plans if p.member_id == member_id and p.month == month)


def fact_amount(
    trans: tuple[Transaction, ...], member_id: str, category_id: str, tx_type: str, month: str
) -> float:
    return _total(trans, by_member(member_id), by_category(category_id), by_type(tx_type), in_month(month))


def plan_progress(
    plans: tuple[BudgetPlan, ...],
    trans: tuple[Transaction, ...],
    member_id: str,
    month: str,
) -> tuple[PlanProgress, ...]:
    result = []
    for plan in member_plans(plans, member_id, month):
        fact = fact_amount(trans, plan.member_id, plan.category_id, plan.type, month)
        result.append(
            PlanProgress(
                plan=plan,
                fact_amount=fact,
                percentage=capped_percent(fact, plan.planned_amount),
                is_over_budget=fact > plan.planned_amount and plan.type == EXPENSE,
            )
        )
    return tuple(result)


def plan_summary(
    plans: tuple[BudgetPlan, ...],
    trans: tuple[Transaction, ...],
    member_id: str,
    month: str,
) -> PlanSummary:
    progress = plan_progress(plans, trans, member_id, month)

    def _sum(tx_type: str, attr: Callable[[PlanProgress], float]) -> float:
        return sum((attr(p) for p in progress if p.plan.type == tx_type), 0)

    return PlanSummary(
        plan_income=_sum(INCOME, lambda p: p.plan.planned_amount),
        plan_expense=_sum(EXPENSE, lambda p: p.plan.planned_amount),
        fact_income=_sum(INCOME, lambda p: p.fact_amount),
        fact_expense=_sum(EXPENSE, lambda p: p.fact_amount),
    )


def member_stats(
    members: tuple[FamilyMember, ...],
    trans: tuple[Transaction, ...],
    plans: tuple[BudgetPlan, ...],
    month: str,
) -> tuple[MemberStats, ...]:
    """Per-member totals next to what was planned for ``month``.

    Totals cover every transaction of the member; plans only the month.
    """
    stats = []
    for m in members:
        totals = member_aggregate(trans, m.id)
        month_plans = member_plans(plans, m.id, month)
        plan_inc = sum((p.planned_amount for p in month_plans if p.type == INCOME), 0)
        plan_exp = sum((p.planned_amount for p in month_plans if p.type == EXPENSE), 0)
        stats.append(
            MemberStats(
                member=m,
                income=totals.income,
                expense=totals.expense,
                balance=totals.balance,
                plan_income=plan_inc,
                plan_expense=plan_exp,
                income_pct=capped_percent(totals.income, plan_inc) if plan_inc > 0 else None,
                expense_pct=capped_percent(totals.expense, plan_exp) if plan_exp > 0 else None,
                expense_over=plan_exp > 0 and totals.expense > plan_exp,
            )
        )
    return tuple(stats)


def newest_first(trans: tuple[Transaction, ...]) -> tuple[Transaction, ...]:
    """Latest date first, ties keep input order. Dates compare as ISO "YYYY-MM-DD" strings."""
    return tuple(sorted(trans, key=lambda t: t.date, reverse=True))
