import logging
from collections import Counter
from typing import Any, Callable, Dict, Sequence

from fintrack import config
from fintrack.aggregation import (
    balance,
    capped_percent,
    category_breakdown,
    category_limit_usage,
    limit_for,
    limit_progress,
    member_stats,
    newest_first,
    percent_of,
    savings_rate_clamped,
    savings_rate_signed,
    spent_by_category,
    sum_by_type,
    top_n,
)
from fintrack.domain import EXPENSE, INCOME, FinanceState
from fintrack.functional import resolve_category, safe_category
from fintrack.notifications import evaluate, severity_counts

logger = logging.getLogger(__name__)

Validator = Callable[[str, FinanceState], Sequence[str]]
Calculator = Callable[[str, FinanceState, Dict[str, Any]], Dict[str, Any]]
Aggregator = Callable[[str, FinanceState, Dict[str, Any]], Dict[str, Any]]


class BudgetService:
    """Facade for budget-related operations using injected validators and calculators.

    validators: functions taking (month, state) -> Sequence[str]
    calculators: functions taking (month, state, acc) -> dict (partial results);
        ``acc`` holds everything earlier calculators produced.
    """

    def __init__(self, validators: Sequence[Validator], calculators: Sequence[Calculator]):
        self.validators = validators
        self.calculators = calculators

    def monthly_report(self, month: str, state: FinanceState) -> Dict[str, Any]:
        """Run validators and calculators over one snapshot and return the report with intermediate steps."""
        report = {
            "month": month,
            "validation": [],
            "steps": [],
            "result": {}
        }

        # a broken validator must not hide the figures
        for v in self.validators:
            name = getattr(v, "__name__", str(v))
            try:
                msgs = list(v(month, state))
            except Exception as e:
                logger.exception("Validator %s failed", name)
                msgs = [f"validator_error: {e}"]
            for msg in msgs:
                logger.warning("%s: %s", name, msg)
            report["validation"].append({"validator": name, "messages": msgs})

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(month, state, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        logger.debug("Monthly report for %s: %d steps", month, len(report["steps"]))
        report["result"] = acc
        return report


class ReportService:
    """Facade for generating reports about categories using injected aggregators."""

    def __init__(self, aggregators: Sequence[Aggregator]):
        self.aggregators = aggregators

    def category_report(self, cat_id: str, state: FinanceState) -> Dict[str, Any]:
        report = {"category": cat_id, "steps": [], "result": {}}
        acc: Dict[str, Any] = {}
        for agg in self.aggregators:
            out = agg(cat_id, state, acc)
            report["steps"].append({"aggregator": getattr(agg, "__name__", str(agg)), "output": out})
            if isinstance(out, dict):
                acc.update(out)
        report["result"] = acc
        return report


# --- validators


def dangling_references(month: str, state: FinanceState) -> list[str]:
    known = {c.id for c in state.categories}
    msgs = [
        f"transaction {t.id} refers to missing category {t.category_id}"
        for t in state.transactions
        if t.category_id not in known
    ]
    msgs += [
        f"limit refers to missing category {lim.category_id}"
        for lim in state.limits
        if lim.category_id not in known
    ]
    msgs += [
        f"plan {p.id} refers to missing category {p.category_id}"
        for p in state.plans
        if p.category_id not in known
    ]
    return msgs


def limits_on_income(month: str, state: FinanceState) -> list[str]:
    return [
        f"limit set on income category {lim.category_id}"
        for lim in state.limits
        if safe_category(state.categories, lim.category_id).map(lambda c: c.type == INCOME).get_or_else(False)
    ]


def duplicate_plans(month: str, state: FinanceState) -> list[str]:
    keys = Counter((p.member_id, p.category_id, p.type) for p in state.plans if p.month == month)
    return [
        f"{n} {tx_type} plans for member {member_id}, category {cat_id} in {month}"
        for (member_id, cat_id, tx_type), n in keys.items()
        if n > 1
    ]


# --- calculators


def totals(month: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    trans = state.transactions
    return {
        "income": sum_by_type(trans, INCOME),
        "expense": sum_by_type(trans, EXPENSE),
        "balance": balance(trans),
        "savings_rate": savings_rate_signed(trans),
        "savings_rate_display": savings_rate_clamped(trans),
    }


def breakdowns(month: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    expense_rows = category_breakdown(state.transactions, state.categories, EXPENSE)
    return {
        "expense_by_category": expense_rows,
        "income_by_category": category_breakdown(state.transactions, state.categories, INCOME),
        "top_expenses": top_n(expense_rows, config.TOP_CATEGORIES),
        "expense_usage": category_limit_usage(state.transactions, state.categories, state.limits),
    }


def limits(month: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"limits": limit_progress(state.limits, state.transactions)}


def family(month: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"members": member_stats(state.members, state.transactions, state.plans, month)}


def notifications(month: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    notes = evaluate(state.transactions, state.categories, state.limits)
    return {"notifications": notes, "notification_counts": severity_counts(notes)}


# --- category aggregators


def category_info(cat_id: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"info": resolve_category(state.categories, cat_id)}


def category_spending(cat_id: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    info = acc.get("info") or resolve_category(state.categories, cat_id)
    amount = sum(t.amount for t in state.transactions if t.category_id == cat_id and t.type == info.type)
    return {
        "amount": amount,
        "share": percent_of(amount, sum_by_type(state.transactions, info.type)),
    }


def category_limit(cat_id: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    limit = limit_for(state.limits, cat_id)
    spent = spent_by_category(state.transactions, cat_id)
    return {
        "limit": limit,
        "remaining": limit - spent if limit > 0 else None,
        "limit_pct": capped_percent(spent, limit) if limit > 0 else None,
        "over": limit > 0 and spent > limit,
    }


def category_transactions(cat_id: str, state: FinanceState, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"transactions": newest_first(tuple(t for t in state.transactions if t.category_id == cat_id))}


def default_budget_service() -> BudgetService:
    return BudgetService(
        validators=[dangling_references, limits_on_income, duplicate_plans],
        calculators=[totals, breakdowns, limits, family, notifications],
    )


def default_report_service() -> ReportService:
    return ReportService(
        aggregators=[category_info, category_spending, category_limit, category_transactions],
    )
