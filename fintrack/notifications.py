"""Alerts shown in the notification panel.

Rules run in a fixed order: one alert at most per budget limit, in the
order the limits are stored, then at most one alert about the whole
portfolio. Ids depend only on the rule and the category, so evaluating
the same data twice gives the same ids.
"""

import logging
from collections import Counter

from fintrack import config
from fintrack.aggregation import percent_of, savings_rate_signed, spent_by_category, sum_by_type
from fintrack.domain import (
    DANGER,
    EXPENSE,
    INCOME,
    SUCCESS,
    WARNING,
    BudgetLimit,
    Category,
    Notification,
    Transaction,
)
from fintrack.formatting import money
from fintrack.functional import safe_category

logger = logging.getLogger(__name__)

LIMIT_EXCEEDED = "LimitExceeded"
LIMIT_WARNING = "LimitWarning"
SAVINGS_GREAT = "SavingsGreat"
NEGATIVE_BALANCE = "NegativeBalance"


def _limit_notification(cat: Category, spent: float, limit: float):
    pct = percent_of(spent, limit)
    if pct >= config.LIMIT_EXCEEDED_PCT:
        return Notification(
            id=f"over-{cat.id}",
            kind=LIMIT_EXCEEDED,
            severity=DANGER,
            title=f"Limit exceeded: {cat.name}",
            message=f"Spent {money(spent)} of {money(limit)}",
            icon="AlertCircle",
        )
    if pct >= config.LIMIT_WARNING_PCT:
        return Notification(
            id=f"warn-{cat.id}",
            kind=LIMIT_WARNING,
            severity=WARNING,
            title=f"{config.LIMIT_WARNING_PCT}% of limit: {cat.name}",
            message=f"{money(limit - spent)} left of {money(limit)}",
            icon="AlertTriangle",
        )
    return None


def _portfolio_notification(trans: tuple[Transaction, ...]):
    rate = savings_rate_signed(trans)
    if rate >= config.SAVINGS_GREAT_PCT:
        return Notification(
            id="savings-great",
            kind=SAVINGS_GREAT,
            severity=SUCCESS,
            title="Great savings!",
            message=f"You are saving {rate}% of your income. Keep it up!",
            icon="TrendingUp",
        )
    if sum_by_type(trans, EXPENSE) > sum_by_type(trans, INCOME):
        return Notification(
            id="balance-negative",
            kind=NEGATIVE_BALANCE,
            severity=DANGER,
            title="Expenses exceed income",
            message="Review the budget: spending this month is above income",
            icon="TrendingDown",
        )
    return None


def evaluate(
    trans: tuple[Transaction, ...],
    cats: tuple[Category, ...],
    limits: tuple[BudgetLimit, ...],
) -> tuple[Notification, ...]:
    result = []
    for lim in limits:
        cat = safe_category(cats, lim.category_id)
        if cat.is_none():
            logger.warning("Limit refers to missing category %s, skipped", lim.category_id)
            continue
        if lim.limit <= 0:
            continue
        spent = spent_by_category(trans, lim.category_id)
        note = _limit_notification(cat.get_or_else(None), spent, lim.limit)
        if note is not None:
            result.append(note)

    overall = _portfolio_notification(trans)
    if overall is not None:
        result.append(overall)

    logger.debug("Evaluated %d notifications", len(result))
    return tuple(result)


def severity_counts(notes: tuple[Notification, ...]) -> dict[str, int]:
    """Number of notifications per severity, zero for absent ones."""
    counts = Counter(n.severity for n in notes)
    return {sev: counts.get(sev, 0) for sev in (DANGER, WARNING, SUCCESS)}
