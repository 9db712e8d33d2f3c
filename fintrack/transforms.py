import json
import logging
import time
from typing import Tuple

from fintrack.domain import (
    BudgetLimit,
    BudgetPlan,
    Category,
    FamilyMember,
    FinanceState,
    Transaction,
)

logger = logging.getLogger(__name__)


def load_seed(path: str) -> FinanceState:
    """Read sample data; the single-user seed has no members or plans."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    state = FinanceState(
        transactions=tuple(Transaction(**t) for t in data.get("transactions", [])),
        categories=tuple(Category(**c) for c in data.get("categories", [])),
        limits=tuple(BudgetLimit(**b) for b in data.get("limits", [])),
        plans=tuple(BudgetPlan(**p) for p in data.get("plans", [])),
        members=tuple(FamilyMember(**m) for m in data.get("members", [])),
    )
    logger.info(
        "Loaded seed %s: %d transactions, %d categories, %d limits, %d plans, %d members",
        path,
        len(state.transactions),
        len(state.categories),
        len(state.limits),
        len(state.plans),
        len(state.members),
    )
    return state


def new_id() -> str:
    """Creation-time id, milliseconds since the epoch."""
    return str(int(time.time() * 1000))


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    # newest on top
    logger.info("Adding %s transaction %s: %s", t.type, t.id, t.amount)
    return (t,) + trans


def delete_transaction(
    trans: Tuple[Transaction, ...], tx_id: str
) -> Tuple[Transaction, ...]:
    logger.info("Deleting transaction %s", tx_id)
    return tuple(t for t in trans if t.id != tx_id)


def add_category(
    cats: Tuple[Category, ...], c: Category
) -> Tuple[Category, ...]:
    logger.info("Adding %s category %s (%s)", c.type, c.name, c.id)
    return cats + (c,)


def upsert_limit(
    limits: Tuple[BudgetLimit, ...], category_id: str, new_limit: float
) -> Tuple[BudgetLimit, ...]:
    if any(b.category_id == category_id for b in limits):
        logger.info("Updating limit for category %s to %s", category_id, new_limit)
        return tuple(
            BudgetLimit(category_id=b.category_id, limit=new_limit)
            if b.category_id == category_id
            else b
            for b in limits
        )
    logger.info("Setting limit for category %s to %s", category_id, new_limit)
    return limits + (BudgetLimit(category_id=category_id, limit=new_limit),)


def add_plan(
    plans: Tuple[BudgetPlan, ...], p: BudgetPlan
) -> Tuple[BudgetPlan, ...]:
    logger.info("Adding %s plan %s for member %s, %s", p.type, p.id, p.member_id, p.month)
    return plans + (p,)


def delete_plan(
    plans: Tuple[BudgetPlan, ...], plan_id: str
) -> Tuple[BudgetPlan, ...]:
    logger.info("Deleting plan %s", plan_id)
    return tuple(p for p in plans if p.id != plan_id)


def add_member(
    members: Tuple[FamilyMember, ...], m: FamilyMember
) -> Tuple[FamilyMember, ...]:
    logger.info("Adding %s %s (%s)", m.role, m.name, m.id)
    return members + (m,)
