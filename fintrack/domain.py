from dataclasses import dataclass
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
TX_TYPES = (INCOME, EXPENSE)

PARENT = "parent"
CHILD = "child"

WARNING = "warning"
DANGER = "danger"
SUCCESS = "success"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str       # icon name, e.g. "ShoppingCart"
    color: str      # hex, e.g. "#f97316"
    type: str       # "income" or "expense"


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float                    # always > 0, sign comes from type
    type: str
    category_id: str                 # may point at a missing category
    description: str
    date: str                        # "2026-02-17"
    member_id: Optional[str] = None  # None in the single-user setup


# Spending ceiling for one expense category
@dataclass(frozen=True)
class BudgetLimit:
    category_id: str
    limit: float


@dataclass(frozen=True)
class BudgetPlan:
    id: str
    member_id: str
    category_id: str
    type: str
    planned_amount: float
    month: str  # "2026-02"


@dataclass(frozen=True)
class FamilyMember:
    id: str
    name: str
    role: str    # "parent" or "child"
    avatar: str
    color: str


@dataclass(frozen=True)
class Notification:
    id: str
    kind: str
    severity: str
    title: str
    message: str
    icon: str


@dataclass(frozen=True)
class FinanceState:
    transactions: tuple[Transaction, ...] = ()
    categories: tuple[Category, ...] = ()
    limits: tuple[BudgetLimit, ...] = ()
    plans: tuple[BudgetPlan, ...] = ()
    members: tuple[FamilyMember, ...] = ()
