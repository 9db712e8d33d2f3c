from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

from fintrack import config
from fintrack.domain import (
    CHILD,
    EXPENSE,
    PARENT,
    TX_TYPES,
    BudgetLimit,
    BudgetPlan,
    Category,
    FamilyMember,
    Transaction,
)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Right carries a value, Left carries an error dict."""

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


# --- lookups


def safe_category(cats: tuple[Category, ...], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def placeholder_category(cat_id: str, cat_type: str = EXPENSE) -> Category:
    return Category(
        id=cat_id,
        name=config.PLACEHOLDER_NAME,
        icon=config.PLACEHOLDER_ICON,
        color=config.PLACEHOLDER_COLOR,
        type=cat_type,
    )


def resolve_category(cats: tuple[Category, ...], cat_id: str, cat_type: str = EXPENSE) -> Category:
    """Category by id, or a neutral placeholder when the id dangles."""
    return safe_category(cats, cat_id).get_or_else(placeholder_category(cat_id, cat_type))


def safe_member(members: tuple[FamilyMember, ...], member_id: Optional[str]) -> Maybe[FamilyMember]:
    for m in members:
        if m.id == member_id:
            return Some(m)
    return Nothing()


# --- form boundary


def _error(code: str, message: str, **extra: Any) -> Left:
    return Left({"error": code, "message": message, **extra})


def parse_amount(raw: Any) -> Either[dict, float]:
    """Positive number from a form field ("1500", "12.5", 12.5)."""
    if raw is None or str(raw).strip() == "":
        return _error("amount_missing", "Amount is required")
    try:
        value = float(str(raw).replace(",", ".").replace(" ", ""))
    except ValueError:
        return _error("amount_invalid", f"Amount {raw!r} is not a number", amount=raw)
    if not value > 0:
        return _error("amount_not_positive", "Amount must be greater than zero", amount=value)
    return Right(value)


def _check_type(tx_type: str) -> Either[dict, str]:
    if tx_type not in TX_TYPES:
        return _error("type_invalid", f"Type must be one of {TX_TYPES}", type=tx_type)
    return Right(tx_type)


def validate_transaction_form(
    tx_id: str,
    raw_amount: Any,
    tx_type: str,
    category_id: str,
    description: str,
    date: str,
    member_id: Optional[str] = None,
) -> Either[dict, Transaction]:
    if not category_id:
        return _error("category_missing", "Choose a category")
    if not description or not description.strip():
        return _error("description_missing", "Description is required")
    return _check_type(tx_type).bind(lambda _: parse_amount(raw_amount)).map(
        lambda amount: Transaction(
            id=tx_id,
            amount=amount,
            type=tx_type,
            category_id=category_id,
            description=description.strip(),
            date=date,
            member_id=member_id,
        )
    )


def validate_limit_input(category_id: str, raw_limit: Any) -> Either[dict, BudgetLimit]:
    return parse_amount(raw_limit).map(lambda value: BudgetLimit(category_id=category_id, limit=value))


def validate_category_form(
    cat_id: str, name: str, icon: str, color: str, cat_type: str
) -> Either[dict, Category]:
    if not name or not name.strip():
        return _error("name_missing", "Category name is required")
    return _check_type(cat_type).map(
        lambda t: Category(id=cat_id, name=name.strip(), icon=icon, color=color, type=t)
    )


def validate_plan_form(
    plan_id: str,
    member_id: str,
    category_id: str,
    plan_type: str,
    raw_amount: Any,
    month: str,
) -> Either[dict, BudgetPlan]:
    if not member_id:
        return _error("member_missing", "Choose a family member")
    if not category_id:
        return _error("category_missing", "Choose a category")
    return _check_type(plan_type).bind(lambda _: parse_amount(raw_amount)).map(
        lambda amount: BudgetPlan(
            id=plan_id,
            member_id=member_id,
            category_id=category_id,
            type=plan_type,
            planned_amount=amount,
            month=month,
        )
    )


def validate_member_form(
    member_id: str, name: str, role: str, members: tuple[FamilyMember, ...]
) -> Either[dict, FamilyMember]:
    if not name or not name.strip():
        return _error("name_missing", "Member name is required")
    if role not in (PARENT, CHILD):
        return _error("role_invalid", f"Role must be {PARENT!r} or {CHILD!r}", role=role)
    return Right(
        FamilyMember(
            id=member_id,
            name=name.strip(),
            role=role,
            avatar=config.AVATARS[role],
            color=config.MEMBER_COLORS[len(members) % len(config.MEMBER_COLORS)],
        )
    )

