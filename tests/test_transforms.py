import json

from fintrack import config
from fintrack.domain import BudgetLimit, BudgetPlan, Category, FamilyMember, Transaction
from fintrack.transforms import (
    add_category,
    add_member,
    add_plan,
    add_transaction,
    delete_plan,
    delete_transaction,
    load_seed,
    new_id,
    upsert_limit,
)


def test_add_transaction_puts_newest_first():
    t1 = Transaction("t1", 100, "income", "1", "Salary", "2026-02-01")
    t2 = Transaction("t2", 50, "expense", "4", "Groceries", "2026-02-02")

    transactions = (t1,)
    new_transactions = add_transaction(transactions, t2)

    assert new_transactions == (t2, t1)
    assert transactions == (t1,)


def test_delete_transaction():
    t1 = Transaction("t1", 100, "income", "1", "Salary", "2026-02-01")
    t2 = Transaction("t2", 50, "expense", "4", "Groceries", "2026-02-02")

    assert delete_transaction((t1, t2), "t1") == (t2,)
    assert delete_transaction((t1, t2), "missing") == (t1, t2)


def test_add_category_appends():
    c1 = Category("1", "Salary", "Briefcase", "#10b981", "income")
    c2 = Category("2", "Books", "Book", "#3b82f6", "expense")
    assert add_category((c1,), c2) == (c1, c2)


def test_upsert_limit_updates_in_place():
    limits = (BudgetLimit("4", 8000), BudgetLimit("5", 5000))
    new_limits = upsert_limit(limits, "4", 9000)

    assert new_limits == (BudgetLimit("4", 9000), BudgetLimit("5", 5000))
    assert limits[0].limit == 8000


def test_upsert_limit_inserts_new_category():
    limits = (BudgetLimit("4", 8000),)
    assert upsert_limit(limits, "6", 3000) == (BudgetLimit("4", 8000), BudgetLimit("6", 3000))
    assert upsert_limit((), "6", 3000) == (BudgetLimit("6", 3000),)


def test_add_and_delete_plan():
    p1 = BudgetPlan("p1", "m1", "4", "expense", 1000, "2026-02")
    p2 = BudgetPlan("p2", "m1", "1", "income", 5000, "2026-02")

    plans = add_plan((p1,), p2)
    assert plans == (p1, p2)
    assert delete_plan(plans, "p1") == (p2,)


def test_add_member():
    m1 = FamilyMember("m1", "Alex", "parent", "👨", "#7c3aed")
    m2 = FamilyMember("m2", "Sasha", "child", "🧒", "#06b6d4")
    assert add_member((m1,), m2) == (m1, m2)


def test_new_id_is_a_timestamp():
    tid = new_id()
    assert tid.isdigit()
    assert len(tid) >= 13


def test_load_seed():
    state = load_seed(config.seed_path())

    assert len(state.categories) >= 9
    assert len(state.transactions) >= 10
    assert len(state.limits) >= 4
    assert len(state.members) >= 2
    assert len(state.plans) >= 3
    assert all(t.amount > 0 for t in state.transactions)
    assert len({c.id for c in state.categories}) == len(state.categories)


def test_load_seed_without_family_sections(tmp_path):
    path = tmp_path / "single.json"
    path.write_text(json.dumps({
        "categories": [{"id": "1", "name": "Salary", "icon": "Briefcase", "color": "#10b981", "type": "income"}],
        "transactions": [{"id": "1", "amount": 100, "type": "income", "category_id": "1",
                          "description": "Pay", "date": "2026-02-01"}],
        "limits": [],
    }), encoding="utf-8")

    state = load_seed(str(path))
    assert state.members == ()
    assert state.plans == ()
    assert state.transactions[0].member_id is None
