from fintrack import config
from fintrack.domain import BudgetLimit, BudgetPlan, Category, FinanceState, Transaction
from fintrack.frames import limits_frame
from fintrack.services import (
    BudgetService,
    ReportService,
    default_budget_service,
    default_report_service,
    dangling_references,
    duplicate_plans,
    limits_on_income,
)
from fintrack.transforms import load_seed

CATS = (
    Category("1", "Salary", "Briefcase", "#10b981", "income"),
    Category("4", "Groceries", "ShoppingCart", "#f97316", "expense"),
)


def test_monthly_report_on_seed():
    state = load_seed(config.seed_path())
    rpt = default_budget_service().monthly_report("2026-02", state)

    assert rpt["month"] == "2026-02"
    assert [s["calculator"] for s in rpt["steps"]] == ["totals", "breakdowns", "limits", "family", "notifications"]
    assert all(v["messages"] == [] for v in rpt["validation"])

    result = rpt["result"]
    assert result["income"] == 105000
    assert result["expense"] == 29500
    assert result["balance"] == 75500
    assert result["savings_rate"] == 72
    assert result["top_expenses"][0].category.name == "Groceries"
    assert len(result["top_expenses"]) == 5
    assert [n.id for n in result["notifications"]] == ["over-4", "warn-6", "savings-great"]
    assert result["notification_counts"] == {"danger": 1, "warning": 1, "success": 1}
    assert len(result["members"]) == len(state.members)


def test_monthly_report_limit_rows_on_seed():
    state = load_seed(config.seed_path())
    rows = default_budget_service().monthly_report("2026-02", state)["result"]["limits"]

    assert [p.category_id for p in rows] == ["4", "5", "6", "9"]
    assert [p.spent for p in rows] == [10400, 3500, 2800, 1200]
    assert rows[0].percentage == 100
    assert rows[0].is_over
    assert round(rows[2].percentage, 1) == 93.3
    assert not any(p.is_over for p in rows[1:])

    df = limits_frame(rows, state.categories)
    assert list(df["remaining"]) == [-2400, 1500, 200, 800]
    assert list(df["over"]) == [True, False, False, False]


def test_validators_report_dangling_and_duplicates():
    state = FinanceState(
        transactions=(Transaction("t1", 10, "expense", "ghost", "x", "2026-02-01"),),
        categories=CATS,
        limits=(BudgetLimit("1", 100), BudgetLimit("gone", 5)),
        plans=(
            BudgetPlan("p1", "m1", "4", "expense", 100, "2026-02"),
            BudgetPlan("p2", "m1", "4", "expense", 200, "2026-02"),
            BudgetPlan("p3", "m1", "4", "expense", 200, "2026-03"),
        ),
    )
    dangling = dangling_references("2026-02", state)
    assert len(dangling) == 2
    assert "ghost" in dangling[0]
    assert "gone" in dangling[1]
    assert limits_on_income("2026-02", state) == ["limit set on income category 1"]
    assert len(duplicate_plans("2026-02", state)) == 1
    assert duplicate_plans("2026-03", state) == []


def test_validator_error_is_captured():
    def bad_validator(month, state):
        raise RuntimeError('oops')

    def c_dummy(month, state, acc):
        return {'x': 1}

    svc = BudgetService(validators=[bad_validator], calculators=[c_dummy])
    rpt = svc.monthly_report('2026-02', FinanceState())
    assert 'validator_error' in rpt['validation'][0]['messages'][0]
    assert rpt['result']['x'] == 1


def test_calculators_see_earlier_results():
    def first(month, state, acc):
        return {"a": 2}

    def second(month, state, acc):
        return {"b": acc["a"] * 10}

    rpt = BudgetService(validators=[], calculators=[first, second]).monthly_report("2026-02", FinanceState())
    assert rpt["result"] == {"a": 2, "b": 20}
    assert rpt["steps"][1]["output"] == {"b": 20}


def test_category_report():
    state = FinanceState(
        transactions=(
            Transaction("t1", 300, "expense", "4", "a", "2026-02-01"),
            Transaction("t2", 500, "expense", "4", "b", "2026-02-09"),
            Transaction("t3", 200, "expense", "9", "c", "2026-02-03"),
        ),
        categories=CATS,
        limits=(BudgetLimit("4", 1000),),
    )
    rpt = default_report_service().category_report("4", state)
    result = rpt["result"]

    assert rpt["category"] == "4"
    assert result["info"].name == "Groceries"
    assert result["amount"] == 800
    assert result["share"] == 80
    assert result["limit"] == 1000
    assert result["remaining"] == 200
    assert result["limit_pct"] == 80
    assert not result["over"]
    assert [t.id for t in result["transactions"]] == ["t2", "t1"]


def test_category_report_for_missing_category():
    state = FinanceState(transactions=(Transaction("t1", 50, "expense", "ghost", "a", "2026-02-01"),))
    result = default_report_service().category_report("ghost", state)["result"]
    assert result["info"].name == config.PLACEHOLDER_NAME
    assert result["amount"] == 50
    assert result["limit"] == 0
    assert result["limit_pct"] is None


def test_report_service_runs_aggregators_in_order():
    def agg_count(cat_id, state, acc):
        return {'count': sum(1 for t in state.transactions if t.category_id == cat_id)}

    state = FinanceState(transactions=(
        Transaction("t1", 1, "expense", "4", "a", "2026-02-01"),
        Transaction("t2", 1, "expense", "4", "b", "2026-02-01"),
    ))
    rpt = ReportService(aggregators=[agg_count]).category_report('4', state)
    assert rpt['steps'][0]['output']['count'] == 2
    assert rpt['result']['count'] == 2
