from __future__ import annotations

import pytest

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.models import BudgetStatus, CostType
from core.services.cost_code import DEFAULT_COST_CODES, budget_status


@pytest.mark.parametrize(
    "actual, expected",
    [
        (84.9, BudgetStatus.UNDER_BUDGET),
        (85.0, BudgetStatus.ON_BUDGET),
        (94.9, BudgetStatus.ON_BUDGET),
        (95.0, BudgetStatus.CRITICAL),
        (100.0, BudgetStatus.CRITICAL),
        (100.1, BudgetStatus.OVER_BUDGET),
    ],
)
def test_budget_status_thresholds(actual, expected):
    assert budget_status(actual, 100.0) == expected


def test_catalog_is_seeded_once(services):
    ccs = services["cost_code_service"]

    assert len(ccs.list_cost_codes()) == len(DEFAULT_COST_CODES)
    assert ccs.initialize_catalog() == 0
    assert len(ccs.list_cost_codes()) == len(DEFAULT_COST_CODES)


def test_create_cost_code_rejects_duplicate_code(services):
    ccs = services["cost_code_service"]

    created = ccs.create_cost_code(
        "08.01.01",
        "Vidrios",
        "Instalación de vidrios",
        "08 - Vidrios",
        "08.01 - Ventanas",
        cost_type=CostType.MATERIAL,
        unit="m²",
    )
    assert ccs.get_cost_code_by_code("08.01.01").id == created.id

    with pytest.raises(ValidationError) as exc:
        ccs.create_cost_code("08.01.01", "Otra", "", "08 - Vidrios", "08.01 - Ventanas")
    assert exc.value.code == "DUPLICATE_CODE"

    with pytest.raises(ValidationError) as exc_blank:
        ccs.create_cost_code("   ", "Sin código", "", "08 - Vidrios", "08.01 - Ventanas")
    assert exc_blank.value.code == "REQUIRED_FIELD"


def test_budget_actuals_drive_metrics_and_status(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("03.01.01")

    budget = ccs.create_budget("proj-1", cc.id, 100, 500)
    assert budget.budgeted_amount == 50000.0
    assert budget.status == BudgetStatus.UNDER_BUDGET

    updated = ccs.update_budget_actuals("proj-1", cc.id, 45000.0, 90)
    assert updated.actual_amount == 45000.0
    assert updated.actual_quantity == 90
    assert updated.variance == 5000.0
    assert updated.variance_percentage == pytest.approx(10.0)
    assert updated.percentage_complete == pytest.approx(90.0)
    assert updated.status == BudgetStatus.ON_BUDGET

    over = ccs.update_budget_actuals("proj-1", cc.id, 6000.0)
    assert over.status == BudgetStatus.OVER_BUDGET
    assert over.variance == -1000.0

    stored = ccs.get_budget_for("proj-1", cc.id)
    assert stored.actual_amount == 51000.0
    assert stored.status == BudgetStatus.OVER_BUDGET


def test_budget_updates_without_budget_are_soft_misses(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("07.02.01")

    assert ccs.update_budget_actuals("no-budget-project", cc.id, 100.0) is None
    assert ccs.update_budget_committed("no-budget-project", cc.id, 100.0) is None


def test_budget_validation_rules(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("02.01.01")

    with pytest.raises(NotFoundError) as exc_missing:
        ccs.create_budget("proj-1", "missing-cost-code", 1, 1)
    assert exc_missing.value.code == "COST_CODE_NOT_FOUND"

    with pytest.raises(ValidationError) as exc_negative:
        ccs.create_budget("proj-1", cc.id, -1, 10)
    assert exc_negative.value.code == "INVALID_AMOUNT"

    ccs.create_budget("proj-1", cc.id, 10, 10)
    with pytest.raises(BusinessRuleError) as exc_dup:
        ccs.create_budget("proj-1", cc.id, 5, 5)
    assert exc_dup.value.code == "DUPLICATE_BUDGET"


def test_update_budget_recomputes_amount(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("04.01.01")
    budget = ccs.create_budget("proj-1", cc.id, 10, 100)
    ccs.update_budget_actuals("proj-1", cc.id, 900.0)

    updated = ccs.update_budget(budget.id, budgeted_quantity=20)
    assert updated.budgeted_amount == 2000.0
    assert updated.percentage_complete == pytest.approx(45.0)
    assert updated.status == BudgetStatus.UNDER_BUDGET

    with pytest.raises(NotFoundError) as exc:
        ccs.update_budget("missing", budgeted_quantity=1)
    assert exc.value.code == "BUDGET_NOT_FOUND"


def test_budget_with_actuals_cannot_be_deleted(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("07.01.01")
    spent = ccs.create_budget("proj-1", cc.id, 10, 10)
    ccs.update_budget_actuals("proj-1", cc.id, 1.0)

    with pytest.raises(BusinessRuleError) as exc:
        ccs.delete_budget(spent.id)
    assert exc.value.code == "NOT_DELETABLE"

    other = ccs.get_cost_code_by_code("07.03.01")
    unused = ccs.create_budget("proj-1", other.id, 1, 1)
    ccs.delete_budget(unused.id)
    assert ccs.get_budget_for("proj-1", other.id) is None


def test_cost_code_in_use_cannot_be_deleted(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("01.02.01")
    ccs.create_budget("proj-1", cc.id, 1, 1)

    with pytest.raises(BusinessRuleError) as exc:
        ccs.delete_cost_code(cc.id)
    assert exc.value.code == "NOT_DELETABLE"


def test_suggest_cost_codes_ranks_name_matches_first(services):
    ccs = services["cost_code_service"]

    suggestions = ccs.suggest_cost_codes("Factura por excavación de zanjas", limit=3)
    assert suggestions
    assert suggestions[0].code == "01.01.01"
    assert len(suggestions) <= 3
    assert ccs.suggest_cost_codes("zzz qqq") == []


def test_inactive_codes_leave_hierarchy_and_suggestions(services):
    ccs = services["cost_code_service"]
    paint = ccs.get_cost_code_by_code("07.02.01")
    ccs.update_cost_code(paint.id, is_active=False)

    suggestions = ccs.suggest_cost_codes("pintura de fachada")
    assert all(cc.id != paint.id for cc in suggestions)

    hierarchy = ccs.get_cost_code_hierarchy()
    codes = {
        sub.code
        for division in hierarchy.divisions
        for category in division.categories
        for sub in category.subcategories
    }
    assert "07.02.01" not in codes
    assert "07.01.01" in codes

    stats = ccs.get_cost_code_stats()
    assert stats.total == len(DEFAULT_COST_CODES)
    assert stats.inactive == 1
    assert stats.by_type[CostType.SUBCONTRACT.value] == 4


def test_update_cost_code_rejects_unknown_fields(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("06.02.01")

    with pytest.raises(ValidationError) as exc:
        ccs.update_cost_code(cc.id, colour="red")
    assert exc.value.code == "INVALID_FIELD"


def test_query_cost_codes_filters_and_builds_hierarchy(services):
    ccs = services["cost_code_service"]

    result = ccs.query_cost_codes(division="03 - Estructura")
    assert result.total == 3
    assert [d.code for d in result.hierarchy.divisions] == ["03 - Estructura"]

    search = ccs.query_cost_codes(search="desagüe")
    assert [cc.code for cc in search.data] == ["06.02.01"]


def test_cost_code_summary_combines_budget_and_commitments(services):
    ccs = services["cost_code_service"]
    cc = ccs.get_cost_code_by_code("03.01.02")
    ccs.create_budget("proj-1", cc.id, 10, 1000)
    ccs.update_budget_actuals("proj-1", cc.id, 2500.0)
    ccs.update_budget_committed("proj-1", cc.id, 4000.0)

    summary = ccs.get_cost_code_summary("proj-1", cc.id)
    assert summary.utilization_percentage == pytest.approx(25.0)
    assert summary.remaining_budget == 7500.0
    assert summary.projected_final_cost == 6500.0
    assert ccs.get_cost_code_summary("other", cc.id) is None
