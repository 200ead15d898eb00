from __future__ import annotations

import json
from datetime import date

import pytest
from openpyxl import load_workbook

from core.events.domain_events import domain_events
from core.exceptions import ValidationError
from core.models import AlertSeverity, FinancialHealth
from core.services.financials import determine_financial_health


def _approved_expense(services, cost_code_id, amount, invoice_number="F-001"):
    es = services["expense_service"]
    expense = es.create_expense(
        project_id="proj-1",
        cost_code_id=cost_code_id,
        supplier_id="supplier-1",
        amount=amount,
        description="Materials delivered to site",
        invoice_date=date(2025, 4, 1),
        project_name="Tower A",
        supplier_name="Ferreteria Central",
        invoice_number=invoice_number,
    )
    es.submit_for_approval(expense.id)
    return es.approve_expense(expense.id, "mgr-1")


@pytest.fixture
def healthy_project(services, budgeted_project, make_subcontract):
    concrete = budgeted_project["concrete"]
    sc = make_subcontract(total_amount=50000.0, cost_codes=[concrete.id])
    services["subcontract_service"].approve_subcontract(sc.id, "mgr-1")
    _approved_expense(services, concrete.id, 10000.0)
    return budgeted_project


@pytest.mark.parametrize(
    "actual, margin, expected",
    [
        (50.0, 20.0, FinancialHealth.EXCELLENT),
        (90.0, 20.0, FinancialHealth.GOOD),
        (50.0, 8.0, FinancialHealth.GOOD),
        (96.0, 20.0, FinancialHealth.WARNING),
        (50.0, 4.0, FinancialHealth.WARNING),
        (101.0, 20.0, FinancialHealth.CRITICAL),
        (10.0, -1.0, FinancialHealth.CRITICAL),
    ],
)
def test_financial_health_bands(actual, margin, expected):
    assert determine_financial_health(actual, 100.0, margin) == expected


def test_project_financials_aggregate_ledgers(services, healthy_project):
    fs = services["financials_service"]

    fin = fs.calculate_project_financials("proj-1")

    assert fin.project_name == "Tower A"
    assert fin.total_budget == 100000.0
    assert fin.total_committed == 50000.0
    assert fin.active_subcontracts == 1
    assert fin.total_actual == 10000.0
    assert fin.budget_variance == 90000.0
    assert fin.projected_profit == 40000.0
    assert fin.projected_margin == pytest.approx(40.0)
    assert fin.current_margin == pytest.approx(90.0)
    assert fin.percentage_complete == pytest.approx(10.0)
    assert fin.earned_value == pytest.approx(10000.0)
    assert fin.estimated_final_cost == 60000.0
    assert fin.cost_to_complete == 50000.0
    assert fin.variance_at_completion == 40000.0
    assert fin.financial_health == FinancialHealth.EXCELLENT
    assert fin.alerts == []
    assert fin.cash_flow.pending_outflows == 10000.0
    assert fin.cash_flow.inflows == 0.0

    concrete_id = healthy_project["concrete"].id
    assert fin.committed_by_category[concrete_id] == 50000.0
    assert fin.actual_by_category[concrete_id] == 10000.0


def test_draft_expenses_and_draft_subcontracts_do_not_count(services, budgeted_project, make_subcontract):
    concrete = budgeted_project["concrete"]
    make_subcontract(total_amount=20000.0, cost_codes=[concrete.id])
    services["expense_service"].create_expense(
        project_id="proj-1",
        cost_code_id=concrete.id,
        supplier_id="supplier-1",
        amount=500.0,
        description="Draft invoice only",
        invoice_date=date(2025, 4, 1),
    )

    fin = services["financials_service"].calculate_project_financials("proj-1")

    assert fin.total_committed == 0.0
    assert fin.total_actual == 0.0
    assert fin.total_expenses == 500.0


def test_overrun_raises_alerts(services, budgeted_project):
    concrete = budgeted_project["concrete"]
    _approved_expense(services, concrete.id, 110000.0)

    fin = services["financials_service"].calculate_project_financials("proj-1")

    assert fin.financial_health == FinancialHealth.CRITICAL
    by_message = {alert.message: alert for alert in fin.alerts}
    assert by_message["Project has exceeded total budget by 10.0%"].severity == AlertSeverity.CRITICAL
    assert by_message["Project has exceeded total budget by 10.0%"].amount == 10000.0
    assert by_message["Project margin is -10.0%"].alert_type == "negative_margin"
    assert by_message["Columnas has exceeded budget"].severity == AlertSeverity.HIGH


def test_high_utilization_alert(services, budgeted_project):
    _approved_expense(services, budgeted_project["concrete"].id, 46000.0)
    _approved_expense(services, budgeted_project["wiring"].id, 46000.0, invoice_number="F-002")

    fin = services["financials_service"].calculate_project_financials("proj-1")

    assert [a.alert_type for a in fin.alerts] == ["high_utilization"]
    assert fin.alerts[0].message == "Project has used 92.0% of budget"
    assert fin.financial_health == FinancialHealth.GOOD


def test_cached_snapshot_until_refresh(services, healthy_project):
    fs = services["financials_service"]

    first = fs.get_project_financials("proj-1")
    again = fs.get_project_financials("proj-1")
    assert again.calculated_at == first.calculated_at

    _approved_expense(services, healthy_project["wiring"].id, 5000.0, invoice_number="F-002")
    stale = fs.update_project_financials("proj-1")
    assert stale.total_actual == 10000.0

    fresh = fs.refresh_project_financials("proj-1")
    assert fresh.calculated_at > first.calculated_at
    assert fresh.total_actual == 15000.0
    assert fs.update_project_financials("proj-1", recalculate=True).calculated_at > fresh.calculated_at


def test_subscribers_are_notified_until_unsubscribed(services, healthy_project):
    fs = services["financials_service"]
    seen = []
    recalculated = []

    def _on_recalculated(project_id: str) -> None:
        recalculated.append(project_id)

    unsubscribe = fs.subscribe_to_financial_updates("proj-1", seen.append)
    domain_events.financials_recalculated.connect(_on_recalculated)
    try:
        fs.refresh_project_financials("proj-1")
        fs.calculate_project_financials("other-project")
        assert len(seen) == 1
        assert seen[0].project_id == "proj-1"

        unsubscribe()
        fs.refresh_project_financials("proj-1")
        assert len(seen) == 1
    finally:
        domain_events.financials_recalculated.disconnect(_on_recalculated)

    assert recalculated == ["proj-1", "other-project", "proj-1"]


def test_forecast_methods(services, healthy_project):
    forecast = services["financials_service"].forecast_final_cost("proj-1")

    assert forecast.forecast_by_trend.estimated_final_cost == 60000.0
    assert forecast.forecast_by_evm.method == "Earned Value Management"
    assert forecast.forecast_by_evm.estimated_final_cost == pytest.approx(100000.0)
    assert forecast.forecast_by_commitments.estimated_final_cost == 60000.0
    assert forecast.forecast_by_commitments.projected_margin == pytest.approx(40.0)
    assert forecast.recommended_forecast == forecast.forecast_by_commitments
    assert forecast.worst_case == forecast.forecast_by_evm
    assert forecast.confidence_level == 0.75
    assert len(forecast.assumptions) == 3


def test_job_costing_report_and_json_export(services, healthy_project):
    fs = services["financials_service"]

    report = fs.generate_job_costing_report("proj-1")
    assert [p.label for p in report.budget_vs_actual] == ["Budgeted", "Committed", "Actual"]
    assert {item.cost_code for item in report.cost_breakdown} == {"03.01.01", "05.01.01"}
    assert report.subcontracts[0].contract_number == "SC-001"
    assert report.expenses[0].supplier == "Ferreteria Central"

    payload = json.loads(fs.export_financials("proj-1", "json"))
    assert payload["project_id"] == "proj-1"
    assert payload["summary"]["total_budget"] == 100000.0
    assert payload["summary"]["financial_health"] == "excellent"
    assert len(payload["cost_breakdown"]) == 2


def test_excel_export_writes_workbook(services, healthy_project, tmp_path):
    fs = services["financials_service"]
    out = tmp_path / "reports" / "proj-1.xlsx"

    path = fs.export_financials("proj-1", "excel", out)

    assert path == out
    wb = load_workbook(out)
    assert wb.sheetnames[:4] == ["Summary", "Cost Breakdown", "Subcontracts", "Expenses"]
    assert wb["Summary"]["B3"].value == "proj-1"
    assert wb["Cost Breakdown"].max_row == 3


def test_export_rejects_unknown_format_and_missing_path(services):
    fs = services["financials_service"]

    with pytest.raises(ValidationError) as exc_format:
        fs.export_financials("proj-1", "pdf")
    assert exc_format.value.code == "UNSUPPORTED_FORMAT"

    with pytest.raises(ValidationError) as exc_path:
        fs.export_financials("proj-1", "xlsx")
    assert exc_path.value.code == "REQUIRED_FIELD"


def test_callers_cannot_edit_the_cached_snapshot(services, healthy_project):
    fs = services["financials_service"]
    ccs = services["cost_code_service"]
    concrete_id = healthy_project["concrete"].id

    first = fs.get_project_financials("proj-1")
    first.budget_by_cost_code[0].actual_amount = 999999.0
    first.actual_by_category[concrete_id] = 0.0
    first.alerts.append("bogus")

    again = fs.get_project_financials("proj-1")
    assert again.calculated_at == first.calculated_at
    assert again.actual_by_category[concrete_id] == 10000.0
    assert again.alerts == []
    assert {b.actual_amount for b in again.budget_by_cost_code} == {10000.0, 0.0}
    assert ccs.get_budget_for("proj-1", concrete_id).actual_amount == 10000.0
