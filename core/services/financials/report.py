from __future__ import annotations

from datetime import datetime
from typing import Mapping, Sequence

from core.models import BudgetStatus, CostCode, Expense, Subcontract
from core.services.financials.models import (
    ChartDataPoint,
    CostCodeBreakdownItem,
    ExpenseReportItem,
    JobCostingReport,
    ProjectFinancials,
    SubcontractReportItem,
)


BUDGETED_COLOR = "#3b82f6"
COMMITTED_COLOR = "#f59e0b"
ACTUAL_COLOR = "#10b981"


def report_status(status: BudgetStatus) -> str:
    # Reports show three bands; critical folds into on_budget.
    if status == BudgetStatus.OVER_BUDGET:
        return "over_budget"
    if status in (BudgetStatus.ON_BUDGET, BudgetStatus.CRITICAL):
        return "on_budget"
    return "under_budget"


def build_job_costing_report(
    financials: ProjectFinancials,
    subcontracts: Sequence[Subcontract],
    expenses: Sequence[Expense],
    cost_codes: Mapping[str, CostCode],
    now: datetime,
) -> JobCostingReport:
    cost_breakdown = []
    for budget in financials.budget_by_cost_code:
        cc = cost_codes.get(budget.cost_code_id)
        cost_breakdown.append(CostCodeBreakdownItem(
            cost_code=cc.code if cc else budget.cost_code_id,
            cost_code_name=cc.name if cc else budget.cost_code_id,
            budgeted=budget.budgeted_amount,
            committed=budget.committed_amount,
            actual=budget.actual_amount,
            variance=budget.variance,
            variance_percentage=budget.variance_percentage,
            percentage_complete=budget.percentage_complete,
            status=report_status(budget.status),
        ))

    subcontract_items = [
        SubcontractReportItem(
            contract_number=sc.contract_number,
            subcontractor=sc.subcontractor_name,
            description=sc.description,
            total_amount=sc.total_amount,
            certified=sc.total_certified,
            paid=sc.total_paid,
            retained=sc.total_retained,
            remaining=sc.remaining_balance,
            status=sc.status,
            cost_codes=list(sc.cost_codes),
        )
        for sc in subcontracts
    ]

    expense_items = []
    for exp in expenses:
        cc = cost_codes.get(exp.cost_code_id)
        expense_items.append(ExpenseReportItem(
            date=exp.invoice_date,
            supplier=exp.supplier_name,
            description=exp.description,
            cost_code=cc.code if cc else exp.cost_code_id,
            amount=exp.total_amount,
            status=exp.status,
            invoice_number=exp.invoice_number,
        ))

    budget_vs_actual = [
        ChartDataPoint("Budgeted", financials.total_budget, color=BUDGETED_COLOR),
        ChartDataPoint("Committed", financials.total_committed, color=COMMITTED_COLOR),
        ChartDataPoint("Actual", financials.total_actual, color=ACTUAL_COLOR),
    ]
    cost_by_category = []
    for cost_code_id, amount in financials.actual_by_category.items():
        cc = cost_codes.get(cost_code_id)
        cost_by_category.append(ChartDataPoint(
            label=cc.name if cc else cost_code_id,
            value=amount,
            category=cc.division if cc else None,
        ))

    return JobCostingReport(
        project_id=financials.project_id,
        project_name=financials.project_name,
        summary=financials,
        cost_breakdown=cost_breakdown,
        subcontracts=subcontract_items,
        expenses=expense_items,
        budget_vs_actual=budget_vs_actual,
        cost_by_category=cost_by_category,
        generated_at=now,
    )


__all__ = [
    "BUDGETED_COLOR",
    "COMMITTED_COLOR",
    "ACTUAL_COLOR",
    "report_status",
    "build_job_costing_report",
]
