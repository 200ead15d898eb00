from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Mapping, Sequence

from core.models import CostCodeBudget, Expense, ExpenseStatus, Subcontract, SubcontractStatus
from core.services.financials.health import build_financial_alerts, determine_financial_health
from core.services.financials.models import (
    CashFlowSummary,
    ExpenseFinancialSummary,
    ProjectFinancials,
    RetentionSummary,
    SubcontractFinancialSummary,
)


_ACTUAL_STATUSES = (ExpenseStatus.APPROVED, ExpenseStatus.PAID)


def _expense_summary(expenses: Sequence[Expense]) -> ExpenseFinancialSummary:
    by_status: dict[str, float] = {}
    by_cost_code: dict[str, float] = {}
    by_supplier: dict[str, float] = {}
    pending = approved = paid = 0.0
    for exp in expenses:
        by_status[exp.status.value] = by_status.get(exp.status.value, 0.0) + exp.total_amount
        by_cost_code[exp.cost_code_id] = by_cost_code.get(exp.cost_code_id, 0.0) + exp.total_amount
        by_supplier[exp.supplier_id] = by_supplier.get(exp.supplier_id, 0.0) + exp.total_amount
        if exp.status == ExpenseStatus.PENDING_APPROVAL:
            pending += exp.total_amount
        elif exp.status == ExpenseStatus.APPROVED:
            approved += exp.total_amount
        elif exp.status == ExpenseStatus.PAID:
            paid += exp.total_amount
    return ExpenseFinancialSummary(
        by_status=by_status,
        by_cost_code=by_cost_code,
        by_supplier=by_supplier,
        pending=pending,
        approved=approved,
        paid=paid,
    )


def compute_project_financials(
    project_id: str,
    budgets: Sequence[CostCodeBudget],
    subcontracts: Sequence[Subcontract],
    expenses: Sequence[Expense],
    cost_code_names: Mapping[str, str],
    now: datetime,
    project_name: str = "",
) -> ProjectFinancials:
    """Aggregate budgets, subcontracts and expenses into one snapshot.

    Committed cost counts active subcontracts only; actual cost counts
    approved and paid expenses only.
    """
    active = [sc for sc in subcontracts if sc.status == SubcontractStatus.ACTIVE]

    total_budget = sum(b.budgeted_amount for b in budgets)
    total_committed = sum(sc.total_amount for sc in active)
    total_actual = sum(exp.total_amount for exp in expenses if exp.status in _ACTUAL_STATUSES)

    budget_by_category = {b.cost_code_id: b.budgeted_amount for b in budgets}
    committed_by_category = {b.cost_code_id: b.committed_amount for b in budgets}
    actual_by_category = {b.cost_code_id: b.actual_amount for b in budgets}

    subcontract_details = [
        SubcontractFinancialSummary(
            subcontract_id=sc.id,
            contract_number=sc.contract_number,
            subcontractor_name=sc.subcontractor_name,
            total_amount=sc.total_amount,
            certified=sc.total_certified,
            paid=sc.total_paid,
            retained=sc.total_retained,
            remaining=sc.remaining_balance,
            cost_codes=list(sc.cost_codes),
            status=sc.status,
        )
        for sc in subcontracts
    ]

    retained = [sc for sc in subcontracts if sc.total_retained > 0]
    retention_details = [
        RetentionSummary(
            subcontract_id=sc.id,
            subcontractor_name=sc.subcontractor_name,
            total_retained=sc.total_retained,
            released=0.0,
            pending=sc.total_retained,
            retention_percentage=sc.retention_percentage,
        )
        for sc in retained
    ]
    retained_by_subcontractor: dict[str, float] = {}
    for sc in retained:
        retained_by_subcontractor[sc.subcontractor_id] = (
            retained_by_subcontractor.get(sc.subcontractor_id, 0.0) + sc.total_retained
        )

    budget_variance = total_budget - total_actual
    budget_variance_percentage = (budget_variance / total_budget) * 100 if total_budget > 0 else 0.0
    committed_variance = total_budget - total_committed
    projected_profit = total_budget - (total_committed + total_actual)
    projected_margin = (projected_profit / total_budget) * 100 if total_budget > 0 else 0.0
    current_margin = ((total_budget - total_actual) / total_budget) * 100 if total_budget > 0 else 0.0

    percentage_complete = (total_actual / total_budget) * 100 if total_budget > 0 else 0.0
    earned_value = total_budget * (percentage_complete / 100)
    estimated_final_cost = total_actual + total_committed
    cost_to_complete = estimated_final_cost - total_actual
    estimate_at_completion = total_actual + cost_to_complete

    outflows = sum(exp.total_amount for exp in expenses if exp.status == ExpenseStatus.PAID)
    pending_outflows = sum(exp.total_amount for exp in expenses if exp.status == ExpenseStatus.APPROVED)
    # client billing is not tracked, so inflows stay at zero
    cash_flow = CashFlowSummary(
        inflows=0.0,
        outflows=outflows,
        net_cash_flow=-outflows,
        pending_inflows=0.0,
        pending_outflows=pending_outflows,
        projected_cash_flow=-(outflows + pending_outflows),
    )

    return ProjectFinancials(
        project_id=project_id,
        project_name=project_name,
        total_budget=total_budget,
        budget_by_category=budget_by_category,
        budget_by_cost_code=[replace(budget) for budget in budgets],
        total_committed=total_committed,
        committed_by_category=committed_by_category,
        active_subcontracts=len(active),
        subcontract_details=subcontract_details,
        total_actual=total_actual,
        actual_by_category=actual_by_category,
        total_expenses=sum(exp.total_amount for exp in expenses),
        total_payments=sum(sc.total_paid for sc in subcontracts),
        expense_details=_expense_summary(expenses),
        total_retained=sum(sc.total_retained for sc in subcontracts),
        retained_by_subcontractor=retained_by_subcontractor,
        retention_details=retention_details,
        budget_variance=budget_variance,
        budget_variance_percentage=budget_variance_percentage,
        committed_variance=committed_variance,
        projected_profit=projected_profit,
        projected_margin=projected_margin,
        current_margin=current_margin,
        financial_health=determine_financial_health(total_actual, total_budget, projected_margin),
        alerts=build_financial_alerts(
            budgets, cost_code_names, total_actual, total_budget, projected_margin, now
        ),
        percentage_complete=percentage_complete,
        earned_value=earned_value,
        estimated_final_cost=estimated_final_cost,
        cost_to_complete=cost_to_complete,
        estimate_at_completion=estimate_at_completion,
        variance_at_completion=total_budget - estimate_at_completion,
        cash_flow=cash_flow,
        calculated_at=now,
    )


__all__ = ["compute_project_financials"]
