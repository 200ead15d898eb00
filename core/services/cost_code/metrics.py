from __future__ import annotations

from datetime import datetime, timezone

from core.models import BudgetStatus, CostCodeBudget


ON_BUDGET_RATIO = 0.85
CRITICAL_RATIO = 0.95


def budget_status(actual_amount: float, budgeted_amount: float) -> BudgetStatus:
    if actual_amount > budgeted_amount:
        return BudgetStatus.OVER_BUDGET
    if actual_amount >= budgeted_amount * CRITICAL_RATIO:
        return BudgetStatus.CRITICAL
    if actual_amount >= budgeted_amount * ON_BUDGET_RATIO:
        return BudgetStatus.ON_BUDGET
    return BudgetStatus.UNDER_BUDGET


def recalculate_budget_metrics(budget: CostCodeBudget) -> CostCodeBudget:
    """Refresh variance, percentages and status in place."""
    budget.variance = budget.budgeted_amount - budget.actual_amount
    if budget.budgeted_amount > 0:
        budget.variance_percentage = (budget.variance / budget.budgeted_amount) * 100
        budget.percentage_complete = (budget.actual_amount / budget.budgeted_amount) * 100
    else:
        budget.variance_percentage = 0.0
        budget.percentage_complete = 0.0
    budget.status = budget_status(budget.actual_amount, budget.budgeted_amount)
    now = datetime.now(timezone.utc)
    budget.updated_at = now
    budget.last_calculated_at = now
    return budget


__all__ = ["ON_BUDGET_RATIO", "CRITICAL_RATIO", "budget_status", "recalculate_budget_metrics"]
