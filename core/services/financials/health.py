from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from core.models import AlertSeverity, BudgetStatus, CostCodeBudget, FinancialHealth
from core.services.financials.models import FinancialAlert


def budget_utilization(total_actual: float, total_budget: float) -> float:
    return (total_actual / total_budget) * 100 if total_budget > 0 else 0.0


def determine_financial_health(total_actual: float, total_budget: float, margin: float) -> FinancialHealth:
    """Classify by utilization and projected margin; the first matching band wins."""
    utilization = budget_utilization(total_actual, total_budget)
    if utilization > 100 or margin < 0:
        return FinancialHealth.CRITICAL
    if utilization > 95 or margin < 5:
        return FinancialHealth.WARNING
    if utilization > 85 or margin < 10:
        return FinancialHealth.GOOD
    return FinancialHealth.EXCELLENT


def build_financial_alerts(
    budgets: Iterable[CostCodeBudget],
    cost_code_names: Mapping[str, str],
    total_actual: float,
    total_budget: float,
    margin: float,
    now: datetime,
) -> list[FinancialAlert]:
    alerts: list[FinancialAlert] = []
    stamp = int(now.timestamp() * 1000)

    if total_actual > total_budget:
        overrun = total_actual - total_budget
        # A project with spend but no budget counts as fully overrun.
        overrun_pct = (overrun / total_budget) * 100 if total_budget > 0 else 100.0
        alerts.append(FinancialAlert(
            id=f"alert-{stamp}-1",
            alert_type="budget_exceeded",
            severity=AlertSeverity.CRITICAL,
            title="Budget Exceeded",
            message=f"Project has exceeded total budget by {overrun_pct:.1f}%",
            amount=overrun,
            created_at=now,
        ))

    utilization = budget_utilization(total_actual, total_budget)
    if 90 < utilization <= 100:
        alerts.append(FinancialAlert(
            id=f"alert-{stamp}-2",
            alert_type="high_utilization",
            severity=AlertSeverity.HIGH,
            title="High Budget Utilization",
            message=f"Project has used {utilization:.1f}% of budget",
            created_at=now,
        ))

    if margin < 0:
        alerts.append(FinancialAlert(
            id=f"alert-{stamp}-3",
            alert_type="negative_margin",
            severity=AlertSeverity.CRITICAL,
            title="Negative Profit Margin",
            message=f"Project margin is {margin:.1f}%",
            created_at=now,
        ))

    for budget in budgets:
        if budget.status != BudgetStatus.OVER_BUDGET:
            continue
        name = cost_code_names.get(budget.cost_code_id, budget.cost_code_id)
        alerts.append(FinancialAlert(
            id=f"alert-{stamp}-cc-{budget.id}",
            alert_type="budget_exceeded",
            severity=AlertSeverity.HIGH,
            title="Cost Code Over Budget",
            message=f"{name} has exceeded budget",
            amount=budget.actual_amount - budget.budgeted_amount,
            affected_cost_code=budget.cost_code_id,
            created_at=now,
        ))

    return alerts


__all__ = ["budget_utilization", "determine_financial_health", "build_financial_alerts"]
