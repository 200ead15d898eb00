from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from core.models import (
    AlertSeverity,
    CostCodeBudget,
    ExpenseStatus,
    FinancialHealth,
    SubcontractStatus,
)


@dataclass(frozen=True)
class SubcontractFinancialSummary:
    subcontract_id: str
    contract_number: str
    subcontractor_name: str
    total_amount: float
    certified: float
    paid: float
    retained: float
    remaining: float
    cost_codes: list[str]
    status: SubcontractStatus


@dataclass(frozen=True)
class ExpenseFinancialSummary:
    by_status: dict[str, float]
    by_cost_code: dict[str, float]
    by_supplier: dict[str, float]
    pending: float
    approved: float
    paid: float


@dataclass(frozen=True)
class RetentionSummary:
    subcontract_id: str
    subcontractor_name: str
    total_retained: float
    released: float
    pending: float
    retention_percentage: float


@dataclass(frozen=True)
class FinancialAlert:
    id: str
    alert_type: str
    severity: AlertSeverity
    title: str
    message: str
    created_at: datetime
    amount: Optional[float] = None
    affected_cost_code: Optional[str] = None
    acknowledged: bool = False


@dataclass(frozen=True)
class CashFlowSummary:
    inflows: float
    outflows: float
    net_cash_flow: float
    pending_inflows: float
    pending_outflows: float
    projected_cash_flow: float


@dataclass(frozen=True)
class ProjectFinancials:
    """Derived job-costing snapshot of one project; recomputed, never edited."""

    project_id: str
    project_name: str

    total_budget: float
    budget_by_category: dict[str, float]
    budget_by_cost_code: list[CostCodeBudget]

    total_committed: float
    committed_by_category: dict[str, float]
    active_subcontracts: int
    subcontract_details: list[SubcontractFinancialSummary]

    total_actual: float
    actual_by_category: dict[str, float]
    total_expenses: float
    total_payments: float
    expense_details: ExpenseFinancialSummary

    total_retained: float
    retained_by_subcontractor: dict[str, float]
    retention_details: list[RetentionSummary]

    budget_variance: float
    budget_variance_percentage: float
    committed_variance: float
    projected_profit: float
    projected_margin: float
    current_margin: float

    financial_health: FinancialHealth
    alerts: list[FinancialAlert]

    percentage_complete: float
    earned_value: float
    estimated_final_cost: float
    cost_to_complete: float
    estimate_at_completion: float
    variance_at_completion: float

    cash_flow: CashFlowSummary
    calculated_at: datetime
    calculated_by: str = "system"


@dataclass(frozen=True)
class ForecastResult:
    method: str
    estimated_final_cost: float
    cost_to_complete: float
    projected_variance: float
    projected_margin: float


@dataclass(frozen=True)
class FinancialForecast:
    project_id: str
    current_budget: float
    current_actual: float
    current_committed: float
    percentage_complete: float
    forecast_by_trend: ForecastResult
    forecast_by_evm: ForecastResult
    forecast_by_commitments: ForecastResult
    recommended_forecast: ForecastResult
    best_case: ForecastResult
    worst_case: ForecastResult
    most_likely: ForecastResult
    confidence_level: float
    forecast_date: datetime
    assumptions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CostCodeBreakdownItem:
    cost_code: str
    cost_code_name: str
    budgeted: float
    committed: float
    actual: float
    variance: float
    variance_percentage: float
    percentage_complete: float
    status: str  # under_budget | on_budget | over_budget


@dataclass(frozen=True)
class SubcontractReportItem:
    contract_number: str
    subcontractor: str
    description: str
    total_amount: float
    certified: float
    paid: float
    retained: float
    remaining: float
    status: SubcontractStatus
    cost_codes: list[str]


@dataclass(frozen=True)
class ExpenseReportItem:
    date: date
    supplier: str
    description: str
    cost_code: str
    amount: float
    status: ExpenseStatus
    invoice_number: Optional[str] = None


@dataclass(frozen=True)
class ChartDataPoint:
    label: str
    value: float
    color: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class JobCostingReport:
    project_id: str
    project_name: str
    summary: ProjectFinancials
    cost_breakdown: list[CostCodeBreakdownItem]
    subcontracts: list[SubcontractReportItem]
    expenses: list[ExpenseReportItem]
    budget_vs_actual: list[ChartDataPoint]
    cost_by_category: list[ChartDataPoint]
    generated_at: datetime
    generated_by: str = "system"


__all__ = [
    "SubcontractFinancialSummary",
    "ExpenseFinancialSummary",
    "RetentionSummary",
    "FinancialAlert",
    "CashFlowSummary",
    "ProjectFinancials",
    "ForecastResult",
    "FinancialForecast",
    "CostCodeBreakdownItem",
    "SubcontractReportItem",
    "ExpenseReportItem",
    "ChartDataPoint",
    "JobCostingReport",
]
