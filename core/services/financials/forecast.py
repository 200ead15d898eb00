from __future__ import annotations

from datetime import datetime

from core.services.financials.models import FinancialForecast, ForecastResult, ProjectFinancials


FORECAST_CONFIDENCE = 0.75
FORECAST_ASSUMPTIONS = (
    "All committed costs will be realized",
    "No additional subcontracts will be added",
    "Current cost trends will continue",
)


def _margin(budget: float, final_cost: float) -> float:
    return ((budget - final_cost) / budget) * 100 if budget > 0 else 0.0


def forecast_by_trend(financials: ProjectFinancials) -> ForecastResult:
    return ForecastResult(
        method="Trend Analysis",
        estimated_final_cost=financials.estimated_final_cost,
        cost_to_complete=financials.cost_to_complete,
        projected_variance=financials.variance_at_completion,
        projected_margin=financials.projected_margin,
    )


def forecast_by_evm(financials: ProjectFinancials) -> ForecastResult:
    cpi = financials.total_actual / financials.earned_value if financials.earned_value > 0 else 1.0
    estimate = financials.total_budget / cpi
    return ForecastResult(
        method="Earned Value Management",
        estimated_final_cost=estimate,
        cost_to_complete=estimate - financials.total_actual,
        projected_variance=financials.total_budget - estimate,
        projected_margin=_margin(financials.total_budget, estimate),
    )


def forecast_by_commitments(financials: ProjectFinancials) -> ForecastResult:
    final_cost = financials.total_actual + financials.total_committed
    return ForecastResult(
        method="Committed Costs",
        estimated_final_cost=final_cost,
        cost_to_complete=financials.total_committed,
        projected_variance=financials.total_budget - final_cost,
        projected_margin=_margin(financials.total_budget, final_cost),
    )


def build_forecast(financials: ProjectFinancials, now: datetime) -> FinancialForecast:
    trend = forecast_by_trend(financials)
    evm = forecast_by_evm(financials)
    commitments = forecast_by_commitments(financials)
    return FinancialForecast(
        project_id=financials.project_id,
        current_budget=financials.total_budget,
        current_actual=financials.total_actual,
        current_committed=financials.total_committed,
        percentage_complete=financials.percentage_complete,
        forecast_by_trend=trend,
        forecast_by_evm=evm,
        forecast_by_commitments=commitments,
        # commitments are the most conservative basis
        recommended_forecast=commitments,
        best_case=trend,
        worst_case=evm,
        most_likely=commitments,
        confidence_level=FORECAST_CONFIDENCE,
        forecast_date=now,
        assumptions=list(FORECAST_ASSUMPTIONS),
    )


__all__ = [
    "FORECAST_CONFIDENCE",
    "FORECAST_ASSUMPTIONS",
    "forecast_by_trend",
    "forecast_by_evm",
    "forecast_by_commitments",
    "build_forecast",
]
