from .forecast import build_forecast
from .health import build_financial_alerts, determine_financial_health
from .models import (
    ChartDataPoint,
    FinancialAlert,
    FinancialForecast,
    ForecastResult,
    JobCostingReport,
    ProjectFinancials,
)
from .service import ProjectFinancialsService

__all__ = [
    "ProjectFinancialsService",
    "ProjectFinancials",
    "FinancialForecast",
    "ForecastResult",
    "FinancialAlert",
    "JobCostingReport",
    "ChartDataPoint",
    "build_forecast",
    "build_financial_alerts",
    "determine_financial_health",
]
