from __future__ import annotations

import logging
from copy import deepcopy
from datetime import datetime, timedelta, timezone
from pathlib import Path
from threading import RLock
from typing import Callable

from core.events.domain_events import domain_events
from core.events.signal import Signal
from core.exceptions import ValidationError
from core.services.cost_code.service import CostCodeService
from core.services.expense.service import ExpenseService
from core.services.financials.calculation import compute_project_financials
from core.services.financials.export import report_to_json, report_to_workbook
from core.services.financials.forecast import build_forecast
from core.services.financials.models import FinancialForecast, JobCostingReport, ProjectFinancials
from core.services.financials.report import build_job_costing_report
from core.services.subcontract.service import SubcontractService


logger = logging.getLogger(__name__)

_EXPORT_FORMATS = ("json", "excel", "xlsx")


class ProjectFinancialsService:
    """Per-project job-costing snapshots with a cache and change subscribers.

    Snapshots are cached until ``refresh_project_financials`` (or an explicit
    ``calculate_project_financials``) recomputes them. Callers and subscribers
    always receive a copy, never the cached snapshot itself. Each recompute notifies
    the project's subscribers synchronously, outside the cache lock.
    """

    def __init__(
        self,
        cost_code_service: CostCodeService,
        subcontract_service: SubcontractService,
        expense_service: ExpenseService,
    ):
        self._cost_code_service: CostCodeService = cost_code_service
        self._subcontract_service: SubcontractService = subcontract_service
        self._expense_service: ExpenseService = expense_service
        self._lock = RLock()
        self._cache: dict[str, ProjectFinancials] = {}
        self._last_calculated: dict[str, datetime] = {}
        self._subscribers: dict[str, Signal[ProjectFinancials]] = {}

    def _next_timestamp(self, project_id: str) -> datetime:
        # calculated_at must move forward on every recompute, even within one clock tick
        now = datetime.now(timezone.utc)
        previous = self._last_calculated.get(project_id)
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        self._last_calculated[project_id] = now
        return now

    def calculate_project_financials(self, project_id: str) -> ProjectFinancials:
        budgets = self._cost_code_service.list_project_budgets(project_id)
        subcontracts = self._subcontract_service.list_by_project(project_id)
        expenses = self._expense_service.list_by_project(project_id)
        names = {cc.id: cc.name for cc in self._cost_code_service.list_cost_codes()}
        project_name = next((sc.project_name for sc in subcontracts if sc.project_name), "") or next(
            (exp.project_name for exp in expenses if exp.project_name), ""
        )

        with self._lock:
            now = self._next_timestamp(project_id)
            financials = compute_project_financials(
                project_id,
                budgets,
                subcontracts,
                expenses,
                names,
                now,
                project_name=project_name,
            )
            self._cache[project_id] = financials
            signal = self._subscribers.get(project_id)

        logger.debug(
            "Financials for project %s: budget=%s actual=%s health=%s",
            project_id,
            financials.total_budget,
            financials.total_actual,
            financials.financial_health.value,
        )
        if signal is not None:
            signal.emit(deepcopy(financials))
        domain_events.financials_recalculated.emit(project_id)
        return deepcopy(financials)

    def get_project_financials(self, project_id: str) -> ProjectFinancials:
        with self._lock:
            cached = self._cache.get(project_id)
        if cached is not None:
            return deepcopy(cached)
        return self.calculate_project_financials(project_id)

    def refresh_project_financials(self, project_id: str) -> ProjectFinancials:
        with self._lock:
            self._cache.pop(project_id, None)
        return self.calculate_project_financials(project_id)

    def update_project_financials(self, project_id: str, recalculate: bool = False) -> ProjectFinancials:
        if recalculate:
            return self.refresh_project_financials(project_id)
        return self.get_project_financials(project_id)

    def subscribe_to_financial_updates(
        self,
        project_id: str,
        callback: Callable[[ProjectFinancials], None],
    ) -> Callable[[], None]:
        """Register ``callback`` for every recompute of the project; returns the unsubscribe."""
        with self._lock:
            signal = self._subscribers.setdefault(project_id, Signal())
        return signal.connect(callback)

    def forecast_final_cost(self, project_id: str) -> FinancialForecast:
        financials = self.get_project_financials(project_id)
        return build_forecast(financials, datetime.now(timezone.utc))

    def generate_job_costing_report(self, project_id: str) -> JobCostingReport:
        financials = self.get_project_financials(project_id)
        subcontracts = self._subcontract_service.list_by_project(project_id)
        expenses = self._expense_service.list_by_project(project_id)
        cost_codes = {cc.id: cc for cc in self._cost_code_service.list_cost_codes()}
        return build_job_costing_report(
            financials,
            subcontracts,
            expenses,
            cost_codes,
            datetime.now(timezone.utc),
        )

    def export_financials(
        self,
        project_id: str,
        format: str = "json",
        output_path: Path | str | None = None,
    ) -> str | Path:
        fmt = (format or "").strip().lower()
        if fmt not in _EXPORT_FORMATS:
            raise ValidationError(f"Unsupported export format: {format}", code="UNSUPPORTED_FORMAT")
        report = self.generate_job_costing_report(project_id)
        if fmt == "json":
            return report_to_json(report)
        if output_path is None:
            raise ValidationError("An output path is required for Excel export", code="REQUIRED_FIELD")
        path = report_to_workbook(report, Path(output_path))
        logger.info("Financials for project %s exported to %s", project_id, path)
        return path


__all__ = ["ProjectFinancialsService"]
