from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.models import SubcontractStatus


@dataclass(frozen=True)
class PaymentScheduleEntry:
    """Requested payment milestone before amounts and ids are assigned."""

    description: str
    percentage: float
    due_date: date | None = None


@dataclass(frozen=True)
class SubcontractFilters:
    project_id: str | None = None
    subcontractor_id: str | None = None
    status: SubcontractStatus | None = None
    start_date_from: date | None = None
    start_date_to: date | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    cost_code_id: str | None = None
    search: str | None = None


@dataclass(frozen=True)
class SubcontractStats:
    total: int
    active: int
    completed: int
    cancelled: int
    total_value: float
    total_certified: float
    total_paid: float
    total_retained: float
    average_retention_percentage: float


__all__ = ["PaymentScheduleEntry", "SubcontractFilters", "SubcontractStats"]
