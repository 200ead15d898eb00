from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.models import CertificateStatus


@dataclass(frozen=True)
class CertificateFilters:
    subcontract_id: str | None = None
    project_id: str | None = None
    status: CertificateStatus | None = None
    submitted_by: str | None = None
    period_start_from: date | None = None
    period_start_to: date | None = None
    min_amount: float | None = None
    max_amount: float | None = None


@dataclass(frozen=True)
class CertificateStats:
    total: int
    pending: int
    approved: int
    paid: int
    rejected: int
    total_certified: float
    total_paid: float
    total_retained: float
    average_approval_time: float  # hours


__all__ = ["CertificateFilters", "CertificateStats"]
