from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from core.models import AuditLogEntry, AuditSeverity


@dataclass(frozen=True)
class AuditLogFilters:
    start_date: datetime | None = None
    end_date: datetime | None = None
    entity_type: str | None = None
    entity_id: str | None = None
    project_id: str | None = None
    user_id: str | None = None
    actions: tuple[str, ...] = ()
    severity: AuditSeverity | None = None
    search: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class FinancialTransactionStats:
    total: int
    total_amount: float
    by_type: dict[str, float]


@dataclass(frozen=True)
class AuditLogStats:
    total_entries: int
    entries_by_action: dict[str, int]
    entries_by_entity_type: dict[str, int]
    entries_by_severity: dict[str, int]
    entries_by_user: dict[str, int]
    recent_activity: list[AuditLogEntry] = field(default_factory=list)
    critical_events: list[AuditLogEntry] = field(default_factory=list)
    financial_transactions: FinancialTransactionStats = field(
        default_factory=lambda: FinancialTransactionStats(0, 0.0, {})
    )


__all__ = ["AuditLogFilters", "FinancialTransactionStats", "AuditLogStats"]
