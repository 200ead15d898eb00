from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from core.domain.enums import AuditSeverity
from core.domain.identifiers import generate_id


@dataclass(frozen=True)
class FieldChange:
    field: str
    old_value: Any
    new_value: Any
    field_label: str | None = None
    change_type: str = "updated"


@dataclass(frozen=True)
class FinancialImpact:
    amount: float
    currency: str = "USD"
    description: str = ""


@dataclass
class AuditLogEntry:
    id: str
    timestamp: datetime
    action: str
    entity_type: str
    entity_id: str
    user_id: str
    user_name: str
    description: str
    severity: AuditSeverity = AuditSeverity.INFO
    entity_name: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    financial_impact: FinancialImpact | None = None
    changes: list[FieldChange] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(
        action: str,
        entity_type: str,
        entity_id: str,
        *,
        user_id: str,
        user_name: str,
        description: str,
        severity: AuditSeverity,
        entity_name: str | None = None,
        project_id: str | None = None,
        project_name: str | None = None,
        financial_impact: FinancialImpact | None = None,
        changes: list[FieldChange] | None = None,
        tags: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "AuditLogEntry":
        return AuditLogEntry(
            id=generate_id(),
            timestamp=datetime.now(timezone.utc),
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            user_name=user_name,
            description=description,
            severity=severity,
            entity_name=entity_name,
            project_id=project_id,
            project_name=project_name,
            financial_impact=financial_impact,
            changes=list(changes or []),
            tags=list(tags or []),
            metadata=dict(metadata or {}),
        )


__all__ = ["FieldChange", "FinancialImpact", "AuditLogEntry"]
