from __future__ import annotations

from typing import Any, Optional

from core.models import AuditLogEntry, AuditSeverity, FieldChange, FinancialImpact
from infra.db.codec import (
    dict_from_json,
    from_db_datetime,
    list_from_json,
    to_db_datetime,
    to_json,
)
from infra.db.models import AuditLogORM


def _impact_to_json(impact: Optional[FinancialImpact]) -> Optional[str]:
    if impact is None:
        return None
    return to_json(
        {"amount": impact.amount, "currency": impact.currency, "description": impact.description}
    )


def _impact_from_json(raw: Optional[str]) -> Optional[FinancialImpact]:
    payload = dict_from_json(raw)
    if not payload:
        return None
    return FinancialImpact(
        amount=float(payload.get("amount") or 0.0),
        currency=str(payload.get("currency") or "USD"),
        description=str(payload.get("description") or ""),
    )


def _change_to_dict(change: FieldChange) -> dict[str, Any]:
    return {
        "field": change.field,
        "old_value": change.old_value,
        "new_value": change.new_value,
        "field_label": change.field_label,
        "change_type": change.change_type,
    }


def _change_from_dict(payload: dict[str, Any]) -> FieldChange:
    return FieldChange(
        field=str(payload.get("field") or ""),
        old_value=payload.get("old_value"),
        new_value=payload.get("new_value"),
        field_label=payload.get("field_label"),
        change_type=str(payload.get("change_type") or "updated"),
    )


def audit_to_orm(entry: AuditLogEntry) -> AuditLogORM:
    return AuditLogORM(
        id=entry.id,
        occurred_at=to_db_datetime(entry.timestamp),
        action=entry.action,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        entity_name=entry.entity_name,
        user_id=entry.user_id,
        user_name=entry.user_name,
        project_id=entry.project_id,
        project_name=entry.project_name,
        description=entry.description,
        severity=entry.severity,
        financial_impact_json=_impact_to_json(entry.financial_impact),
        changes_json=to_json([_change_to_dict(c) for c in entry.changes]),
        tags_json=to_json(list(entry.tags)),
        metadata_json=to_json(dict(entry.metadata)),
    )


def audit_from_orm(obj: AuditLogORM) -> AuditLogEntry:
    return AuditLogEntry(
        id=obj.id,
        timestamp=from_db_datetime(obj.occurred_at),
        action=obj.action,
        entity_type=obj.entity_type,
        entity_id=obj.entity_id,
        entity_name=obj.entity_name,
        user_id=obj.user_id,
        user_name=obj.user_name,
        project_id=obj.project_id,
        project_name=obj.project_name,
        description=obj.description or "",
        severity=AuditSeverity(obj.severity),
        financial_impact=_impact_from_json(obj.financial_impact_json),
        changes=[
            _change_from_dict(item)
            for item in list_from_json(obj.changes_json)
            if isinstance(item, dict)
        ],
        tags=[str(tag) for tag in list_from_json(obj.tags_json)],
        metadata=dict_from_json(obj.metadata_json),
    )


__all__ = ["audit_to_orm", "audit_from_orm"]
