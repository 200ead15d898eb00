from __future__ import annotations

from typing import Any

from core.models import FieldChange, FinancialImpact


SYSTEM_USER_ID = "system"
SYSTEM_USER_NAME = "System"


def record_audit(
    owner: object,
    action: str,
    *,
    entity_type: str,
    entity_id: str,
    description: str,
    user_id: str | None = None,
    user_name: str | None = None,
    entity_name: str | None = None,
    project_id: str | None = None,
    financial_impact: FinancialImpact | None = None,
    changes: list[FieldChange] | None = None,
    tags: list[str] | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Stage an audit entry on the owner's session; the caller commits."""
    audit_service = getattr(owner, "_audit_service", None)
    if audit_service is None:
        return
    audit_service.log(
        action,
        entity_type,
        entity_id,
        user_id=user_id or SYSTEM_USER_ID,
        user_name=user_name or user_id or SYSTEM_USER_NAME,
        description=description,
        entity_name=entity_name,
        project_id=project_id,
        financial_impact=financial_impact,
        changes=changes,
        tags=tags,
        metadata=metadata,
        commit=False,
    )


def status_change(old: Any, new: Any) -> FieldChange:
    return FieldChange(
        field="status",
        old_value=getattr(old, "value", old),
        new_value=getattr(new, "value", new),
        field_label="Status",
    )


__all__ = ["SYSTEM_USER_ID", "SYSTEM_USER_NAME", "record_audit", "status_change"]
