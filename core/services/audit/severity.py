from __future__ import annotations

from core.models import AuditSeverity


CRITICAL_ACTIONS = frozenset(
    {
        "subcontract_deleted",
        "certificate_approved",
        "certificate_paid",
        "expense_approved",
        "expense_paid",
        "payment_recorded",
        "budget_updated",
        "retention_released",
    }
)

WARNING_ACTIONS = frozenset(
    {
        "subcontract_cancelled",
        "certificate_rejected",
        "expense_rejected",
        "cost_code_deleted",
    }
)


def severity_for_action(action: str) -> AuditSeverity:
    if action in CRITICAL_ACTIONS:
        return AuditSeverity.CRITICAL
    if action in WARNING_ACTIONS:
        return AuditSeverity.WARNING
    return AuditSeverity.INFO


__all__ = ["CRITICAL_ACTIONS", "WARNING_ACTIONS", "severity_for_action"]
