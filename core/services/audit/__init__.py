from .helpers import record_audit, status_change
from .models import AuditLogFilters, AuditLogStats, FinancialTransactionStats
from .service import AuditLogService
from .severity import CRITICAL_ACTIONS, WARNING_ACTIONS, severity_for_action

__all__ = [
    "AuditLogService",
    "AuditLogFilters",
    "AuditLogStats",
    "FinancialTransactionStats",
    "CRITICAL_ACTIONS",
    "WARNING_ACTIONS",
    "severity_for_action",
    "record_audit",
    "status_change",
]
