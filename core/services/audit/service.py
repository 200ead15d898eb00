from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List

from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry, AuditSeverity, FieldChange, FinancialImpact
from core.services.audit.export import entries_to_csv, entries_to_json, entries_to_workbook
from core.services.audit.models import AuditLogFilters, AuditLogStats, FinancialTransactionStats
from core.services.audit.policy import DEFAULT_QUERY_LIMIT, EXPORT_LIMIT, audit_retention_days
from core.services.audit.severity import severity_for_action
from core.services.common.base import ServiceBase
from core.services.common.pagination import Page, build_page, page_offset


logger = logging.getLogger(__name__)


class AuditLogService(ServiceBase):
    """Append-only log of financial and approval actions.

    Services call :meth:`log` with ``commit=False`` so the entry is written in
    the same transaction as the change it describes.
    """

    def __init__(self, session: Session, audit_repo: AuditLogRepository):
        super().__init__(session)
        self._audit_repo: AuditLogRepository = audit_repo

    def log(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        *,
        user_id: str,
        user_name: str,
        description: str,
        entity_name: str | None = None,
        project_id: str | None = None,
        project_name: str | None = None,
        severity: AuditSeverity | None = None,
        financial_impact: FinancialImpact | None = None,
        changes: list[FieldChange] | None = None,
        tags: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        entry = AuditLogEntry.create(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            user_name=user_name,
            description=description,
            severity=AuditSeverity(severity) if severity else severity_for_action(action),
            entity_name=entity_name,
            project_id=project_id,
            project_name=project_name,
            financial_impact=financial_impact,
            changes=changes,
            tags=tags,
            metadata=metadata,
        )
        self._audit_repo.add(entry)
        if commit:
            self.commit()
        logger.info(
            "[AUDIT] %s %s/%s by %s (%s): %s",
            entry.action,
            entry.entity_type,
            entry.entity_id,
            entry.user_id,
            entry.severity.value,
            entry.description,
        )
        return entry

    def log_subcontract_action(
        self,
        action: str,
        subcontract_id: str,
        contract_number: str,
        user_id: str,
        user_name: str,
        *,
        project_id: str | None = None,
        project_name: str | None = None,
        changes: list[FieldChange] | None = None,
        financial_impact: FinancialImpact | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        return self.log(
            action,
            "subcontract",
            subcontract_id,
            user_id=user_id,
            user_name=user_name,
            entity_name=contract_number,
            project_id=project_id,
            project_name=project_name,
            changes=changes,
            financial_impact=financial_impact,
            description=f"Subcontract {contract_number}: {action.replace('subcontract_', '')}",
            tags=["subcontract", "financial"],
            commit=commit,
        )

    def log_certificate_action(
        self,
        action: str,
        certificate_id: str,
        certificate_number: str,
        user_id: str,
        user_name: str,
        *,
        project_id: str | None = None,
        changes: list[FieldChange] | None = None,
        financial_impact: FinancialImpact | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        return self.log(
            action,
            "certificate",
            certificate_id,
            user_id=user_id,
            user_name=user_name,
            entity_name=certificate_number,
            project_id=project_id,
            changes=changes,
            financial_impact=financial_impact,
            description=f"Certificate {certificate_number}: {action.replace('certificate_', '')}",
            tags=["certificate", "financial", "approval"],
            commit=commit,
        )

    def log_expense_action(
        self,
        action: str,
        expense_id: str,
        expense_description: str,
        user_id: str,
        user_name: str,
        *,
        project_id: str | None = None,
        changes: list[FieldChange] | None = None,
        financial_impact: FinancialImpact | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        return self.log(
            action,
            "expense",
            expense_id,
            user_id=user_id,
            user_name=user_name,
            entity_name=expense_description,
            project_id=project_id,
            changes=changes,
            financial_impact=financial_impact,
            description=f"Expense: {action.replace('expense_', '')} - {expense_description}",
            tags=["expense", "financial", "approval"],
            commit=commit,
        )

    def log_payment_action(
        self,
        payment_id: str,
        amount: float,
        recipient: str,
        user_id: str,
        user_name: str,
        *,
        project_id: str | None = None,
        currency: str = "USD",
        commit: bool = False,
    ) -> AuditLogEntry:
        return self.log(
            "payment_recorded",
            "payment",
            payment_id,
            user_id=user_id,
            user_name=user_name,
            entity_name=f"Payment to {recipient}",
            project_id=project_id,
            financial_impact=FinancialImpact(
                amount=amount,
                currency=currency,
                description=f"Payment of {amount} to {recipient}",
            ),
            severity=AuditSeverity.CRITICAL,
            description=f"Payment recorded: {amount} to {recipient}",
            tags=["payment", "financial", "critical"],
            commit=commit,
        )

    def query(
        self,
        filters: AuditLogFilters | None = None,
        page: int = 1,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> Page[AuditLogEntry]:
        offset = page_offset(page, limit)
        entries = self._audit_repo.query(filters, offset=offset, limit=limit)
        return build_page(entries, self._audit_repo.count(filters), page, limit)

    def get_by_id(self, entry_id: str) -> AuditLogEntry | None:
        return self._audit_repo.get(entry_id)

    def get_recent_activity(self, limit: int = 10) -> List[AuditLogEntry]:
        return self._audit_repo.query(limit=limit)

    def get_critical_events(self, limit: int = 20) -> List[AuditLogEntry]:
        return self._audit_repo.query(AuditLogFilters(severity=AuditSeverity.CRITICAL), limit=limit)

    def get_entity_history(self, entity_type: str, entity_id: str) -> List[AuditLogEntry]:
        return self._audit_repo.query(AuditLogFilters(entity_type=entity_type, entity_id=entity_id))

    def get_stats(self) -> AuditLogStats:
        entries = self._audit_repo.list_all()
        by_action: dict[str, int] = {}
        by_entity_type: dict[str, int] = {}
        by_severity: dict[str, int] = {}
        by_user: dict[str, int] = {}
        financial_by_type: dict[str, float] = {}
        financial_count = 0
        financial_total = 0.0

        for entry in entries:
            by_action[entry.action] = by_action.get(entry.action, 0) + 1
            by_entity_type[entry.entity_type] = by_entity_type.get(entry.entity_type, 0) + 1
            by_severity[entry.severity.value] = by_severity.get(entry.severity.value, 0) + 1
            by_user[entry.user_id] = by_user.get(entry.user_id, 0) + 1
            if entry.financial_impact and entry.financial_impact.amount:
                amount = entry.financial_impact.amount
                financial_count += 1
                financial_total += amount
                financial_by_type[entry.entity_type] = financial_by_type.get(entry.entity_type, 0.0) + amount

        return AuditLogStats(
            total_entries=len(entries),
            entries_by_action=by_action,
            entries_by_entity_type=by_entity_type,
            entries_by_severity=by_severity,
            entries_by_user=by_user,
            recent_activity=entries[:10],
            critical_events=[e for e in entries if e.severity == AuditSeverity.CRITICAL][:10],
            financial_transactions=FinancialTransactionStats(
                total=financial_count,
                total_amount=financial_total,
                by_type=financial_by_type,
            ),
        )

    def export(
        self,
        format: str,
        filters: AuditLogFilters | None = None,
        output_path: Path | None = None,
    ) -> str | Path:
        """Export matching entries as ``json`` or ``csv`` text, or an ``excel`` workbook."""
        fmt = (format or "").strip().lower()
        entries = self.query(filters, page=1, limit=EXPORT_LIMIT).data
        if fmt == "json":
            return entries_to_json(entries)
        if fmt == "csv":
            return entries_to_csv(entries)
        if fmt == "excel":
            if output_path is None:
                raise ValidationError("An output path is required for excel export.", code="OUTPUT_PATH_REQUIRED")
            return entries_to_workbook(entries, Path(output_path))
        raise ValidationError(f"Unsupported format: {format}", code="UNSUPPORTED_FORMAT")

    def cleanup_old_logs(self, retention_days: int | None = None) -> int:
        days = retention_days if retention_days is not None else audit_retention_days()
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        try:
            removed = self._audit_repo.delete_older_than(cutoff)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        logger.info("Removed %s audit entries older than %s days", removed, days)
        return removed


__all__ = ["AuditLogService"]
