from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Select, delete, select
from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry, AuditSeverity
from core.services.audit.models import AuditLogFilters
from infra.db.audit.mapper import audit_from_orm, audit_to_orm
from infra.db.codec import to_db_datetime
from infra.db.filters import count_rows, json_list_contains_any, text_search, window
from infra.db.models import AuditLogORM


def _filtered(filters: Optional[AuditLogFilters]) -> Select:
    stmt = select(AuditLogORM)
    if filters is None:
        return stmt
    if filters.start_date is not None:
        stmt = stmt.where(AuditLogORM.occurred_at >= to_db_datetime(filters.start_date))
    if filters.end_date is not None:
        stmt = stmt.where(AuditLogORM.occurred_at <= to_db_datetime(filters.end_date))
    if filters.entity_type:
        stmt = stmt.where(AuditLogORM.entity_type == filters.entity_type)
    if filters.entity_id:
        stmt = stmt.where(AuditLogORM.entity_id == filters.entity_id)
    if filters.project_id:
        stmt = stmt.where(AuditLogORM.project_id == filters.project_id)
    if filters.user_id:
        stmt = stmt.where(AuditLogORM.user_id == filters.user_id)
    if filters.actions:
        stmt = stmt.where(AuditLogORM.action.in_(list(filters.actions)))
    if filters.severity is not None:
        stmt = stmt.where(AuditLogORM.severity == AuditSeverity(filters.severity))
    if filters.search:
        stmt = stmt.where(
            text_search(
                (AuditLogORM.description, AuditLogORM.entity_name, AuditLogORM.user_name),
                filters.search,
            )
        )
    if filters.tags:
        stmt = stmt.where(json_list_contains_any(AuditLogORM.tags_json, filters.tags))
    return stmt


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: AuditLogEntry) -> None:
        self.session.add(audit_to_orm(entry))

    def get(self, entry_id: str) -> Optional[AuditLogEntry]:
        obj = self.session.get(AuditLogORM, entry_id)
        return audit_from_orm(obj) if obj else None

    def list_all(self) -> List[AuditLogEntry]:
        return self.query()

    def query(
        self,
        filters: Optional[AuditLogFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[AuditLogEntry]:
        stmt = _filtered(filters).order_by(AuditLogORM.occurred_at.desc())
        rows = self.session.execute(window(stmt, offset, limit)).scalars().all()
        return [audit_from_orm(row) for row in rows]

    def count(self, filters: Optional[AuditLogFilters] = None) -> int:
        return count_rows(self.session, _filtered(filters))

    def delete_older_than(self, cutoff: datetime) -> int:
        stmt = delete(AuditLogORM).where(AuditLogORM.occurred_at < to_db_datetime(cutoff))
        result = self.session.execute(stmt)
        return int(result.rowcount or 0)


__all__ = ["SqlAlchemyAuditLogRepository"]
