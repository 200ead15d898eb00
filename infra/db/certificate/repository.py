from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from core.interfaces import ProgressCertificateRepository
from core.models import CertificateStatus, ProgressCertificate
from core.services.certificate.models import CertificateFilters
from infra.db.certificate.mapper import certificate_from_orm, certificate_to_orm
from infra.db.filters import count_rows, window
from infra.db.models import ProgressCertificateORM


def _filtered(filters: Optional[CertificateFilters]) -> Select:
    stmt = select(ProgressCertificateORM)
    if filters is None:
        return stmt
    if filters.subcontract_id:
        stmt = stmt.where(ProgressCertificateORM.subcontract_id == filters.subcontract_id)
    if filters.project_id:
        stmt = stmt.where(ProgressCertificateORM.project_id == filters.project_id)
    if filters.status is not None:
        stmt = stmt.where(ProgressCertificateORM.status == CertificateStatus(filters.status))
    if filters.submitted_by:
        stmt = stmt.where(ProgressCertificateORM.submitted_by == filters.submitted_by)
    if filters.period_start_from:
        stmt = stmt.where(ProgressCertificateORM.period_start >= filters.period_start_from)
    if filters.period_start_to:
        stmt = stmt.where(ProgressCertificateORM.period_start <= filters.period_start_to)
    if filters.min_amount is not None:
        stmt = stmt.where(ProgressCertificateORM.amount_certified >= filters.min_amount)
    if filters.max_amount is not None:
        stmt = stmt.where(ProgressCertificateORM.amount_certified <= filters.max_amount)
    return stmt


class SqlAlchemyProgressCertificateRepository(ProgressCertificateRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, certificate: ProgressCertificate) -> None:
        self.session.add(certificate_to_orm(certificate))

    def update(self, certificate: ProgressCertificate) -> None:
        self.session.merge(certificate_to_orm(certificate))

    def delete(self, certificate_id: str) -> None:
        self.session.query(ProgressCertificateORM).filter_by(id=certificate_id).delete()

    def get(self, certificate_id: str) -> Optional[ProgressCertificate]:
        obj = self.session.get(ProgressCertificateORM, certificate_id)
        return certificate_from_orm(obj) if obj else None

    def list_all(self) -> List[ProgressCertificate]:
        stmt = select(ProgressCertificateORM).order_by(ProgressCertificateORM.created_at)
        rows = self.session.execute(stmt).scalars().all()
        return [certificate_from_orm(row) for row in rows]

    def list_by_subcontract(self, subcontract_id: str) -> List[ProgressCertificate]:
        stmt = (
            select(ProgressCertificateORM)
            .where(ProgressCertificateORM.subcontract_id == subcontract_id)
            .order_by(ProgressCertificateORM.created_at)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [certificate_from_orm(row) for row in rows]

    def list_by_project(self, project_id: str) -> List[ProgressCertificate]:
        stmt = (
            select(ProgressCertificateORM)
            .where(ProgressCertificateORM.project_id == project_id)
            .order_by(ProgressCertificateORM.created_at)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [certificate_from_orm(row) for row in rows]

    def query(
        self,
        filters: Optional[CertificateFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ProgressCertificate]:
        stmt = _filtered(filters).order_by(
            ProgressCertificateORM.created_at.desc(), ProgressCertificateORM.certificate_number.desc()
        )
        rows = self.session.execute(window(stmt, offset, limit)).scalars().all()
        return [certificate_from_orm(row) for row in rows]

    def count(self, filters: Optional[CertificateFilters] = None) -> int:
        return count_rows(self.session, _filtered(filters))


__all__ = ["SqlAlchemyProgressCertificateRepository"]
