from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Select, delete, select
from sqlalchemy.orm import Session

from core.interfaces import SubcontractRepository
from core.models import Subcontract, SubcontractStatus
from core.services.subcontract.models import SubcontractFilters
from infra.db.filters import count_rows, json_list_contains_any, text_search, window
from infra.db.models import PaymentScheduleItemORM, SubcontractDocumentORM, SubcontractORM
from infra.db.subcontract.mapper import (
    document_to_orm,
    schedule_item_to_orm,
    subcontract_from_orm,
    subcontract_to_orm,
)


def _filtered(filters: Optional[SubcontractFilters]) -> Select:
    stmt = select(SubcontractORM)
    if filters is None:
        return stmt
    if filters.project_id:
        stmt = stmt.where(SubcontractORM.project_id == filters.project_id)
    if filters.subcontractor_id:
        stmt = stmt.where(SubcontractORM.subcontractor_id == filters.subcontractor_id)
    if filters.status is not None:
        stmt = stmt.where(SubcontractORM.status == SubcontractStatus(filters.status))
    if filters.start_date_from:
        stmt = stmt.where(SubcontractORM.start_date >= filters.start_date_from)
    if filters.start_date_to:
        stmt = stmt.where(SubcontractORM.start_date <= filters.start_date_to)
    if filters.min_amount is not None:
        stmt = stmt.where(SubcontractORM.total_amount >= filters.min_amount)
    if filters.max_amount is not None:
        stmt = stmt.where(SubcontractORM.total_amount <= filters.max_amount)
    if filters.cost_code_id:
        stmt = stmt.where(json_list_contains_any(SubcontractORM.cost_codes_json, [filters.cost_code_id]))
    if filters.search:
        stmt = stmt.where(
            text_search(
                (
                    SubcontractORM.contract_number,
                    SubcontractORM.description,
                    SubcontractORM.scope,
                    SubcontractORM.subcontractor_name,
                ),
                filters.search,
            )
        )
    return stmt


class SqlAlchemySubcontractRepository(SubcontractRepository):
    """Stores a subcontract together with its payment schedule and documents."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, subcontract: Subcontract) -> None:
        self.session.add(subcontract_to_orm(subcontract))
        self.session.add_all([schedule_item_to_orm(item) for item in subcontract.payment_schedule])
        self.session.add_all([document_to_orm(doc) for doc in subcontract.documents])

    def update(self, subcontract: Subcontract) -> None:
        self.session.merge(subcontract_to_orm(subcontract))
        self._sync_children(subcontract)

    def delete(self, subcontract_id: str) -> None:
        self.session.execute(
            delete(PaymentScheduleItemORM).where(PaymentScheduleItemORM.subcontract_id == subcontract_id)
        )
        self.session.execute(
            delete(SubcontractDocumentORM).where(SubcontractDocumentORM.subcontract_id == subcontract_id)
        )
        self.session.query(SubcontractORM).filter_by(id=subcontract_id).delete()

    def get(self, subcontract_id: str) -> Optional[Subcontract]:
        obj = self.session.get(SubcontractORM, subcontract_id)
        return self._hydrate(obj) if obj else None

    def list_all(self) -> List[Subcontract]:
        stmt = select(SubcontractORM).order_by(SubcontractORM.created_at)
        return [self._hydrate(row) for row in self.session.execute(stmt).scalars().all()]

    def list_by_project(self, project_id: str) -> List[Subcontract]:
        stmt = (
            select(SubcontractORM)
            .where(SubcontractORM.project_id == project_id)
            .order_by(SubcontractORM.created_at)
        )
        return [self._hydrate(row) for row in self.session.execute(stmt).scalars().all()]

    def list_by_subcontractor(self, subcontractor_id: str) -> List[Subcontract]:
        stmt = (
            select(SubcontractORM)
            .where(SubcontractORM.subcontractor_id == subcontractor_id)
            .order_by(SubcontractORM.created_at)
        )
        return [self._hydrate(row) for row in self.session.execute(stmt).scalars().all()]

    def query(
        self,
        filters: Optional[SubcontractFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Subcontract]:
        stmt = _filtered(filters).order_by(SubcontractORM.created_at, SubcontractORM.id)
        rows = self.session.execute(window(stmt, offset, limit)).scalars().all()
        return [self._hydrate(row) for row in rows]

    def count(self, filters: Optional[SubcontractFilters] = None) -> int:
        return count_rows(self.session, _filtered(filters))

    def _hydrate(self, obj: SubcontractORM) -> Subcontract:
        schedule = self.session.execute(
            select(PaymentScheduleItemORM)
            .where(PaymentScheduleItemORM.subcontract_id == obj.id)
            .order_by(PaymentScheduleItemORM.sequence)
        ).scalars().all()
        documents = self.session.execute(
            select(SubcontractDocumentORM)
            .where(SubcontractDocumentORM.subcontract_id == obj.id)
            .order_by(SubcontractDocumentORM.upload_date)
        ).scalars().all()
        return subcontract_from_orm(obj, list(schedule), list(documents))

    def _sync_children(self, subcontract: Subcontract) -> None:
        keep_items = [item.id for item in subcontract.payment_schedule]
        self.session.execute(
            delete(PaymentScheduleItemORM).where(
                PaymentScheduleItemORM.subcontract_id == subcontract.id,
                PaymentScheduleItemORM.id.not_in(keep_items),
            )
        )
        for item in subcontract.payment_schedule:
            self.session.merge(schedule_item_to_orm(item))

        keep_docs = [doc.id for doc in subcontract.documents]
        self.session.execute(
            delete(SubcontractDocumentORM).where(
                SubcontractDocumentORM.subcontract_id == subcontract.id,
                SubcontractDocumentORM.id.not_in(keep_docs),
            )
        )
        for doc in subcontract.documents:
            self.session.merge(document_to_orm(doc))


__all__ = ["SqlAlchemySubcontractRepository"]
