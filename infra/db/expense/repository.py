from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from core.interfaces import ExpenseRepository
from core.models import Expense, ExpenseStatus, PaymentStatus
from core.services.expense.models import ExpenseFilters
from infra.db.expense.mapper import expense_from_orm, expense_to_orm
from infra.db.filters import count_rows, json_list_contains_any, text_search, window
from infra.db.models import ExpenseORM


def _filtered(filters: Optional[ExpenseFilters]) -> Select:
    stmt = select(ExpenseORM)
    if filters is None:
        return stmt
    if filters.project_id:
        stmt = stmt.where(ExpenseORM.project_id == filters.project_id)
    if filters.cost_code_id:
        stmt = stmt.where(ExpenseORM.cost_code_id == filters.cost_code_id)
    if filters.supplier_id:
        stmt = stmt.where(ExpenseORM.supplier_id == filters.supplier_id)
    if filters.status is not None:
        stmt = stmt.where(ExpenseORM.status == ExpenseStatus(filters.status))
    if filters.payment_status is not None:
        stmt = stmt.where(ExpenseORM.payment_status == PaymentStatus(filters.payment_status))
    if filters.is_auto_created is not None:
        stmt = stmt.where(ExpenseORM.is_auto_created == filters.is_auto_created)
    if filters.needs_review is not None:
        stmt = stmt.where(ExpenseORM.needs_review == filters.needs_review)
    if filters.date_from:
        stmt = stmt.where(ExpenseORM.invoice_date >= filters.date_from)
    if filters.date_to:
        stmt = stmt.where(ExpenseORM.invoice_date <= filters.date_to)
    if filters.min_amount is not None:
        stmt = stmt.where(ExpenseORM.total_amount >= filters.min_amount)
    if filters.max_amount is not None:
        stmt = stmt.where(ExpenseORM.total_amount <= filters.max_amount)
    if filters.search:
        stmt = stmt.where(
            text_search(
                (ExpenseORM.description, ExpenseORM.invoice_number, ExpenseORM.supplier_name),
                filters.search,
            )
        )
    if filters.tags:
        stmt = stmt.where(json_list_contains_any(ExpenseORM.tags_json, filters.tags))
    return stmt


class SqlAlchemyExpenseRepository(ExpenseRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, expense: Expense) -> None:
        self.session.add(expense_to_orm(expense))

    def update(self, expense: Expense) -> None:
        self.session.merge(expense_to_orm(expense))

    def delete(self, expense_id: str) -> None:
        self.session.query(ExpenseORM).filter_by(id=expense_id).delete()

    def get(self, expense_id: str) -> Optional[Expense]:
        obj = self.session.get(ExpenseORM, expense_id)
        return expense_from_orm(obj) if obj else None

    def list_all(self) -> List[Expense]:
        stmt = select(ExpenseORM).order_by(ExpenseORM.created_at)
        rows = self.session.execute(stmt).scalars().all()
        return [expense_from_orm(row) for row in rows]

    def list_by_project(self, project_id: str) -> List[Expense]:
        stmt = (
            select(ExpenseORM)
            .where(ExpenseORM.project_id == project_id)
            .order_by(ExpenseORM.created_at)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [expense_from_orm(row) for row in rows]

    def list_by_status(self, status: ExpenseStatus) -> List[Expense]:
        stmt = (
            select(ExpenseORM)
            .where(ExpenseORM.status == ExpenseStatus(status))
            .order_by(ExpenseORM.created_at)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [expense_from_orm(row) for row in rows]

    def query(
        self,
        filters: Optional[ExpenseFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Expense]:
        stmt = _filtered(filters).order_by(ExpenseORM.created_at.desc(), ExpenseORM.id)
        rows = self.session.execute(window(stmt, offset, limit)).scalars().all()
        return [expense_from_orm(row) for row in rows]

    def count(self, filters: Optional[ExpenseFilters] = None) -> int:
        return count_rows(self.session, _filtered(filters))


__all__ = ["SqlAlchemyExpenseRepository"]
