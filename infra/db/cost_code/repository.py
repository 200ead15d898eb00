from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.interfaces import CostCodeBudgetRepository, CostCodeRepository
from core.models import CostCode, CostCodeBudget
from infra.db.cost_code.mapper import (
    budget_from_orm,
    budget_to_orm,
    cost_code_from_orm,
    cost_code_to_orm,
)
from infra.db.models import CostCodeBudgetORM, CostCodeORM


class SqlAlchemyCostCodeRepository(CostCodeRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, cost_code: CostCode) -> None:
        self.session.add(cost_code_to_orm(cost_code))

    def update(self, cost_code: CostCode) -> None:
        self.session.merge(cost_code_to_orm(cost_code))

    def delete(self, cost_code_id: str) -> None:
        self.session.query(CostCodeORM).filter_by(id=cost_code_id).delete()

    def get(self, cost_code_id: str) -> Optional[CostCode]:
        obj = self.session.get(CostCodeORM, cost_code_id)
        return cost_code_from_orm(obj) if obj else None

    def get_by_code(self, code: str) -> Optional[CostCode]:
        stmt = select(CostCodeORM).where(CostCodeORM.code == code)
        obj = self.session.execute(stmt).scalars().first()
        return cost_code_from_orm(obj) if obj else None

    def list_all(self) -> List[CostCode]:
        stmt = select(CostCodeORM).order_by(CostCodeORM.code)
        rows = self.session.execute(stmt).scalars().all()
        return [cost_code_from_orm(row) for row in rows]

    def count(self) -> int:
        stmt = select(func.count()).select_from(CostCodeORM)
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyCostCodeBudgetRepository(CostCodeBudgetRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, budget: CostCodeBudget) -> None:
        self.session.add(budget_to_orm(budget))

    def update(self, budget: CostCodeBudget) -> None:
        self.session.merge(budget_to_orm(budget))

    def delete(self, budget_id: str) -> None:
        self.session.query(CostCodeBudgetORM).filter_by(id=budget_id).delete()

    def get(self, budget_id: str) -> Optional[CostCodeBudget]:
        obj = self.session.get(CostCodeBudgetORM, budget_id)
        return budget_from_orm(obj) if obj else None

    def get_for(self, project_id: str, cost_code_id: str) -> Optional[CostCodeBudget]:
        stmt = select(CostCodeBudgetORM).where(
            CostCodeBudgetORM.project_id == project_id,
            CostCodeBudgetORM.cost_code_id == cost_code_id,
        )
        obj = self.session.execute(stmt).scalars().first()
        return budget_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[CostCodeBudget]:
        stmt = (
            select(CostCodeBudgetORM)
            .where(CostCodeBudgetORM.project_id == project_id)
            .order_by(CostCodeBudgetORM.created_at)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [budget_from_orm(row) for row in rows]

    def list_by_cost_code(self, cost_code_id: str) -> List[CostCodeBudget]:
        stmt = select(CostCodeBudgetORM).where(CostCodeBudgetORM.cost_code_id == cost_code_id)
        rows = self.session.execute(stmt).scalars().all()
        return [budget_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyCostCodeRepository", "SqlAlchemyCostCodeBudgetRepository"]
