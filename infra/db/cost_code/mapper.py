from __future__ import annotations

from core.models import BudgetStatus, CostCode, CostCodeBudget, CostType
from infra.db.codec import from_db_datetime, list_from_json, to_db_datetime, to_json
from infra.db.models import CostCodeBudgetORM, CostCodeORM


def cost_code_to_orm(cost_code: CostCode) -> CostCodeORM:
    return CostCodeORM(
        id=cost_code.id,
        code=cost_code.code,
        name=cost_code.name,
        description=cost_code.description,
        division=cost_code.division,
        category=cost_code.category,
        subcategory=cost_code.subcategory,
        cost_type=cost_code.cost_type,
        unit=cost_code.unit,
        is_active=cost_code.is_active,
        is_default=cost_code.is_default,
        notes=cost_code.notes,
        tags_json=to_json(list(cost_code.tags)),
        created_at=to_db_datetime(cost_code.created_at),
        updated_at=to_db_datetime(cost_code.updated_at),
    )


def cost_code_from_orm(obj: CostCodeORM) -> CostCode:
    return CostCode(
        id=obj.id,
        code=obj.code,
        name=obj.name,
        description=obj.description or "",
        division=obj.division,
        category=obj.category,
        subcategory=obj.subcategory,
        cost_type=CostType(obj.cost_type),
        unit=obj.unit or "global",
        is_active=bool(obj.is_active),
        is_default=bool(obj.is_default),
        notes=obj.notes,
        tags=[str(tag) for tag in list_from_json(obj.tags_json)],
        created_at=from_db_datetime(obj.created_at),
        updated_at=from_db_datetime(obj.updated_at),
    )


def budget_to_orm(budget: CostCodeBudget) -> CostCodeBudgetORM:
    return CostCodeBudgetORM(
        id=budget.id,
        project_id=budget.project_id,
        cost_code_id=budget.cost_code_id,
        budgeted_quantity=budget.budgeted_quantity,
        budgeted_unit_price=budget.budgeted_unit_price,
        budgeted_amount=budget.budgeted_amount,
        committed_amount=budget.committed_amount,
        committed_quantity=budget.committed_quantity,
        actual_amount=budget.actual_amount,
        actual_quantity=budget.actual_quantity,
        variance=budget.variance,
        variance_percentage=budget.variance_percentage,
        percentage_complete=budget.percentage_complete,
        status=budget.status,
        created_at=to_db_datetime(budget.created_at),
        updated_at=to_db_datetime(budget.updated_at),
        last_calculated_at=to_db_datetime(budget.last_calculated_at),
    )


def budget_from_orm(obj: CostCodeBudgetORM) -> CostCodeBudget:
    return CostCodeBudget(
        id=obj.id,
        project_id=obj.project_id,
        cost_code_id=obj.cost_code_id,
        budgeted_quantity=obj.budgeted_quantity or 0.0,
        budgeted_unit_price=obj.budgeted_unit_price or 0.0,
        budgeted_amount=obj.budgeted_amount or 0.0,
        committed_amount=obj.committed_amount or 0.0,
        committed_quantity=obj.committed_quantity or 0.0,
        actual_amount=obj.actual_amount or 0.0,
        actual_quantity=obj.actual_quantity or 0.0,
        variance=obj.variance or 0.0,
        variance_percentage=obj.variance_percentage or 0.0,
        percentage_complete=obj.percentage_complete or 0.0,
        status=BudgetStatus(obj.status),
        created_at=from_db_datetime(obj.created_at),
        updated_at=from_db_datetime(obj.updated_at),
        last_calculated_at=from_db_datetime(obj.last_calculated_at),
    )


__all__ = ["cost_code_to_orm", "cost_code_from_orm", "budget_to_orm", "budget_from_orm"]
