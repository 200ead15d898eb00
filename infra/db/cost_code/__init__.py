from infra.db.cost_code.mapper import (
    budget_from_orm,
    budget_to_orm,
    cost_code_from_orm,
    cost_code_to_orm,
)
from infra.db.cost_code.repository import (
    SqlAlchemyCostCodeBudgetRepository,
    SqlAlchemyCostCodeRepository,
)

__all__ = [
    "cost_code_to_orm",
    "cost_code_from_orm",
    "budget_to_orm",
    "budget_from_orm",
    "SqlAlchemyCostCodeRepository",
    "SqlAlchemyCostCodeBudgetRepository",
]
