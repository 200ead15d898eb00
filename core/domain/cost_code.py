from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from core.domain.enums import BudgetStatus, CostType
from core.domain.identifiers import generate_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CostCode:
    id: str
    code: str
    name: str
    description: str
    division: str
    category: str
    subcategory: Optional[str] = None
    cost_type: CostType = CostType.OTHER
    unit: str = "global"
    is_active: bool = True
    is_default: bool = False
    notes: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @staticmethod
    def create(
        code: str,
        name: str,
        description: str,
        division: str,
        category: str,
        subcategory: Optional[str] = None,
        cost_type: CostType = CostType.OTHER,
        unit: str = "global",
        is_active: bool = True,
        is_default: bool = False,
        notes: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> "CostCode":
        now = _utc_now()
        return CostCode(
            id=generate_id(),
            code=code,
            name=name,
            description=description,
            division=division,
            category=category,
            subcategory=subcategory,
            cost_type=cost_type,
            unit=unit,
            is_active=is_active,
            is_default=is_default,
            notes=notes,
            tags=list(tags or []),
            created_at=now,
            updated_at=now,
        )


@dataclass
class CostCodeBudget:
    """Budget line for one cost code in one project.

    ``variance``, ``variance_percentage``, ``percentage_complete`` and ``status``
    are derived; the ledger recomputes them after every change.
    """

    id: str
    project_id: str
    cost_code_id: str
    budgeted_quantity: float
    budgeted_unit_price: float
    budgeted_amount: float
    committed_amount: float = 0.0
    committed_quantity: float = 0.0
    actual_amount: float = 0.0
    actual_quantity: float = 0.0
    variance: float = 0.0
    variance_percentage: float = 0.0
    percentage_complete: float = 0.0
    status: BudgetStatus = BudgetStatus.UNDER_BUDGET
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    last_calculated_at: datetime = field(default_factory=_utc_now)

    @staticmethod
    def create(
        project_id: str,
        cost_code_id: str,
        budgeted_quantity: float,
        budgeted_unit_price: float,
    ) -> "CostCodeBudget":
        budgeted_amount = budgeted_quantity * budgeted_unit_price
        now = _utc_now()
        return CostCodeBudget(
            id=generate_id(),
            project_id=project_id,
            cost_code_id=cost_code_id,
            budgeted_quantity=budgeted_quantity,
            budgeted_unit_price=budgeted_unit_price,
            budgeted_amount=budgeted_amount,
            variance=budgeted_amount,
            status=BudgetStatus.UNDER_BUDGET,
            created_at=now,
            updated_at=now,
            last_calculated_at=now,
        )


__all__ = ["CostCode", "CostCodeBudget"]
