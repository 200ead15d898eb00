from __future__ import annotations

from dataclasses import dataclass

from core.models import CostCode, CostCodeBudget
from core.services.cost_code.hierarchy import CostCodeHierarchy


@dataclass(frozen=True)
class CostCodeQueryResult:
    data: list[CostCode]
    total: int
    hierarchy: CostCodeHierarchy


@dataclass(frozen=True)
class CostCodeStats:
    total: int
    active: int
    inactive: int
    by_type: dict[str, int]
    by_division: dict[str, int]


@dataclass(frozen=True)
class CostCodeSummary:
    cost_code: CostCode
    budget: CostCodeBudget
    committed_amount: float
    actual_amount: float
    utilization_percentage: float
    remaining_budget: float
    projected_final_cost: float


__all__ = ["CostCodeQueryResult", "CostCodeStats", "CostCodeSummary"]
