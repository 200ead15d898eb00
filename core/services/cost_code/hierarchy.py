from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from core.models import CostCode, CostType


@dataclass(frozen=True)
class CostCodeSubcategoryNode:
    id: str
    code: str
    name: str
    cost_type: CostType
    unit: str
    is_active: bool


@dataclass
class CostCodeCategoryNode:
    code: str
    name: str
    subcategories: list[CostCodeSubcategoryNode] = field(default_factory=list)


@dataclass
class CostCodeDivisionNode:
    code: str
    name: str
    categories: list[CostCodeCategoryNode] = field(default_factory=list)


@dataclass
class CostCodeHierarchy:
    divisions: list[CostCodeDivisionNode] = field(default_factory=list)


def build_hierarchy(cost_codes: Iterable[CostCode]) -> CostCodeHierarchy:
    divisions: dict[str, CostCodeDivisionNode] = {}
    for cc in cost_codes:
        division = divisions.get(cc.division)
        if division is None:
            division = CostCodeDivisionNode(code=cc.division, name=cc.division)
            divisions[cc.division] = division

        category = next((cat for cat in division.categories if cat.code == cc.category), None)
        if category is None:
            category = CostCodeCategoryNode(code=cc.category, name=cc.category)
            division.categories.append(category)

        if cc.subcategory:
            category.subcategories.append(
                CostCodeSubcategoryNode(
                    id=cc.id,
                    code=cc.code,
                    name=cc.name,
                    cost_type=cc.cost_type,
                    unit=cc.unit,
                    is_active=cc.is_active,
                )
            )
    return CostCodeHierarchy(divisions=list(divisions.values()))


__all__ = [
    "CostCodeSubcategoryNode",
    "CostCodeCategoryNode",
    "CostCodeDivisionNode",
    "CostCodeHierarchy",
    "build_hierarchy",
]
