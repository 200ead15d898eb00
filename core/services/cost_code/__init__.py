from .catalog import DEFAULT_COST_CODES
from .hierarchy import (
    CostCodeCategoryNode,
    CostCodeDivisionNode,
    CostCodeHierarchy,
    CostCodeSubcategoryNode,
    build_hierarchy,
)
from .metrics import budget_status, recalculate_budget_metrics
from .models import CostCodeQueryResult, CostCodeStats, CostCodeSummary
from .service import CostCodeService
from .suggest import rank_cost_codes, score_cost_code

__all__ = [
    "CostCodeService",
    "DEFAULT_COST_CODES",
    "CostCodeHierarchy",
    "CostCodeDivisionNode",
    "CostCodeCategoryNode",
    "CostCodeSubcategoryNode",
    "build_hierarchy",
    "budget_status",
    "recalculate_budget_metrics",
    "CostCodeQueryResult",
    "CostCodeStats",
    "CostCodeSummary",
    "rank_cost_codes",
    "score_cost_code",
]
