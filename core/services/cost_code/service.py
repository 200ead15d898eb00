from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import CostCodeBudgetRepository, CostCodeRepository
from core.services.audit.service import AuditLogService
from core.services.cost_code.budgets import CostCodeBudgetMixin
from core.services.cost_code.catalog_ops import CostCodeCatalogMixin


class CostCodeService(CostCodeCatalogMixin, CostCodeBudgetMixin):
    """Cost-code catalog plus the per-project budget ledger."""

    def __init__(
        self,
        session: Session,
        cost_code_repo: CostCodeRepository,
        budget_repo: CostCodeBudgetRepository,
        audit_service: AuditLogService | None = None,
    ):
        self._session: Session = session
        self._cost_code_repo: CostCodeRepository = cost_code_repo
        self._budget_repo: CostCodeBudgetRepository = budget_repo
        self._audit_service = audit_service


__all__ = ["CostCodeService"]
