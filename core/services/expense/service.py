from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import ExpenseRepository
from core.services.audit.service import AuditLogService
from core.services.cost_code.service import CostCodeService
from core.services.expense.intake import ExpenseIntakeMixin
from core.services.expense.query import ExpenseQueryMixin
from core.services.expense.workflow import ExpenseWorkflowMixin


class ExpenseService(ExpenseIntakeMixin, ExpenseWorkflowMixin, ExpenseQueryMixin):
    def __init__(
        self,
        session: Session,
        expense_repo: ExpenseRepository,
        cost_code_service: CostCodeService,
        audit_service: AuditLogService | None = None,
    ):
        self._session: Session = session
        self._expense_repo: ExpenseRepository = expense_repo
        self._cost_code_service: CostCodeService = cost_code_service
        self._audit_service: AuditLogService | None = audit_service


__all__ = ["ExpenseService"]
