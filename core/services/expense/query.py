from __future__ import annotations

from typing import List

from core.interfaces import ExpenseRepository
from core.models import Expense, ExpenseStatus
from core.services.common.pagination import Page, build_page, page_offset
from core.services.expense.models import ExpenseFilters, ExpenseStats


def _sum_by(rows: List[Expense], key) -> dict[str, float]:
    totals: dict[str, float] = {}
    for exp in rows:
        k = key(exp)
        totals[k] = totals.get(k, 0.0) + exp.total_amount
    return totals


class ExpenseQueryMixin:
    _expense_repo: ExpenseRepository

    def get_expense(self, expense_id: str) -> Expense | None:
        return self._expense_repo.get(expense_id)

    def list_by_project(self, project_id: str) -> List[Expense]:
        return self._expense_repo.list_by_project(project_id)

    def get_pending_approvals(self) -> List[Expense]:
        return self._expense_repo.list_by_status(ExpenseStatus.PENDING_APPROVAL)

    def get_expenses_needing_review(self) -> List[Expense]:
        return self._expense_repo.query(ExpenseFilters(needs_review=True))

    def query_expenses(
        self,
        filters: ExpenseFilters | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Expense]:
        offset = page_offset(page, limit)
        rows = self._expense_repo.query(filters, offset=offset, limit=limit)
        return build_page(rows, self._expense_repo.count(filters), page, limit)

    def get_expense_stats(self) -> ExpenseStats:
        rows = self._expense_repo.list_all()
        total = len(rows)
        total_amount = sum(exp.total_amount for exp in rows)
        paid_amount = sum(exp.paid_amount or 0.0 for exp in rows)
        return ExpenseStats(
            total=total,
            draft=sum(1 for exp in rows if exp.status == ExpenseStatus.DRAFT),
            pending_approval=sum(1 for exp in rows if exp.status == ExpenseStatus.PENDING_APPROVAL),
            approved=sum(1 for exp in rows if exp.status == ExpenseStatus.APPROVED),
            paid=sum(1 for exp in rows if exp.status == ExpenseStatus.PAID),
            rejected=sum(1 for exp in rows if exp.status == ExpenseStatus.REJECTED),
            total_amount=total_amount,
            paid_amount=paid_amount,
            unpaid_amount=total_amount - paid_amount,
            auto_created=sum(1 for exp in rows if exp.is_auto_created),
            needing_review=sum(1 for exp in rows if exp.needs_review),
            average_amount=total_amount / total if total else 0.0,
            by_project=_sum_by(rows, lambda exp: exp.project_id),
            by_cost_code=_sum_by(rows, lambda exp: exp.cost_code_id),
            by_supplier=_sum_by(rows, lambda exp: exp.supplier_id),
        )


__all__ = ["ExpenseQueryMixin"]
