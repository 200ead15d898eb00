from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Iterable, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, DomainError, ValidationError
from core.interfaces import ExpenseRepository
from core.models import Expense, ExpenseStatus, FinancialImpact, PaymentStatus
from core.services.audit.helpers import status_change
from core.services.expense.policy import PAYMENT_TOLERANCE
from core.services.expense.validation import validate_expense_classification


logger = logging.getLogger(__name__)


def _append_note(current: str | None, label: str, text: str) -> str:
    return f"{current or ''}\n\n{label}: {text}"


class ExpenseWorkflowMixin:
    _session: Session
    _expense_repo: ExpenseRepository

    def _save_transition(self, expense: Expense, action: str, user_id: str | None, previous, **kwargs) -> None:
        try:
            self._expense_repo.update(expense)
            self._log_expense(
                action,
                expense,
                user_id,
                changes=[status_change(previous, expense.status)],
                **kwargs,
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

    def submit_for_approval(self, expense_id: str, user_id: str | None = None) -> Expense:
        expense = self._require_expense(expense_id)
        if expense.status != ExpenseStatus.DRAFT:
            raise BusinessRuleError(
                "Only draft expenses can be submitted for approval",
                code="INVALID_STATUS",
            )
        validation = validate_expense_classification(
            project_id=expense.project_id,
            cost_code_id=expense.cost_code_id,
            supplier_id=expense.supplier_id,
            amount=expense.amount,
            description=expense.description,
            invoice_date=expense.invoice_date,
            invoice_number=expense.invoice_number,
        )
        self._raise_if_invalid(validation, "Cannot submit incomplete expense")

        previous = expense.status
        now = datetime.now(timezone.utc)
        expense.status = ExpenseStatus.PENDING_APPROVAL
        expense.submitted_at = now
        expense.updated_at = now
        if user_id:
            expense.submitted_by = user_id

        self._save_transition(expense, "expense_submitted", user_id, previous)
        domain_events.expenses_changed.emit(expense.project_id)
        return expense

    def approve_expense(self, expense_id: str, approver_id: str, notes: str | None = None) -> Expense:
        expense = self._require_expense(expense_id)
        if expense.status != ExpenseStatus.PENDING_APPROVAL:
            raise BusinessRuleError("Only pending expenses can be approved", code="INVALID_STATUS")

        previous = expense.status
        now = datetime.now(timezone.utc)
        expense.status = ExpenseStatus.APPROVED
        expense.approved_by = approver_id
        expense.approved_at = now
        expense.updated_at = now
        if notes:
            expense.notes = _append_note(expense.notes, "Approval notes", notes)

        self._save_transition(
            expense,
            "expense_approved",
            approver_id,
            previous,
            financial_impact=FinancialImpact(
                amount=expense.total_amount,
                currency=expense.currency,
                description=f"Expense approved: {expense.description}",
            ),
        )
        domain_events.expenses_changed.emit(expense.project_id)
        return expense

    def reject_expense(self, expense_id: str, rejected_by: str, rejection_reason: str) -> Expense:
        expense = self._require_expense(expense_id)
        if expense.status != ExpenseStatus.PENDING_APPROVAL:
            raise BusinessRuleError("Only pending expenses can be rejected", code="INVALID_STATUS")
        if not (rejection_reason or "").strip():
            raise ValidationError("Rejection reason is required", code="REQUIRED_FIELD")

        previous = expense.status
        now = datetime.now(timezone.utc)
        expense.status = ExpenseStatus.REJECTED
        expense.rejected_by = rejected_by
        expense.rejected_at = now
        expense.rejection_reason = rejection_reason
        expense.updated_at = now

        try:
            self._expense_repo.update(expense)
            self._stage_actuals(expense.project_id, expense.cost_code_id, -expense.total_amount)
            self._log_expense(
                "expense_rejected",
                expense,
                rejected_by,
                changes=[status_change(previous, expense.status)],
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.expenses_changed.emit(expense.project_id)
        domain_events.budgets_changed.emit(expense.project_id)
        return expense

    def record_payment(
        self,
        expense_id: str,
        paid_amount: float,
        paid_date: date,
        payment_method: str | None = None,
        payment_reference: str | None = None,
        notes: str | None = None,
        user_id: str | None = None,
    ) -> Expense:
        """Accumulate a (partial) payment; the expense is paid once the total is covered."""
        expense = self._require_expense(expense_id)
        if expense.status != ExpenseStatus.APPROVED:
            raise BusinessRuleError("Only approved expenses can be paid", code="INVALID_STATUS")
        if paid_amount is None or paid_amount <= 0:
            raise ValidationError("Payment amount must be greater than 0", code="INVALID_AMOUNT")

        new_paid = (expense.paid_amount or 0.0) + paid_amount
        if new_paid - expense.total_amount > PAYMENT_TOLERANCE:
            raise BusinessRuleError(
                "Payment amount exceeds total expense amount",
                code="PAYMENT_EXCEEDS_TOTAL",
            )

        previous = expense.status
        settled = expense.total_amount - new_paid <= PAYMENT_TOLERANCE
        expense.paid_amount = expense.total_amount if settled else new_paid
        expense.paid_date = paid_date
        expense.payment_method = payment_method
        expense.payment_reference = payment_reference
        if settled:
            expense.payment_status = PaymentStatus.PAID
            expense.status = ExpenseStatus.PAID
        else:
            expense.payment_status = PaymentStatus.PARTIAL
        expense.updated_at = datetime.now(timezone.utc)
        if notes:
            expense.notes = _append_note(expense.notes, "Payment notes", notes)

        self._save_transition(
            expense,
            "expense_paid",
            user_id,
            previous,
            financial_impact=FinancialImpact(
                amount=paid_amount,
                currency=expense.currency,
                description=f"Payment recorded: {expense.description}",
            ),
        )
        domain_events.expenses_changed.emit(expense.project_id)
        return expense

    def bulk_approve_expenses(
        self,
        expense_ids: Iterable[str],
        approver_id: str,
        notes: str | None = None,
    ) -> List[Expense]:
        results: List[Expense] = []
        for expense_id in expense_ids:
            try:
                results.append(self.approve_expense(expense_id, approver_id, notes))
            except DomainError as exc:
                logger.warning("Failed to approve expense %s: %s", expense_id, exc)
        return results

    def bulk_reject_expenses(
        self,
        expense_ids: Iterable[str],
        rejected_by: str,
        rejection_reason: str,
    ) -> List[Expense]:
        results: List[Expense] = []
        for expense_id in expense_ids:
            try:
                results.append(self.reject_expense(expense_id, rejected_by, rejection_reason))
            except DomainError as exc:
                logger.warning("Failed to reject expense %s: %s", expense_id, exc)
        return results


__all__ = ["ExpenseWorkflowMixin"]
