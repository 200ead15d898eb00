from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import ExpenseRepository
from core.models import (
    AttachmentType,
    CostCode,
    Expense,
    ExpenseAttachment,
    ExpenseStatus,
    FieldChange,
    FinancialImpact,
    OCRExpenseInput,
    PaymentStatus,
)
from core.services.audit.helpers import SYSTEM_USER_ID
from core.services.audit.service import AuditLogService
from core.services.common.policy import resolve_currency
from core.services.cost_code.service import CostCodeService
from core.services.expense.models import ExpenseValidationResult
from core.services.expense.policy import (
    OCR_REVIEW_CONFIDENCE,
    OCR_USER_ID,
    ocr_default_project_id,
    ocr_default_supplier_id,
)
from core.services.expense.validation import validate_expense_classification, validate_ocr_data


logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "project_id",
    "project_name",
    "cost_code_id",
    "supplier_id",
    "supplier_name",
    "amount",
    "tax_amount",
    "description",
    "invoice_number",
    "invoice_date",
    "due_date",
    "notes",
    "tags",
}
# fields checked by validate_expense_classification
_VALIDATED_FIELDS = {"project_id", "cost_code_id", "supplier_id", "amount", "description", "invoice_date"}


class ExpenseIntakeMixin:
    _session: Session
    _expense_repo: ExpenseRepository
    _cost_code_service: CostCodeService
    _audit_service: AuditLogService | None

    def _require_expense(self, expense_id: str) -> Expense:
        expense = self._expense_repo.get(expense_id)
        if expense is None:
            raise NotFoundError("Expense not found", code="EXPENSE_NOT_FOUND")
        return expense

    def _resolve_cost_code(self, cost_code_id: str) -> CostCode:
        cost_code = self._cost_code_service.get_cost_code(cost_code_id)
        if cost_code is None:
            raise NotFoundError("Invalid cost code", code="COST_CODE_NOT_FOUND")
        return cost_code

    def _log_expense(self, action: str, expense: Expense, user_id: str | None, **kwargs) -> None:
        if self._audit_service is None:
            return
        actor = user_id or SYSTEM_USER_ID
        self._audit_service.log_expense_action(
            action,
            expense.id,
            expense.description,
            actor,
            actor,
            project_id=expense.project_id,
            **kwargs,
        )

    def _stage_actuals(self, project_id: str, cost_code_id: str, amount: float) -> None:
        # Budgets may not exist yet for the pair; that soft miss is fine.
        if amount:
            self._cost_code_service.update_budget_actuals(project_id, cost_code_id, amount, commit=False)

    @staticmethod
    def _raise_if_invalid(result: ExpenseValidationResult, prefix: str) -> None:
        if result.is_valid:
            return
        raise ValidationError(f"{prefix}: {result.summary()}", code=result.errors[0].code)

    def validate_classification(self, **fields) -> ExpenseValidationResult:
        return validate_expense_classification(**fields)

    def validate_ocr_data(self, data: OCRExpenseInput) -> ExpenseValidationResult:
        return validate_ocr_data(data)

    def create_expense(
        self,
        project_id: str | None,
        cost_code_id: str | None,
        supplier_id: str | None,
        amount: float,
        description: str,
        invoice_date: date | None,
        tax_amount: float | None = None,
        project_name: str = "",
        supplier_name: str = "",
        currency: str | None = None,
        invoice_number: str | None = None,
        due_date: date | None = None,
        notes: str | None = None,
        tags: Optional[list[str]] = None,
        submitted_by: str | None = None,
    ) -> Expense:
        validation = validate_expense_classification(
            project_id=project_id,
            cost_code_id=cost_code_id,
            supplier_id=supplier_id,
            amount=amount,
            description=description,
            invoice_date=invoice_date,
            invoice_number=invoice_number,
        )
        self._raise_if_invalid(validation, "Validation failed")
        self._resolve_cost_code(cost_code_id)
        for warning in validation.warnings:
            logger.debug("Expense warning on %s: %s", warning.field, warning.message)

        expense = Expense.create(
            project_id=project_id,
            cost_code_id=cost_code_id,
            supplier_id=supplier_id,
            amount=amount,
            description=description,
            invoice_date=invoice_date,
            tax_amount=tax_amount,
            project_name=project_name,
            supplier_name=supplier_name,
            currency=resolve_currency(currency),
            invoice_number=invoice_number,
            due_date=due_date,
            status=ExpenseStatus.DRAFT,
            payment_status=PaymentStatus.UNPAID,
            submitted_by=submitted_by,
            is_auto_created=False,
            needs_review=False,
            notes=notes,
            tags=list(tags or []),
        )

        try:
            self._expense_repo.add(expense)
            self._stage_actuals(expense.project_id, expense.cost_code_id, expense.total_amount)
            self._log_expense(
                "expense_created",
                expense,
                submitted_by,
                financial_impact=FinancialImpact(
                    amount=expense.total_amount,
                    currency=expense.currency,
                    description=f"Expense recorded: {expense.description}",
                ),
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.expenses_changed.emit(expense.project_id)
        domain_events.budgets_changed.emit(expense.project_id)
        return expense

    def create_expense_from_ocr(self, data: OCRExpenseInput) -> Expense:
        """Record an OCR-extracted invoice straight into the approval queue."""
        validation = validate_ocr_data(data)
        self._raise_if_invalid(validation, "OCR data validation failed")

        cost_code_id = data.cost_code_id
        if not cost_code_id:
            suggestions = self._cost_code_service.suggest_cost_codes(data.description, 1)
            if suggestions:
                cost_code_id = suggestions[0].id
        if not cost_code_id:
            raise ValidationError(
                "Cost code is required for expense classification",
                code="REQUIRED_FIELD",
            )
        self._resolve_cost_code(cost_code_id)

        project_id = data.project_id or ocr_default_project_id()
        supplier_id = data.supplier_id or ocr_default_supplier_id()
        now = datetime.now(timezone.utc)
        confidence = data.ocr_data.confidence

        expense = Expense.create(
            project_id=project_id,
            cost_code_id=cost_code_id,
            supplier_id=supplier_id,
            amount=data.amount,
            description=data.description,
            invoice_date=data.date,
            tax_amount=data.tax_amount,
            supplier_name=data.supplier,
            currency=resolve_currency(None),
            expense_number=f"AUTO-{int(now.timestamp() * 1000)}",
            invoice_number=data.invoice_number,
            status=ExpenseStatus.PENDING_APPROVAL,
            payment_status=PaymentStatus.UNPAID,
            submitted_by=OCR_USER_ID,
            is_auto_created=True,
            ocr_confidence=confidence,
            ocr_data=data.ocr_data,
            needs_review=confidence < OCR_REVIEW_CONFIDENCE,
        )
        expense.attachments = [
            ExpenseAttachment.create(
                name=data.file.name,
                attachment_type=AttachmentType.INVOICE,
                url=f"/uploads/expenses/{expense.id}/{data.file.name}",
                size=len(data.file.data),
                mime_type=data.file.mime_type,
                uploaded_by=OCR_USER_ID,
            )
        ]

        try:
            self._expense_repo.add(expense)
            self._stage_actuals(expense.project_id, expense.cost_code_id, expense.total_amount)
            self._log_expense(
                "expense_created",
                expense,
                OCR_USER_ID,
                financial_impact=FinancialImpact(
                    amount=expense.total_amount,
                    currency=expense.currency,
                    description=f"OCR expense recorded: {expense.description}",
                ),
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info(
            "OCR expense %s created (confidence %.2f, needs review: %s)",
            expense.expense_number,
            confidence,
            expense.needs_review,
        )
        domain_events.expenses_changed.emit(expense.project_id)
        domain_events.budgets_changed.emit(expense.project_id)
        return expense

    def update_expense(self, expense_id: str, user_id: str | None = None, **changes) -> Expense:
        expense = self._require_expense(expense_id)
        if expense.status == ExpenseStatus.PAID:
            raise BusinessRuleError("Cannot update paid expenses", code="INVALID_STATUS")
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown expense field(s): {', '.join(sorted(unknown))}",
                code="INVALID_FIELD",
            )

        if _VALIDATED_FIELDS & set(changes):
            validation = validate_expense_classification(
                project_id=changes.get("project_id", expense.project_id),
                cost_code_id=changes.get("cost_code_id", expense.cost_code_id),
                supplier_id=changes.get("supplier_id", expense.supplier_id),
                amount=changes.get("amount", expense.amount),
                description=changes.get("description", expense.description),
                invoice_date=changes.get("invoice_date", expense.invoice_date),
                invoice_number=changes.get("invoice_number", expense.invoice_number),
            )
            self._raise_if_invalid(validation, "Validation failed")
        if changes.get("cost_code_id") and changes["cost_code_id"] != expense.cost_code_id:
            self._resolve_cost_code(changes["cost_code_id"])

        old_project, old_cost_code, old_total = expense.project_id, expense.cost_code_id, expense.total_amount
        field_changes: list[FieldChange] = []
        for name, value in changes.items():
            previous = getattr(expense, name)
            if previous != value:
                field_changes.append(FieldChange(field=name, old_value=previous, new_value=value))
            setattr(expense, name, list(value or []) if name == "tags" else value)
        expense.tax_amount = float(expense.tax_amount or 0.0)
        expense.total_amount = expense.amount + expense.tax_amount
        expense.updated_at = datetime.now(timezone.utc)

        try:
            self._expense_repo.update(expense)
            if expense.status != ExpenseStatus.REJECTED:
                self._move_actuals(old_project, old_cost_code, old_total, expense)
            if field_changes:
                self._log_expense("expense_updated", expense, user_id, changes=field_changes)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.expenses_changed.emit(expense.project_id)
        domain_events.budgets_changed.emit(expense.project_id)
        if old_project != expense.project_id:
            domain_events.expenses_changed.emit(old_project)
            domain_events.budgets_changed.emit(old_project)
        return expense

    def _move_actuals(self, old_project: str, old_cost_code: str, old_total: float, expense: Expense) -> None:
        if (old_project, old_cost_code) == (expense.project_id, expense.cost_code_id):
            self._stage_actuals(expense.project_id, expense.cost_code_id, expense.total_amount - old_total)
            return
        self._stage_actuals(old_project, old_cost_code, -old_total)
        self._stage_actuals(expense.project_id, expense.cost_code_id, expense.total_amount)

    def classify_expense(
        self,
        expense_id: str,
        project_id: str,
        cost_code_id: str,
        supplier_id: str,
        project_name: str | None = None,
        supplier_name: str | None = None,
        user_id: str | None = None,
    ) -> Expense:
        """Set or correct the mandatory classification and clear the review flag."""
        expense = self._require_expense(expense_id)
        validation = validate_expense_classification(
            project_id=project_id,
            cost_code_id=cost_code_id,
            supplier_id=supplier_id,
            amount=expense.amount,
            description=expense.description,
            invoice_date=expense.invoice_date,
            invoice_number=expense.invoice_number,
        )
        self._raise_if_invalid(validation, "Classification validation failed")
        self._resolve_cost_code(cost_code_id)

        old_project, old_cost_code = expense.project_id, expense.cost_code_id
        field_changes = [
            FieldChange(field=name, old_value=getattr(expense, name), new_value=value)
            for name, value in (
                ("project_id", project_id),
                ("cost_code_id", cost_code_id),
                ("supplier_id", supplier_id),
            )
            if getattr(expense, name) != value
        ]
        expense.project_id = project_id
        expense.cost_code_id = cost_code_id
        expense.supplier_id = supplier_id
        if project_name is not None:
            expense.project_name = project_name
        if supplier_name is not None:
            expense.supplier_name = supplier_name
        expense.needs_review = False
        expense.updated_at = datetime.now(timezone.utc)

        try:
            self._expense_repo.update(expense)
            if expense.status != ExpenseStatus.REJECTED:
                self._move_actuals(old_project, old_cost_code, expense.total_amount, expense)
            self._log_expense("expense_classified", expense, user_id, changes=field_changes)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.expenses_changed.emit(expense.project_id)
        domain_events.budgets_changed.emit(expense.project_id)
        if old_project != expense.project_id:
            domain_events.expenses_changed.emit(old_project)
            domain_events.budgets_changed.emit(old_project)
        return expense

    def delete_expense(self, expense_id: str, user_id: str | None = None) -> None:
        expense = self._require_expense(expense_id)
        if expense.status != ExpenseStatus.DRAFT:
            raise BusinessRuleError("Only draft expenses can be deleted", code="NOT_DELETABLE")

        try:
            self._expense_repo.delete(expense_id)
            self._stage_actuals(expense.project_id, expense.cost_code_id, -expense.total_amount)
            self._log_expense("expense_deleted", expense, user_id)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.expenses_changed.emit(expense.project_id)
        domain_events.budgets_changed.emit(expense.project_id)


__all__ = ["ExpenseIntakeMixin"]
