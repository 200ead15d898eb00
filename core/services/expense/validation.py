from __future__ import annotations

from datetime import date

from core.models import OCRExpenseInput
from core.services.expense.models import (
    ExpenseValidationIssue,
    ExpenseValidationResult,
    ExpenseValidationWarning,
)
from core.services.expense.policy import (
    OCR_MIN_CONFIDENCE,
    OCR_WARNING_CONFIDENCE,
    large_expense_threshold,
)


def validate_expense_classification(
    *,
    project_id: str | None = None,
    cost_code_id: str | None = None,
    supplier_id: str | None = None,
    amount: float | None = None,
    description: str | None = None,
    invoice_date: date | None = None,
    invoice_number: str | None = None,
) -> ExpenseValidationResult:
    """Mandatory classification checks; errors block the save, warnings do not."""
    errors: list[ExpenseValidationIssue] = []
    warnings: list[ExpenseValidationWarning] = []

    if not project_id:
        errors.append(ExpenseValidationIssue(
            "project_id", "Project is required for proper job costing", "REQUIRED_FIELD",
        ))
    if not cost_code_id:
        errors.append(ExpenseValidationIssue(
            "cost_code_id", "Cost code is required for expense classification", "REQUIRED_FIELD",
        ))
    if not supplier_id:
        errors.append(ExpenseValidationIssue(
            "supplier_id", "Supplier is required for expense tracking", "REQUIRED_FIELD",
        ))
    if amount is None or amount <= 0:
        errors.append(ExpenseValidationIssue(
            "amount", "Amount must be greater than 0", "INVALID_AMOUNT",
        ))
    if not description or len(description.strip()) < 5:
        errors.append(ExpenseValidationIssue(
            "description", "Description must be at least 5 characters long", "INVALID_DESCRIPTION",
        ))
    if invoice_date is None:
        errors.append(ExpenseValidationIssue(
            "invoice_date", "Invoice date is required", "REQUIRED_FIELD",
        ))

    if amount is not None and amount > large_expense_threshold():
        warnings.append(ExpenseValidationWarning(
            "amount",
            "Large expense amount detected",
            "Consider splitting it into several expenses or routing it for special approval",
        ))
    if not invoice_number:
        warnings.append(ExpenseValidationWarning(
            "invoice_number",
            "Invoice number not provided",
            "An invoice number makes tracking and auditing easier",
        ))

    return ExpenseValidationResult(errors=tuple(errors), warnings=tuple(warnings))


def validate_ocr_data(data: OCRExpenseInput) -> ExpenseValidationResult:
    errors: list[ExpenseValidationIssue] = []
    warnings: list[ExpenseValidationWarning] = []

    if data.amount is None or data.amount <= 0:
        errors.append(ExpenseValidationIssue(
            "amount", "Valid amount is required from OCR data", "OCR_MISSING_AMOUNT",
        ))
    if data.date is None:
        errors.append(ExpenseValidationIssue(
            "date", "Date is required from OCR data", "OCR_MISSING_DATE",
        ))
    if not data.supplier or len(data.supplier.strip()) < 2:
        errors.append(ExpenseValidationIssue(
            "supplier", "Supplier name is required from OCR data", "OCR_MISSING_SUPPLIER",
        ))
    if not data.description or len(data.description.strip()) < 3:
        errors.append(ExpenseValidationIssue(
            "description", "Description is required from OCR data", "OCR_MISSING_DESCRIPTION",
        ))
    if data.file is None or not data.file.data:
        errors.append(ExpenseValidationIssue(
            "file", "Original file is required", "OCR_MISSING_FILE",
        ))
    if data.ocr_data is None or data.ocr_data.confidence < OCR_MIN_CONFIDENCE:
        errors.append(ExpenseValidationIssue(
            "ocr_data", "OCR confidence too low or missing OCR data", "OCR_LOW_CONFIDENCE",
        ))

    if data.ocr_data is not None and data.ocr_data.confidence < OCR_WARNING_CONFIDENCE:
        warnings.append(ExpenseValidationWarning(
            "ocr_data", "Low OCR confidence detected", "Manual review recommended",
        ))

    return ExpenseValidationResult(errors=tuple(errors), warnings=tuple(warnings))


__all__ = ["validate_expense_classification", "validate_ocr_data"]
