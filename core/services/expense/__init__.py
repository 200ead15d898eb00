from .models import (
    ExpenseFilters,
    ExpenseStats,
    ExpenseValidationIssue,
    ExpenseValidationResult,
    ExpenseValidationWarning,
)
from .service import ExpenseService
from .validation import validate_expense_classification, validate_ocr_data

__all__ = [
    "ExpenseService",
    "ExpenseFilters",
    "ExpenseStats",
    "ExpenseValidationIssue",
    "ExpenseValidationResult",
    "ExpenseValidationWarning",
    "validate_expense_classification",
    "validate_ocr_data",
]
