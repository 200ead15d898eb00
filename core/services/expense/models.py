from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from core.models import ExpenseStatus, PaymentStatus


@dataclass(frozen=True)
class ExpenseValidationIssue:
    field: str
    message: str
    code: str


@dataclass(frozen=True)
class ExpenseValidationWarning:
    field: str
    message: str
    suggestion: str = ""


@dataclass(frozen=True)
class ExpenseValidationResult:
    errors: tuple[ExpenseValidationIssue, ...] = ()
    warnings: tuple[ExpenseValidationWarning, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        return ", ".join(error.message for error in self.errors)


@dataclass(frozen=True)
class ExpenseFilters:
    project_id: str | None = None
    cost_code_id: str | None = None
    supplier_id: str | None = None
    status: ExpenseStatus | None = None
    payment_status: PaymentStatus | None = None
    is_auto_created: bool | None = None
    needs_review: bool | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    search: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExpenseStats:
    total: int
    draft: int
    pending_approval: int
    approved: int
    paid: int
    rejected: int
    total_amount: float
    paid_amount: float
    unpaid_amount: float
    auto_created: int
    needing_review: int
    average_amount: float
    by_project: dict[str, float] = field(default_factory=dict)
    by_cost_code: dict[str, float] = field(default_factory=dict)
    by_supplier: dict[str, float] = field(default_factory=dict)


__all__ = [
    "ExpenseValidationIssue",
    "ExpenseValidationWarning",
    "ExpenseValidationResult",
    "ExpenseFilters",
    "ExpenseStats",
]
