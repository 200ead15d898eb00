from __future__ import annotations

from enum import Enum


class CostType(str, Enum):
    LABOR = "labor"
    MATERIAL = "material"
    EQUIPMENT = "equipment"
    SUBCONTRACT = "subcontract"
    OTHER = "other"


class BudgetStatus(str, Enum):
    UNDER_BUDGET = "under_budget"
    ON_BUDGET = "on_budget"
    CRITICAL = "critical"
    OVER_BUDGET = "over_budget"


class SubcontractStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentItemStatus(str, Enum):
    PENDING = "pending"
    CERTIFIED = "certified"
    PAID = "paid"


class DocumentType(str, Enum):
    CONTRACT = "contract"
    QUOTE = "quote"
    SPECIFICATION = "specification"
    INSURANCE = "insurance"
    OTHER = "other"


class CertificateStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    PAID = "paid"
    REJECTED = "rejected"


class ExpenseStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    PAID = "paid"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class AttachmentType(str, Enum):
    INVOICE = "invoice"
    RECEIPT = "receipt"
    QUOTE = "quote"
    CONTRACT = "contract"
    OTHER = "other"


class AuditSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class FinancialHealth(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


__all__ = [
    "CostType",
    "BudgetStatus",
    "SubcontractStatus",
    "PaymentItemStatus",
    "DocumentType",
    "CertificateStatus",
    "ExpenseStatus",
    "PaymentStatus",
    "AttachmentType",
    "AuditSeverity",
    "FinancialHealth",
    "AlertSeverity",
]
