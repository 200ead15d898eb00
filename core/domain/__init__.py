
from core.domain.audit import AuditLogEntry, FieldChange, FinancialImpact
from core.domain.certificate import CertificateCalculation, CertificatePayment, ProgressCertificate
from core.domain.cost_code import CostCode, CostCodeBudget
from core.domain.enums import (
    AlertSeverity,
    AttachmentType,
    AuditSeverity,
    BudgetStatus,
    CertificateStatus,
    CostType,
    DocumentType,
    ExpenseStatus,
    FinancialHealth,
    PaymentItemStatus,
    PaymentStatus,
    SubcontractStatus,
)
from core.domain.expense import Expense, ExpenseAttachment, OCRData, OCRExpenseInput, OCRFile
from core.domain.identifiers import generate_id, generate_reference
from core.domain.subcontract import PaymentScheduleItem, Subcontract, SubcontractDocument

__all__ = [
    "generate_id",
    "generate_reference",
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
    "CostCode",
    "CostCodeBudget",
    "Subcontract",
    "PaymentScheduleItem",
    "SubcontractDocument",
    "ProgressCertificate",
    "CertificateCalculation",
    "CertificatePayment",
    "Expense",
    "ExpenseAttachment",
    "OCRData",
    "OCRFile",
    "OCRExpenseInput",
    "AuditLogEntry",
    "FieldChange",
    "FinancialImpact",
]
