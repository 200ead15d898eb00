# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    String,
    Text,
    Date,
    DateTime,
    Float,
    Boolean,
    ForeignKey,
    Enum as SAEnum,
    Index,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base
from core.models import (
    BudgetStatus,
    CertificateStatus,
    CostType,
    ExpenseStatus,
    PaymentItemStatus,
    PaymentStatus,
    SubcontractStatus,
    DocumentType,
    AuditSeverity,
)


class CostCodeORM(Base):
    __tablename__ = "cost_codes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    division: Mapped[str] = mapped_column(String(16), nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    subcategory: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    cost_type: Mapped[CostType] = mapped_column(
        SAEnum(CostType), default=CostType.OTHER, nullable=False
    )
    unit: Mapped[str] = mapped_column(String(32), default="global")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags_json: Mapped[str] = mapped_column(Text, default="[]")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

Index("ux_cost_codes_code", CostCodeORM.code, unique=True)
Index("idx_cost_codes_division", CostCodeORM.division)

class CostCodeBudgetORM(Base):
    __tablename__ = "cost_code_budgets"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    cost_code_id: Mapped[str] = mapped_column(String, ForeignKey("cost_codes.id"), nullable=False)
    budgeted_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    budgeted_unit_price: Mapped[float] = mapped_column(Float, default=0.0)
    budgeted_amount: Mapped[float] = mapped_column(Float, default=0.0)
    committed_amount: Mapped[float] = mapped_column(Float, default=0.0)
    committed_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    actual_amount: Mapped[float] = mapped_column(Float, default=0.0)
    actual_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    variance: Mapped[float] = mapped_column(Float, default=0.0)
    variance_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    percentage_complete: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[BudgetStatus] = mapped_column(
        SAEnum(BudgetStatus), default=BudgetStatus.UNDER_BUDGET, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_calculated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

Index("idx_budgets_project", CostCodeBudgetORM.project_id)
Index("idx_budgets_cost_code", CostCodeBudgetORM.cost_code_id)
Index(
    "ux_budgets_project_cost_code",
    CostCodeBudgetORM.project_id,
    CostCodeBudgetORM.cost_code_id,
    unique=True,
)

class SubcontractORM(Base):
    __tablename__ = "subcontracts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    contract_number: Mapped[str] = mapped_column(String(64), nullable=False)
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    project_name: Mapped[str] = mapped_column(String, default="")
    subcontractor_id: Mapped[str] = mapped_column(String, nullable=False)
    subcontractor_name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    scope: Mapped[str] = mapped_column(Text, default="")
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(8), default="USD")
    retention_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    advance_payment_percentage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    status: Mapped[SubcontractStatus] = mapped_column(
        SAEnum(SubcontractStatus), default=SubcontractStatus.DRAFT, nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    cost_codes_json: Mapped[str] = mapped_column(Text, default="[]")
    total_certified: Mapped[float] = mapped_column(Float, default=0.0)
    total_paid: Mapped[float] = mapped_column(Float, default=0.0)
    total_retained: Mapped[float] = mapped_column(Float, default=0.0)
    remaining_balance: Mapped[float] = mapped_column(Float, default=0.0)
    approved_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    terms: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    warranty_period: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

Index("idx_subcontracts_project", SubcontractORM.project_id)
Index("idx_subcontracts_subcontractor", SubcontractORM.subcontractor_id)
Index("idx_subcontracts_status", SubcontractORM.status)

class PaymentScheduleItemORM(Base):
    __tablename__ = "payment_schedule_items"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    subcontract_id: Mapped[str] = mapped_column(
        String, ForeignKey("subcontracts.id", ondelete="CASCADE"), nullable=False
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    percentage: Mapped[float] = mapped_column(Float, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[PaymentItemStatus] = mapped_column(
        SAEnum(PaymentItemStatus), default=PaymentItemStatus.PENDING, nullable=False
    )
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    certified_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

Index("idx_schedule_items_subcontract", PaymentScheduleItemORM.subcontract_id, PaymentScheduleItemORM.sequence)

class SubcontractDocumentORM(Base):
    __tablename__ = "subcontract_documents"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    subcontract_id: Mapped[str] = mapped_column(
        String, ForeignKey("subcontracts.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    document_type: Mapped[DocumentType] = mapped_column(
        SAEnum(DocumentType), default=DocumentType.OTHER, nullable=False
    )
    url: Mapped[str] = mapped_column(String, nullable=False)
    size: Mapped[int] = mapped_column(Integer, default=0)
    mime_type: Mapped[str] = mapped_column(String(128), default="")
    uploaded_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    upload_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

Index("idx_subcontract_documents_subcontract", SubcontractDocumentORM.subcontract_id)

class ProgressCertificateORM(Base):
    __tablename__ = "progress_certificates"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    certificate_number: Mapped[str] = mapped_column(String(64), nullable=False)
    subcontract_id: Mapped[str] = mapped_column(
        String, ForeignKey("subcontracts.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    percentage_complete: Mapped[float] = mapped_column(Float, default=0.0)
    amount_certified: Mapped[float] = mapped_column(Float, default=0.0)
    retention_amount: Mapped[float] = mapped_column(Float, default=0.0)
    net_payable: Mapped[float] = mapped_column(Float, default=0.0)
    previous_certified: Mapped[float] = mapped_column(Float, default=0.0)
    cumulative_certified: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[CertificateStatus] = mapped_column(
        SAEnum(CertificateStatus), default=CertificateStatus.DRAFT, nullable=False
    )
    submitted_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    approved_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejected_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    rejected_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    payment_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    schedule_item_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    photos_json: Mapped[str] = mapped_column(Text, default="[]")
    documents_json: Mapped[str] = mapped_column(Text, default="[]")
    notes: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

Index("idx_certificates_subcontract", ProgressCertificateORM.subcontract_id)
Index("idx_certificates_project", ProgressCertificateORM.project_id)
Index("idx_certificates_status", ProgressCertificateORM.status)

class ExpenseORM(Base):
    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    expense_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    project_name: Mapped[str] = mapped_column(String, default="")
    cost_code_id: Mapped[str] = mapped_column(String, nullable=False)
    supplier_id: Mapped[str] = mapped_column(String, nullable=False)
    supplier_name: Mapped[str] = mapped_column(String, default="")
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(8), default="USD")
    tax_amount: Mapped[float] = mapped_column(Float, default=0.0)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    invoice_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[ExpenseStatus] = mapped_column(
        SAEnum(ExpenseStatus), default=ExpenseStatus.DRAFT, nullable=False
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False
    )
    submitted_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    approved_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejected_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    rejected_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_auto_created: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ocr_confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ocr_data_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    needs_review: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    attachments_json: Mapped[str] = mapped_column(Text, default="[]")
    paid_amount: Mapped[float] = mapped_column(Float, default=0.0)
    paid_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags_json: Mapped[str] = mapped_column(Text, default="[]")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

Index("idx_expenses_project", ExpenseORM.project_id)
Index("idx_expenses_cost_code", ExpenseORM.cost_code_id)
Index("idx_expenses_status", ExpenseORM.status)

class AuditLogORM(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    entity_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    user_name: Mapped[str] = mapped_column(String, nullable=False)
    project_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    project_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[str] = mapped_column(Text, default="")
    severity: Mapped[AuditSeverity] = mapped_column(
        SAEnum(AuditSeverity), default=AuditSeverity.INFO, nullable=False
    )
    financial_impact_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    changes_json: Mapped[str] = mapped_column(Text, default="[]")
    tags_json: Mapped[str] = mapped_column(Text, default="[]")
    metadata_json: Mapped[str] = mapped_column(Text, default="{}")

Index("idx_audit_logs_occurred_at", AuditLogORM.occurred_at)
Index("idx_audit_logs_entity", AuditLogORM.entity_type, AuditLogORM.entity_id)
Index("idx_audit_logs_project", AuditLogORM.project_id)
