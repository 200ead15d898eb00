from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Optional

from core.domain.enums import AttachmentType, ExpenseStatus, PaymentStatus
from core.domain.identifiers import generate_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OCRData:
    raw_text: str
    confidence: float
    processed_at: datetime
    extracted_fields: dict[str, Any] = field(default_factory=dict)
    ocr_provider: Optional[str] = None


@dataclass(frozen=True)
class OCRFile:
    name: str
    mime_type: str
    data: str  # base64 payload


@dataclass
class OCRExpenseInput:
    """Payload handed over by the OCR collaborator; only consumed here."""

    amount: float
    date: Optional[date]
    supplier: str
    description: str
    ocr_data: Optional[OCRData]
    file: Optional[OCRFile]
    tax_amount: Optional[float] = None
    invoice_number: Optional[str] = None
    project_id: Optional[str] = None
    cost_code_id: Optional[str] = None
    supplier_id: Optional[str] = None


@dataclass
class ExpenseAttachment:
    id: str
    name: str
    attachment_type: AttachmentType
    url: str
    size: int
    mime_type: str
    uploaded_by: Optional[str] = None
    upload_date: datetime = field(default_factory=_utc_now)

    @staticmethod
    def create(
        name: str,
        attachment_type: AttachmentType,
        url: str,
        size: int,
        mime_type: str,
        uploaded_by: Optional[str] = None,
    ) -> "ExpenseAttachment":
        return ExpenseAttachment(
            id=generate_id(),
            name=name,
            attachment_type=attachment_type,
            url=url,
            size=size,
            mime_type=mime_type,
            uploaded_by=uploaded_by,
        )


@dataclass
class Expense:
    id: str
    project_id: str
    cost_code_id: str
    supplier_id: str
    amount: float
    total_amount: float
    description: str
    invoice_date: date
    project_name: str = ""
    supplier_name: str = ""
    expense_number: Optional[str] = None
    currency: str = "USD"
    tax_amount: float = 0.0
    invoice_number: Optional[str] = None
    due_date: Optional[date] = None

    status: ExpenseStatus = ExpenseStatus.DRAFT
    payment_status: PaymentStatus = PaymentStatus.UNPAID

    submitted_by: Optional[str] = None
    submitted_at: datetime = field(default_factory=_utc_now)
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    is_auto_created: bool = False
    ocr_confidence: Optional[float] = None
    ocr_data: Optional[OCRData] = None
    needs_review: bool = False

    attachments: list[ExpenseAttachment] = field(default_factory=list)

    paid_amount: float = 0.0
    paid_date: Optional[date] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None

    notes: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @staticmethod
    def create(
        project_id: str,
        cost_code_id: str,
        supplier_id: str,
        amount: float,
        description: str,
        invoice_date: date,
        tax_amount: Optional[float] = None,
        **extra,
    ) -> "Expense":
        tax = float(tax_amount or 0.0)
        now = _utc_now()
        return Expense(
            id=generate_id(),
            project_id=project_id,
            cost_code_id=cost_code_id,
            supplier_id=supplier_id,
            amount=amount,
            tax_amount=tax,
            total_amount=amount + tax,
            description=description,
            invoice_date=invoice_date,
            submitted_at=now,
            created_at=now,
            updated_at=now,
            **extra,
        )


__all__ = [
    "OCRData",
    "OCRFile",
    "OCRExpenseInput",
    "ExpenseAttachment",
    "Expense",
]
