from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import DocumentType, PaymentItemStatus, SubcontractStatus
from core.domain.identifiers import generate_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PaymentScheduleItem:
    id: str
    subcontract_id: str
    sequence: int
    description: str
    percentage: float
    amount: float
    status: PaymentItemStatus = PaymentItemStatus.PENDING
    due_date: Optional[date] = None
    certified_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None

    @staticmethod
    def create(
        subcontract_id: str,
        sequence: int,
        description: str,
        percentage: float,
        total_amount: float,
        due_date: Optional[date] = None,
    ) -> "PaymentScheduleItem":
        return PaymentScheduleItem(
            id=generate_id(),
            subcontract_id=subcontract_id,
            sequence=sequence,
            description=description,
            percentage=percentage,
            amount=(total_amount * percentage) / 100,
            status=PaymentItemStatus.PENDING,
            due_date=due_date,
        )


@dataclass
class SubcontractDocument:
    id: str
    subcontract_id: str
    name: str
    document_type: DocumentType
    url: str
    size: int
    mime_type: str
    uploaded_by: Optional[str] = None
    upload_date: datetime = field(default_factory=_utc_now)

    @staticmethod
    def create(
        subcontract_id: str,
        name: str,
        document_type: DocumentType,
        size: int,
        mime_type: str,
        uploaded_by: Optional[str] = None,
    ) -> "SubcontractDocument":
        return SubcontractDocument(
            id=generate_id(),
            subcontract_id=subcontract_id,
            name=name,
            document_type=document_type,
            url=f"/documents/subcontracts/{subcontract_id}/{name}",
            size=size,
            mime_type=mime_type,
            uploaded_by=uploaded_by,
        )


@dataclass
class Subcontract:
    id: str
    contract_number: str
    project_id: str
    subcontractor_id: str
    subcontractor_name: str
    total_amount: float
    retention_percentage: float
    start_date: date
    end_date: date
    project_name: str = ""
    description: str = ""
    scope: str = ""
    currency: str = "USD"
    advance_payment_percentage: Optional[float] = None
    status: SubcontractStatus = SubcontractStatus.DRAFT
    completion_date: Optional[date] = None
    payment_schedule: list[PaymentScheduleItem] = field(default_factory=list)
    cost_codes: list[str] = field(default_factory=list)
    documents: list[SubcontractDocument] = field(default_factory=list)

    total_certified: float = 0.0
    total_paid: float = 0.0
    total_retained: float = 0.0
    remaining_balance: float = 0.0

    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_by: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    warranty_period: Optional[int] = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @staticmethod
    def create(
        contract_number: str,
        project_id: str,
        subcontractor_id: str,
        subcontractor_name: str,
        total_amount: float,
        retention_percentage: float,
        start_date: date,
        end_date: date,
        **extra,
    ) -> "Subcontract":
        return Subcontract(
            id=generate_id(),
            contract_number=contract_number,
            project_id=project_id,
            subcontractor_id=subcontractor_id,
            subcontractor_name=subcontractor_name,
            total_amount=total_amount,
            retention_percentage=retention_percentage,
            start_date=start_date,
            end_date=end_date,
            remaining_balance=total_amount,
            **extra,
        )


__all__ = ["PaymentScheduleItem", "SubcontractDocument", "Subcontract"]
