from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from core.domain.enums import CertificateStatus
from core.domain.identifiers import generate_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CertificateCalculation:
    amount_certified: float
    retention_amount: float
    net_payable: float
    cumulative_certified: float
    remaining_balance: float
    percentage_complete: float


@dataclass
class ProgressCertificate:
    id: str
    certificate_number: str
    subcontract_id: str
    project_id: str
    period_start: date
    period_end: date
    percentage_complete: float
    amount_certified: float
    retention_amount: float
    net_payable: float
    previous_certified: float
    cumulative_certified: float
    status: CertificateStatus = CertificateStatus.DRAFT
    submitted_by: Optional[str] = None
    submitted_at: datetime = field(default_factory=_utc_now)
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    payment_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    # Payment-schedule item certified on approval and paid with the certificate.
    schedule_item_id: Optional[str] = None
    photos: list[str] = field(default_factory=list)
    documents: list[str] = field(default_factory=list)
    notes: str = ""
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @staticmethod
    def create(
        certificate_number: str,
        subcontract_id: str,
        project_id: str,
        period_start: date,
        period_end: date,
        percentage_complete: float,
        calculation: CertificateCalculation,
        previous_certified: float,
        submitted_by: Optional[str] = None,
        photos: Optional[list[str]] = None,
        documents: Optional[list[str]] = None,
        notes: str = "",
    ) -> "ProgressCertificate":
        now = _utc_now()
        return ProgressCertificate(
            id=generate_id(),
            certificate_number=certificate_number,
            subcontract_id=subcontract_id,
            project_id=project_id,
            period_start=period_start,
            period_end=period_end,
            percentage_complete=percentage_complete,
            amount_certified=calculation.amount_certified,
            retention_amount=calculation.retention_amount,
            net_payable=calculation.net_payable,
            previous_certified=previous_certified,
            cumulative_certified=calculation.cumulative_certified,
            status=CertificateStatus.DRAFT,
            submitted_by=submitted_by,
            submitted_at=now,
            photos=list(photos or []),
            documents=list(documents or []),
            notes=notes,
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class CertificatePayment:
    id: str
    certificate_id: str
    subcontract_id: str
    amount: float
    retention_amount: float
    status: str
    created_at: datetime


__all__ = ["CertificateCalculation", "ProgressCertificate", "CertificatePayment"]
