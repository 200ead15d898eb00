from __future__ import annotations

from core.models import CertificateStatus, ProgressCertificate
from infra.db.codec import from_db_datetime, list_from_json, to_db_datetime, to_json
from infra.db.models import ProgressCertificateORM


def certificate_to_orm(certificate: ProgressCertificate) -> ProgressCertificateORM:
    return ProgressCertificateORM(
        id=certificate.id,
        certificate_number=certificate.certificate_number,
        subcontract_id=certificate.subcontract_id,
        project_id=certificate.project_id,
        period_start=certificate.period_start,
        period_end=certificate.period_end,
        percentage_complete=certificate.percentage_complete,
        amount_certified=certificate.amount_certified,
        retention_amount=certificate.retention_amount,
        net_payable=certificate.net_payable,
        previous_certified=certificate.previous_certified,
        cumulative_certified=certificate.cumulative_certified,
        status=certificate.status,
        submitted_by=certificate.submitted_by,
        submitted_at=to_db_datetime(certificate.submitted_at),
        approved_by=certificate.approved_by,
        approved_at=to_db_datetime(certificate.approved_at),
        rejected_by=certificate.rejected_by,
        rejected_at=to_db_datetime(certificate.rejected_at),
        rejection_reason=certificate.rejection_reason,
        payment_id=certificate.payment_id,
        paid_at=to_db_datetime(certificate.paid_at),
        schedule_item_id=certificate.schedule_item_id,
        photos_json=to_json(list(certificate.photos)),
        documents_json=to_json(list(certificate.documents)),
        notes=certificate.notes,
        created_at=to_db_datetime(certificate.created_at),
        updated_at=to_db_datetime(certificate.updated_at),
    )


def certificate_from_orm(obj: ProgressCertificateORM) -> ProgressCertificate:
    return ProgressCertificate(
        id=obj.id,
        certificate_number=obj.certificate_number,
        subcontract_id=obj.subcontract_id,
        project_id=obj.project_id,
        period_start=obj.period_start,
        period_end=obj.period_end,
        percentage_complete=obj.percentage_complete or 0.0,
        amount_certified=obj.amount_certified or 0.0,
        retention_amount=obj.retention_amount or 0.0,
        net_payable=obj.net_payable or 0.0,
        previous_certified=obj.previous_certified or 0.0,
        cumulative_certified=obj.cumulative_certified or 0.0,
        status=CertificateStatus(obj.status),
        submitted_by=obj.submitted_by,
        submitted_at=from_db_datetime(obj.submitted_at),
        approved_by=obj.approved_by,
        approved_at=from_db_datetime(obj.approved_at),
        rejected_by=obj.rejected_by,
        rejected_at=from_db_datetime(obj.rejected_at),
        rejection_reason=obj.rejection_reason,
        payment_id=obj.payment_id,
        paid_at=from_db_datetime(obj.paid_at),
        schedule_item_id=obj.schedule_item_id,
        photos=[str(p) for p in list_from_json(obj.photos_json)],
        documents=[str(d) for d in list_from_json(obj.documents_json)],
        notes=obj.notes or "",
        created_at=from_db_datetime(obj.created_at),
        updated_at=from_db_datetime(obj.updated_at),
    )


__all__ = ["certificate_to_orm", "certificate_from_orm"]
