from __future__ import annotations

from core.models import (
    DocumentType,
    PaymentItemStatus,
    PaymentScheduleItem,
    Subcontract,
    SubcontractDocument,
    SubcontractStatus,
)
from infra.db.codec import from_db_datetime, list_from_json, to_db_datetime, to_json
from infra.db.models import PaymentScheduleItemORM, SubcontractDocumentORM, SubcontractORM


def schedule_item_to_orm(item: PaymentScheduleItem) -> PaymentScheduleItemORM:
    return PaymentScheduleItemORM(
        id=item.id,
        subcontract_id=item.subcontract_id,
        sequence=item.sequence,
        description=item.description,
        percentage=item.percentage,
        amount=item.amount,
        status=item.status,
        due_date=item.due_date,
        certified_date=to_db_datetime(item.certified_date),
        paid_date=to_db_datetime(item.paid_date),
    )


def schedule_item_from_orm(obj: PaymentScheduleItemORM) -> PaymentScheduleItem:
    return PaymentScheduleItem(
        id=obj.id,
        subcontract_id=obj.subcontract_id,
        sequence=obj.sequence,
        description=obj.description or "",
        percentage=obj.percentage,
        amount=obj.amount,
        status=PaymentItemStatus(obj.status),
        due_date=obj.due_date,
        certified_date=from_db_datetime(obj.certified_date),
        paid_date=from_db_datetime(obj.paid_date),
    )


def document_to_orm(document: SubcontractDocument) -> SubcontractDocumentORM:
    return SubcontractDocumentORM(
        id=document.id,
        subcontract_id=document.subcontract_id,
        name=document.name,
        document_type=document.document_type,
        url=document.url,
        size=document.size,
        mime_type=document.mime_type,
        uploaded_by=document.uploaded_by,
        upload_date=to_db_datetime(document.upload_date),
    )


def document_from_orm(obj: SubcontractDocumentORM) -> SubcontractDocument:
    return SubcontractDocument(
        id=obj.id,
        subcontract_id=obj.subcontract_id,
        name=obj.name,
        document_type=DocumentType(obj.document_type),
        url=obj.url,
        size=obj.size or 0,
        mime_type=obj.mime_type or "",
        uploaded_by=obj.uploaded_by,
        upload_date=from_db_datetime(obj.upload_date),
    )


def subcontract_to_orm(subcontract: Subcontract) -> SubcontractORM:
    return SubcontractORM(
        id=subcontract.id,
        contract_number=subcontract.contract_number,
        project_id=subcontract.project_id,
        project_name=subcontract.project_name,
        subcontractor_id=subcontract.subcontractor_id,
        subcontractor_name=subcontract.subcontractor_name,
        description=subcontract.description,
        scope=subcontract.scope,
        total_amount=subcontract.total_amount,
        currency=subcontract.currency,
        retention_percentage=subcontract.retention_percentage,
        advance_payment_percentage=subcontract.advance_payment_percentage,
        status=subcontract.status,
        start_date=subcontract.start_date,
        end_date=subcontract.end_date,
        completion_date=subcontract.completion_date,
        cost_codes_json=to_json(list(subcontract.cost_codes)),
        total_certified=subcontract.total_certified,
        total_paid=subcontract.total_paid,
        total_retained=subcontract.total_retained,
        remaining_balance=subcontract.remaining_balance,
        approved_by=subcontract.approved_by,
        approved_at=to_db_datetime(subcontract.approved_at),
        created_by=subcontract.created_by,
        notes=subcontract.notes,
        terms=subcontract.terms,
        warranty_period=subcontract.warranty_period,
        created_at=to_db_datetime(subcontract.created_at),
        updated_at=to_db_datetime(subcontract.updated_at),
    )


def subcontract_from_orm(
    obj: SubcontractORM,
    schedule: list[PaymentScheduleItemORM],
    documents: list[SubcontractDocumentORM],
) -> Subcontract:
    return Subcontract(
        id=obj.id,
        contract_number=obj.contract_number,
        project_id=obj.project_id,
        project_name=obj.project_name or "",
        subcontractor_id=obj.subcontractor_id,
        subcontractor_name=obj.subcontractor_name,
        description=obj.description or "",
        scope=obj.scope or "",
        total_amount=obj.total_amount,
        currency=obj.currency or "USD",
        retention_percentage=obj.retention_percentage or 0.0,
        advance_payment_percentage=obj.advance_payment_percentage,
        status=SubcontractStatus(obj.status),
        start_date=obj.start_date,
        end_date=obj.end_date,
        completion_date=obj.completion_date,
        payment_schedule=[schedule_item_from_orm(row) for row in schedule],
        cost_codes=[str(code) for code in list_from_json(obj.cost_codes_json)],
        documents=[document_from_orm(row) for row in documents],
        total_certified=obj.total_certified or 0.0,
        total_paid=obj.total_paid or 0.0,
        total_retained=obj.total_retained or 0.0,
        remaining_balance=obj.remaining_balance or 0.0,
        approved_by=obj.approved_by,
        approved_at=from_db_datetime(obj.approved_at),
        created_by=obj.created_by,
        notes=obj.notes,
        terms=obj.terms,
        warranty_period=obj.warranty_period,
        created_at=from_db_datetime(obj.created_at),
        updated_at=from_db_datetime(obj.updated_at),
    )


__all__ = [
    "schedule_item_to_orm",
    "schedule_item_from_orm",
    "document_to_orm",
    "document_from_orm",
    "subcontract_to_orm",
    "subcontract_from_orm",
]
