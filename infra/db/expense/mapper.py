from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from core.models import (
    AttachmentType,
    Expense,
    ExpenseAttachment,
    ExpenseStatus,
    OCRData,
    PaymentStatus,
)
from infra.db.codec import (
    dict_from_json,
    from_db_datetime,
    list_from_json,
    to_db_datetime,
    to_json,
)
from infra.db.models import ExpenseORM


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return from_db_datetime(datetime.fromisoformat(str(raw)))
    except ValueError:
        return None


def _ocr_to_dict(data: OCRData) -> dict[str, Any]:
    return {
        "raw_text": data.raw_text,
        "confidence": data.confidence,
        "processed_at": data.processed_at.isoformat() if data.processed_at else None,
        "extracted_fields": dict(data.extracted_fields),
        "ocr_provider": data.ocr_provider,
    }


def _ocr_from_dict(payload: dict[str, Any]) -> Optional[OCRData]:
    if not payload:
        return None
    return OCRData(
        raw_text=str(payload.get("raw_text") or ""),
        confidence=float(payload.get("confidence") or 0.0),
        processed_at=_parse_timestamp(payload.get("processed_at")),
        extracted_fields=dict(payload.get("extracted_fields") or {}),
        ocr_provider=payload.get("ocr_provider"),
    )


def _attachment_to_dict(attachment: ExpenseAttachment) -> dict[str, Any]:
    return {
        "id": attachment.id,
        "name": attachment.name,
        "type": attachment.attachment_type.value,
        "url": attachment.url,
        "size": attachment.size,
        "mime_type": attachment.mime_type,
        "uploaded_by": attachment.uploaded_by,
        "upload_date": attachment.upload_date.isoformat() if attachment.upload_date else None,
    }


def _attachment_from_dict(payload: dict[str, Any]) -> ExpenseAttachment:
    return ExpenseAttachment(
        id=str(payload.get("id") or ""),
        name=str(payload.get("name") or ""),
        attachment_type=AttachmentType(payload.get("type") or AttachmentType.OTHER.value),
        url=str(payload.get("url") or ""),
        size=int(payload.get("size") or 0),
        mime_type=str(payload.get("mime_type") or ""),
        uploaded_by=payload.get("uploaded_by"),
        upload_date=_parse_timestamp(payload.get("upload_date")),
    )


def expense_to_orm(expense: Expense) -> ExpenseORM:
    return ExpenseORM(
        id=expense.id,
        expense_number=expense.expense_number,
        project_id=expense.project_id,
        project_name=expense.project_name,
        cost_code_id=expense.cost_code_id,
        supplier_id=expense.supplier_id,
        supplier_name=expense.supplier_name,
        amount=expense.amount,
        currency=expense.currency,
        tax_amount=expense.tax_amount,
        total_amount=expense.total_amount,
        description=expense.description,
        invoice_number=expense.invoice_number,
        invoice_date=expense.invoice_date,
        due_date=expense.due_date,
        status=expense.status,
        payment_status=expense.payment_status,
        submitted_by=expense.submitted_by,
        submitted_at=to_db_datetime(expense.submitted_at),
        approved_by=expense.approved_by,
        approved_at=to_db_datetime(expense.approved_at),
        rejected_by=expense.rejected_by,
        rejected_at=to_db_datetime(expense.rejected_at),
        rejection_reason=expense.rejection_reason,
        is_auto_created=expense.is_auto_created,
        ocr_confidence=expense.ocr_confidence,
        ocr_data_json=to_json(_ocr_to_dict(expense.ocr_data)) if expense.ocr_data else None,
        needs_review=expense.needs_review,
        attachments_json=to_json([_attachment_to_dict(a) for a in expense.attachments]),
        paid_amount=expense.paid_amount,
        paid_date=expense.paid_date,
        payment_method=expense.payment_method,
        payment_reference=expense.payment_reference,
        notes=expense.notes,
        tags_json=to_json(list(expense.tags)),
        created_at=to_db_datetime(expense.created_at),
        updated_at=to_db_datetime(expense.updated_at),
    )


def expense_from_orm(obj: ExpenseORM) -> Expense:
    return Expense(
        id=obj.id,
        expense_number=obj.expense_number,
        project_id=obj.project_id,
        project_name=obj.project_name or "",
        cost_code_id=obj.cost_code_id,
        supplier_id=obj.supplier_id,
        supplier_name=obj.supplier_name or "",
        amount=obj.amount,
        currency=obj.currency or "USD",
        tax_amount=obj.tax_amount or 0.0,
        total_amount=obj.total_amount,
        description=obj.description,
        invoice_number=obj.invoice_number,
        invoice_date=obj.invoice_date,
        due_date=obj.due_date,
        status=ExpenseStatus(obj.status),
        payment_status=PaymentStatus(obj.payment_status),
        submitted_by=obj.submitted_by,
        submitted_at=from_db_datetime(obj.submitted_at),
        approved_by=obj.approved_by,
        approved_at=from_db_datetime(obj.approved_at),
        rejected_by=obj.rejected_by,
        rejected_at=from_db_datetime(obj.rejected_at),
        rejection_reason=obj.rejection_reason,
        is_auto_created=bool(obj.is_auto_created),
        ocr_confidence=obj.ocr_confidence,
        ocr_data=_ocr_from_dict(dict_from_json(obj.ocr_data_json)),
        needs_review=bool(obj.needs_review),
        attachments=[
            _attachment_from_dict(item)
            for item in list_from_json(obj.attachments_json)
            if isinstance(item, dict)
        ],
        paid_amount=obj.paid_amount or 0.0,
        paid_date=obj.paid_date,
        payment_method=obj.payment_method,
        payment_reference=obj.payment_reference,
        notes=obj.notes,
        tags=[str(tag) for tag in list_from_json(obj.tags_json)],
        created_at=from_db_datetime(obj.created_at),
        updated_at=from_db_datetime(obj.updated_at),
    )


__all__ = ["expense_to_orm", "expense_from_orm"]
