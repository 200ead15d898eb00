from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError
from core.interfaces import SubcontractRepository
from core.models import DocumentType, SubcontractDocument


class SubcontractDocumentMixin:
    _session: Session
    _subcontract_repo: SubcontractRepository

    def attach_document(
        self,
        subcontract_id: str,
        name: str,
        document_type: DocumentType,
        size: int,
        mime_type: str,
        uploaded_by: str | None = None,
    ) -> SubcontractDocument:
        subcontract = self._require_subcontract(subcontract_id)
        document = SubcontractDocument.create(
            subcontract_id=subcontract.id,
            name=name,
            document_type=DocumentType(document_type),
            size=size,
            mime_type=mime_type,
            uploaded_by=uploaded_by,
        )
        subcontract.documents.append(document)
        subcontract.updated_at = datetime.now(timezone.utc)
        try:
            self._subcontract_repo.update(subcontract)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.subcontracts_changed.emit(subcontract.project_id)
        return document

    def detach_document(self, subcontract_id: str, document_id: str) -> None:
        subcontract = self._require_subcontract(subcontract_id)
        remaining = [doc for doc in subcontract.documents if doc.id != document_id]
        if len(remaining) == len(subcontract.documents):
            raise NotFoundError("Document not found", code="DOCUMENT_NOT_FOUND")
        subcontract.documents = remaining
        subcontract.updated_at = datetime.now(timezone.utc)
        try:
            self._subcontract_repo.update(subcontract)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.subcontracts_changed.emit(subcontract.project_id)


__all__ = ["SubcontractDocumentMixin"]
