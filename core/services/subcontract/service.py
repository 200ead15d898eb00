from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import SubcontractRepository
from core.services.audit.service import AuditLogService
from core.services.cost_code.service import CostCodeService
from core.services.subcontract.documents import SubcontractDocumentMixin
from core.services.subcontract.lifecycle import SubcontractLifecycleMixin
from core.services.subcontract.query import SubcontractQueryMixin
from core.services.subcontract.schedule import SubcontractScheduleMixin


class SubcontractService(
    SubcontractLifecycleMixin,
    SubcontractScheduleMixin,
    SubcontractDocumentMixin,
    SubcontractQueryMixin,
):
    def __init__(
        self,
        session: Session,
        subcontract_repo: SubcontractRepository,
        cost_code_service: CostCodeService | None = None,
        audit_service: AuditLogService | None = None,
    ):
        self._session: Session = session
        self._subcontract_repo: SubcontractRepository = subcontract_repo
        self._cost_code_service: CostCodeService | None = cost_code_service
        self._audit_service: AuditLogService | None = audit_service


__all__ = ["SubcontractService"]
