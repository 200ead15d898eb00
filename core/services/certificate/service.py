from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import ProgressCertificateRepository
from core.services.audit.service import AuditLogService
from core.services.certificate.lifecycle import CertificateLifecycleMixin
from core.services.certificate.query import CertificateQueryMixin
from core.services.subcontract.service import SubcontractService


class ProgressCertificateService(CertificateLifecycleMixin, CertificateQueryMixin):
    def __init__(
        self,
        session: Session,
        certificate_repo: ProgressCertificateRepository,
        subcontract_service: SubcontractService,
        audit_service: AuditLogService | None = None,
    ):
        self._session: Session = session
        self._certificate_repo: ProgressCertificateRepository = certificate_repo
        self._subcontract_service: SubcontractService = subcontract_service
        self._audit_service: AuditLogService | None = audit_service


__all__ = ["ProgressCertificateService"]
