from __future__ import annotations

from typing import List

from core.interfaces import ProgressCertificateRepository
from core.models import CertificateStatus, ProgressCertificate
from core.services.certificate.models import CertificateFilters, CertificateStats
from core.services.common.pagination import Page, build_page, page_offset


class CertificateQueryMixin:
    _certificate_repo: ProgressCertificateRepository

    def get_certificate(self, certificate_id: str) -> ProgressCertificate | None:
        return self._certificate_repo.get(certificate_id)

    def list_by_subcontract(self, subcontract_id: str) -> List[ProgressCertificate]:
        return self._certificate_repo.list_by_subcontract(subcontract_id)

    def list_by_project(self, project_id: str) -> List[ProgressCertificate]:
        return self._certificate_repo.list_by_project(project_id)

    def get_pending_approvals(self) -> List[ProgressCertificate]:
        return self._certificate_repo.query(CertificateFilters(status=CertificateStatus.PENDING_APPROVAL))

    def query_certificates(
        self,
        filters: CertificateFilters | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[ProgressCertificate]:
        offset = page_offset(page, limit)
        rows = self._certificate_repo.query(filters, offset=offset, limit=limit)
        return build_page(rows, self._certificate_repo.count(filters), page, limit)

    def get_certificate_stats(self) -> CertificateStats:
        rows = self._certificate_repo.list_all()
        approval_hours = [
            (cert.approved_at - cert.submitted_at).total_seconds() / 3600
            for cert in rows
            if cert.approved_at is not None and cert.submitted_at is not None
        ]
        return CertificateStats(
            total=len(rows),
            pending=sum(1 for c in rows if c.status == CertificateStatus.PENDING_APPROVAL),
            approved=sum(1 for c in rows if c.status == CertificateStatus.APPROVED),
            paid=sum(1 for c in rows if c.status == CertificateStatus.PAID),
            rejected=sum(1 for c in rows if c.status == CertificateStatus.REJECTED),
            total_certified=sum(c.amount_certified for c in rows),
            total_paid=sum(c.net_payable for c in rows if c.status == CertificateStatus.PAID),
            total_retained=sum(c.retention_amount for c in rows),
            average_approval_time=(
                sum(approval_hours) / len(approval_hours) if approval_hours else 0.0
            ),
        )


__all__ = ["CertificateQueryMixin"]
