from __future__ import annotations

from typing import List

from core.interfaces import SubcontractRepository
from core.models import Subcontract, SubcontractStatus
from core.services.common.pagination import Page, build_page, page_offset
from core.services.subcontract.models import SubcontractFilters, SubcontractStats


class SubcontractQueryMixin:
    _subcontract_repo: SubcontractRepository

    def get_subcontract(self, subcontract_id: str) -> Subcontract | None:
        return self._subcontract_repo.get(subcontract_id)

    def list_by_project(self, project_id: str) -> List[Subcontract]:
        return self._subcontract_repo.list_by_project(project_id)

    def list_by_subcontractor(self, subcontractor_id: str) -> List[Subcontract]:
        return self._subcontract_repo.list_by_subcontractor(subcontractor_id)

    def list_active(self) -> List[Subcontract]:
        return self._subcontract_repo.query(SubcontractFilters(status=SubcontractStatus.ACTIVE))

    def query_subcontracts(
        self,
        filters: SubcontractFilters | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Subcontract]:
        offset = page_offset(page, limit)
        rows = self._subcontract_repo.query(filters, offset=offset, limit=limit)
        return build_page(rows, self._subcontract_repo.count(filters), page, limit)

    def get_subcontract_stats(self) -> SubcontractStats:
        rows = self._subcontract_repo.list_all()
        total = len(rows)
        return SubcontractStats(
            total=total,
            active=sum(1 for sc in rows if sc.status == SubcontractStatus.ACTIVE),
            completed=sum(1 for sc in rows if sc.status == SubcontractStatus.COMPLETED),
            cancelled=sum(1 for sc in rows if sc.status == SubcontractStatus.CANCELLED),
            total_value=sum(sc.total_amount for sc in rows),
            total_certified=sum(sc.total_certified for sc in rows),
            total_paid=sum(sc.total_paid for sc in rows),
            total_retained=sum(sc.total_retained for sc in rows),
            average_retention_percentage=(
                sum(sc.retention_percentage for sc in rows) / total if total else 0.0
            ),
        )


__all__ = ["SubcontractQueryMixin"]
