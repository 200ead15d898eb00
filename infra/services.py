from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.audit import AuditLogService
from core.services.certificate import ProgressCertificateService
from core.services.cost_code import CostCodeService
from core.services.expense import ExpenseService
from core.services.financials import ProjectFinancialsService
from core.services.subcontract import SubcontractService
from infra.db.repositories import (
    SqlAlchemyAuditLogRepository,
    SqlAlchemyCostCodeBudgetRepository,
    SqlAlchemyCostCodeRepository,
    SqlAlchemyExpenseRepository,
    SqlAlchemyProgressCertificateRepository,
    SqlAlchemySubcontractRepository,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    audit_service: AuditLogService
    cost_code_service: CostCodeService
    subcontract_service: SubcontractService
    certificate_service: ProgressCertificateService
    expense_service: ExpenseService
    financials_service: ProjectFinancialsService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "audit_service": self.audit_service,
            "cost_code_service": self.cost_code_service,
            "subcontract_service": self.subcontract_service,
            "certificate_service": self.certificate_service,
            "expense_service": self.expense_service,
            "financials_service": self.financials_service,
        }


def build_service_graph(session: Session, *, seed_catalog: bool = True) -> ServiceGraph:
    cost_code_repo = SqlAlchemyCostCodeRepository(session)
    budget_repo = SqlAlchemyCostCodeBudgetRepository(session)
    subcontract_repo = SqlAlchemySubcontractRepository(session)
    certificate_repo = SqlAlchemyProgressCertificateRepository(session)
    expense_repo = SqlAlchemyExpenseRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditLogService(
        session=session,
        audit_repo=audit_repo,
    )
    cost_code_service = CostCodeService(
        session=session,
        cost_code_repo=cost_code_repo,
        budget_repo=budget_repo,
        audit_service=audit_service,
    )
    subcontract_service = SubcontractService(
        session=session,
        subcontract_repo=subcontract_repo,
        cost_code_service=cost_code_service,
        audit_service=audit_service,
    )
    certificate_service = ProgressCertificateService(
        session=session,
        certificate_repo=certificate_repo,
        subcontract_service=subcontract_service,
        audit_service=audit_service,
    )
    expense_service = ExpenseService(
        session=session,
        expense_repo=expense_repo,
        cost_code_service=cost_code_service,
        audit_service=audit_service,
    )
    financials_service = ProjectFinancialsService(
        cost_code_service=cost_code_service,
        subcontract_service=subcontract_service,
        expense_service=expense_service,
    )

    if seed_catalog:
        added = cost_code_service.initialize_catalog()
        if added:
            logger.info("Seeded %s default cost codes", added)

    return ServiceGraph(
        session=session,
        audit_service=audit_service,
        cost_code_service=cost_code_service,
        subcontract_service=subcontract_service,
        certificate_service=certificate_service,
        expense_service=expense_service,
        financials_service=financials_service,
    )


__all__ = ["ServiceGraph", "build_service_graph"]
