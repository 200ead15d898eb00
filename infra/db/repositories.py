# infra/db/repositories.py
from __future__ import annotations

from infra.db.audit.repository import SqlAlchemyAuditLogRepository
from infra.db.certificate.repository import SqlAlchemyProgressCertificateRepository
from infra.db.cost_code.repository import (
    SqlAlchemyCostCodeBudgetRepository,
    SqlAlchemyCostCodeRepository,
)
from infra.db.expense.repository import SqlAlchemyExpenseRepository
from infra.db.subcontract.repository import SqlAlchemySubcontractRepository

__all__ = [
    "SqlAlchemyCostCodeRepository",
    "SqlAlchemyCostCodeBudgetRepository",
    "SqlAlchemySubcontractRepository",
    "SqlAlchemyProgressCertificateRepository",
    "SqlAlchemyExpenseRepository",
    "SqlAlchemyAuditLogRepository",
]
