from .audit import AuditLogService
from .cost_code import CostCodeService
from .subcontract import SubcontractService
from .certificate import ProgressCertificateService
from .expense import ExpenseService
from .financials import ProjectFinancialsService, ProjectFinancials, FinancialForecast

__all__ = [
    "AuditLogService",
    "CostCodeService",
    "SubcontractService",
    "ProgressCertificateService",
    "ExpenseService",
    "ProjectFinancialsService",
    "ProjectFinancials",
    "FinancialForecast",
]
