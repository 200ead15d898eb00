# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from core.models import (
    AuditLogEntry,
    CostCode,
    CostCodeBudget,
    Expense,
    ExpenseStatus,
    ProgressCertificate,
    Subcontract,
)

if TYPE_CHECKING:
    from core.services.audit.models import AuditLogFilters
    from core.services.certificate.models import CertificateFilters
    from core.services.expense.models import ExpenseFilters
    from core.services.subcontract.models import SubcontractFilters


class CostCodeRepository(ABC):
    @abstractmethod
    def add(self, cost_code: CostCode) -> None: ...

    @abstractmethod
    def update(self, cost_code: CostCode) -> None: ...

    @abstractmethod
    def delete(self, cost_code_id: str) -> None: ...

    @abstractmethod
    def get(self, cost_code_id: str) -> Optional[CostCode]: ...

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[CostCode]: ...

    @abstractmethod
    def list_all(self) -> List[CostCode]: ...

    @abstractmethod
    def count(self) -> int: ...


class CostCodeBudgetRepository(ABC):
    @abstractmethod
    def add(self, budget: CostCodeBudget) -> None: ...

    @abstractmethod
    def update(self, budget: CostCodeBudget) -> None: ...

    @abstractmethod
    def delete(self, budget_id: str) -> None: ...

    @abstractmethod
    def get(self, budget_id: str) -> Optional[CostCodeBudget]: ...

    @abstractmethod
    def get_for(self, project_id: str, cost_code_id: str) -> Optional[CostCodeBudget]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[CostCodeBudget]: ...

    @abstractmethod
    def list_by_cost_code(self, cost_code_id: str) -> List[CostCodeBudget]: ...


class SubcontractRepository(ABC):
    @abstractmethod
    def add(self, subcontract: Subcontract) -> None: ...

    @abstractmethod
    def update(self, subcontract: Subcontract) -> None: ...

    @abstractmethod
    def delete(self, subcontract_id: str) -> None: ...

    @abstractmethod
    def get(self, subcontract_id: str) -> Optional[Subcontract]: ...

    @abstractmethod
    def list_all(self) -> List[Subcontract]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Subcontract]: ...

    @abstractmethod
    def list_by_subcontractor(self, subcontractor_id: str) -> List[Subcontract]: ...

    @abstractmethod
    def query(
        self,
        filters: Optional[SubcontractFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Subcontract]:
        """Matching subcontracts, oldest first, windowed by offset and limit."""

    @abstractmethod
    def count(self, filters: Optional[SubcontractFilters] = None) -> int: ...


class ProgressCertificateRepository(ABC):
    @abstractmethod
    def add(self, certificate: ProgressCertificate) -> None: ...

    @abstractmethod
    def update(self, certificate: ProgressCertificate) -> None: ...

    @abstractmethod
    def delete(self, certificate_id: str) -> None: ...

    @abstractmethod
    def get(self, certificate_id: str) -> Optional[ProgressCertificate]: ...

    @abstractmethod
    def list_all(self) -> List[ProgressCertificate]: ...

    @abstractmethod
    def list_by_subcontract(self, subcontract_id: str) -> List[ProgressCertificate]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[ProgressCertificate]: ...

    @abstractmethod
    def query(
        self,
        filters: Optional[CertificateFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ProgressCertificate]:
        """Matching certificates, newest first."""

    @abstractmethod
    def count(self, filters: Optional[CertificateFilters] = None) -> int: ...


class ExpenseRepository(ABC):
    @abstractmethod
    def add(self, expense: Expense) -> None: ...

    @abstractmethod
    def update(self, expense: Expense) -> None: ...

    @abstractmethod
    def delete(self, expense_id: str) -> None: ...

    @abstractmethod
    def get(self, expense_id: str) -> Optional[Expense]: ...

    @abstractmethod
    def list_all(self) -> List[Expense]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Expense]: ...

    @abstractmethod
    def list_by_status(self, status: ExpenseStatus) -> List[Expense]: ...

    @abstractmethod
    def query(
        self,
        filters: Optional[ExpenseFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Expense]:
        """Matching expenses, newest first."""

    @abstractmethod
    def count(self, filters: Optional[ExpenseFilters] = None) -> int: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...

    @abstractmethod
    def get(self, entry_id: str) -> Optional[AuditLogEntry]: ...

    @abstractmethod
    def list_all(self) -> List[AuditLogEntry]:
        """All entries, newest first."""

    @abstractmethod
    def query(
        self,
        filters: Optional[AuditLogFilters] = None,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[AuditLogEntry]:
        """Matching entries, newest first."""

    @abstractmethod
    def count(self, filters: Optional[AuditLogFilters] = None) -> int: ...

    @abstractmethod
    def delete_older_than(self, cutoff: datetime) -> int: ...


__all__ = [
    "CostCodeRepository",
    "CostCodeBudgetRepository",
    "SubcontractRepository",
    "ProgressCertificateRepository",
    "ExpenseRepository",
    "AuditLogRepository",
]
