from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import CostCodeBudgetRepository, CostCodeRepository
from core.models import CostCodeBudget, FieldChange, FinancialImpact
from core.services.audit.helpers import record_audit
from core.services.cost_code.metrics import recalculate_budget_metrics
from core.services.cost_code.models import CostCodeSummary


logger = logging.getLogger(__name__)


class CostCodeBudgetMixin:
    _session: Session
    _cost_code_repo: CostCodeRepository
    _budget_repo: CostCodeBudgetRepository

    def create_budget(
        self,
        project_id: str,
        cost_code_id: str,
        budgeted_quantity: float,
        budgeted_unit_price: float,
    ) -> CostCodeBudget:
        if not project_id:
            raise ValidationError("Project is required.", code="REQUIRED_FIELD")
        if budgeted_quantity < 0 or budgeted_unit_price < 0:
            raise ValidationError(
                "Budgeted quantity and unit price cannot be negative.",
                code="INVALID_AMOUNT",
            )
        cost_code = self._cost_code_repo.get(cost_code_id)
        if cost_code is None:
            raise NotFoundError("Cost code not found", code="COST_CODE_NOT_FOUND")
        if self._budget_repo.get_for(project_id, cost_code_id) is not None:
            raise BusinessRuleError(
                "Budget already exists for this cost code in this project",
                code="DUPLICATE_BUDGET",
            )

        budget = CostCodeBudget.create(
            project_id=project_id,
            cost_code_id=cost_code_id,
            budgeted_quantity=budgeted_quantity,
            budgeted_unit_price=budgeted_unit_price,
        )
        try:
            self._budget_repo.add(budget)
            record_audit(
                self,
                "budget_created",
                entity_type="budget",
                entity_id=budget.id,
                entity_name=cost_code.code,
                project_id=project_id,
                description=f"Budget created for {cost_code.code}",
                financial_impact=FinancialImpact(
                    amount=budget.budgeted_amount,
                    description="Budgeted amount",
                ),
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.budgets_changed.emit(project_id)
        return budget

    def get_budget(self, budget_id: str) -> CostCodeBudget | None:
        return self._budget_repo.get(budget_id)

    def get_budget_for(self, project_id: str, cost_code_id: str) -> CostCodeBudget | None:
        return self._budget_repo.get_for(project_id, cost_code_id)

    def list_project_budgets(self, project_id: str) -> List[CostCodeBudget]:
        return self._budget_repo.list_by_project(project_id)

    def update_budget(
        self,
        budget_id: str,
        budgeted_quantity: float | None = None,
        budgeted_unit_price: float | None = None,
    ) -> CostCodeBudget:
        budget = self._budget_repo.get(budget_id)
        if budget is None:
            raise NotFoundError("Cost code budget not found", code="BUDGET_NOT_FOUND")
        if (budgeted_quantity is not None and budgeted_quantity < 0) or (
            budgeted_unit_price is not None and budgeted_unit_price < 0
        ):
            raise ValidationError(
                "Budgeted quantity and unit price cannot be negative.",
                code="INVALID_AMOUNT",
            )

        old_amount = budget.budgeted_amount
        if budgeted_quantity is not None:
            budget.budgeted_quantity = budgeted_quantity
        if budgeted_unit_price is not None:
            budget.budgeted_unit_price = budgeted_unit_price
        budget.budgeted_amount = budget.budgeted_quantity * budget.budgeted_unit_price
        recalculate_budget_metrics(budget)

        try:
            self._budget_repo.update(budget)
            record_audit(
                self,
                "budget_updated",
                entity_type="budget",
                entity_id=budget.id,
                project_id=budget.project_id,
                description="Budget amount changed",
                changes=[
                    FieldChange(
                        field="budgeted_amount",
                        old_value=old_amount,
                        new_value=budget.budgeted_amount,
                        field_label="Budgeted amount",
                    )
                ],
                financial_impact=FinancialImpact(
                    amount=budget.budgeted_amount - old_amount,
                    description="Budget change",
                ),
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.budgets_changed.emit(budget.project_id)
        return budget

    def delete_budget(self, budget_id: str) -> None:
        budget = self._budget_repo.get(budget_id)
        if budget is None:
            raise NotFoundError("Cost code budget not found", code="BUDGET_NOT_FOUND")
        if budget.actual_amount > 0:
            raise BusinessRuleError(
                "Cannot delete budget with actual costs",
                code="NOT_DELETABLE",
            )
        try:
            self._budget_repo.delete(budget_id)
            record_audit(
                self,
                "budget_deleted",
                entity_type="budget",
                entity_id=budget_id,
                project_id=budget.project_id,
                description="Budget deleted",
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.budgets_changed.emit(budget.project_id)

    def update_budget_actuals(
        self,
        project_id: str,
        cost_code_id: str,
        amount: float,
        quantity: float | None = None,
        *,
        commit: bool = True,
    ) -> Optional[CostCodeBudget]:
        """Add to actual spend. Returns ``None`` when the pair has no budget yet."""
        return self._accumulate(project_id, cost_code_id, amount, quantity, "actual", commit)

    def update_budget_committed(
        self,
        project_id: str,
        cost_code_id: str,
        amount: float,
        quantity: float | None = None,
        *,
        commit: bool = True,
    ) -> Optional[CostCodeBudget]:
        """Add to committed cost. Returns ``None`` when the pair has no budget yet."""
        return self._accumulate(project_id, cost_code_id, amount, quantity, "committed", commit)

    def _accumulate(
        self,
        project_id: str,
        cost_code_id: str,
        amount: float,
        quantity: float | None,
        kind: str,
        commit: bool,
    ) -> Optional[CostCodeBudget]:
        budget = self._budget_repo.get_for(project_id, cost_code_id)
        if budget is None:
            logger.debug("No budget for project %s / cost code %s; %s skipped", project_id, cost_code_id, kind)
            return None

        if kind == "actual":
            budget.actual_amount += amount
            if quantity is not None:
                budget.actual_quantity += quantity
        else:
            budget.committed_amount += amount
            if quantity is not None:
                budget.committed_quantity += quantity
        recalculate_budget_metrics(budget)

        self._budget_repo.update(budget)
        if commit:
            try:
                self._session.commit()
            except Exception as e:
                self._session.rollback()
                raise e
            domain_events.budgets_changed.emit(project_id)
        return budget

    def get_cost_code_summary(self, project_id: str, cost_code_id: str) -> CostCodeSummary | None:
        cost_code = self._cost_code_repo.get(cost_code_id)
        if cost_code is None:
            return None
        budget = self._budget_repo.get_for(project_id, cost_code_id)
        if budget is None:
            return None
        utilization = (
            (budget.actual_amount / budget.budgeted_amount) * 100 if budget.budgeted_amount > 0 else 0.0
        )
        return CostCodeSummary(
            cost_code=cost_code,
            budget=budget,
            committed_amount=budget.committed_amount,
            actual_amount=budget.actual_amount,
            utilization_percentage=utilization,
            remaining_budget=budget.budgeted_amount - budget.actual_amount,
            projected_final_cost=budget.actual_amount + budget.committed_amount,
        )


__all__ = ["CostCodeBudgetMixin"]
