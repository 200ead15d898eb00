from __future__ import annotations

import copy
import logging
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError
from core.interfaces import SubcontractRepository
from core.models import FinancialImpact, Subcontract, SubcontractStatus
from core.services.audit.helpers import SYSTEM_USER_ID, status_change
from core.services.audit.service import AuditLogService
from core.services.common.policy import resolve_currency
from core.services.cost_code.service import CostCodeService
from core.services.subcontract.financials import (
    build_payment_schedule,
    recalculate_subcontract_totals,
    split_commitment,
)
from core.services.subcontract.models import PaymentScheduleEntry
from core.services.subcontract.validation import validate_subcontract_terms


logger = logging.getLogger(__name__)

_TERMINAL_STATES = (SubcontractStatus.COMPLETED, SubcontractStatus.CANCELLED)


class SubcontractLifecycleMixin:
    _session: Session
    _subcontract_repo: SubcontractRepository
    _audit_service: AuditLogService | None
    _cost_code_service: CostCodeService | None

    def _require_subcontract(self, subcontract_id: str) -> Subcontract:
        subcontract = self._subcontract_repo.get(subcontract_id)
        if subcontract is None:
            raise NotFoundError("Subcontract not found", code="SUBCONTRACT_NOT_FOUND")
        return subcontract

    def _log_subcontract(self, action: str, subcontract: Subcontract, user_id: str, user_name: str, **kwargs) -> None:
        if self._audit_service is None:
            return
        self._audit_service.log_subcontract_action(
            action,
            subcontract.id,
            subcontract.contract_number,
            user_id,
            user_name,
            project_id=subcontract.project_id,
            project_name=subcontract.project_name or None,
            **kwargs,
        )

    def _apply_commitment(self, subcontract: Subcontract, sign: float) -> None:
        if self._cost_code_service is None:
            return
        for cost_code_id, amount in split_commitment(subcontract.total_amount, subcontract.cost_codes).items():
            self._cost_code_service.update_budget_committed(
                subcontract.project_id,
                cost_code_id,
                sign * amount,
                commit=False,
            )

    def create_subcontract(
        self,
        contract_number: str,
        project_id: str,
        subcontractor_id: str,
        subcontractor_name: str,
        total_amount: float,
        retention_percentage: float,
        start_date: date,
        end_date: date,
        payment_schedule: Sequence[PaymentScheduleEntry],
        cost_codes: Optional[Sequence[str]] = None,
        project_name: str = "",
        description: str = "",
        scope: str = "",
        currency: str | None = None,
        advance_payment_percentage: float | None = None,
        notes: str | None = None,
        terms: str | None = None,
        warranty_period: int | None = None,
        created_by: str | None = None,
    ) -> Subcontract:
        validate_subcontract_terms(
            total_amount=total_amount,
            retention_percentage=retention_percentage,
            start_date=start_date,
            end_date=end_date,
            schedule=list(payment_schedule),
        )

        subcontract = Subcontract.create(
            contract_number=contract_number,
            project_id=project_id,
            subcontractor_id=subcontractor_id,
            subcontractor_name=subcontractor_name,
            total_amount=total_amount,
            retention_percentage=retention_percentage,
            start_date=start_date,
            end_date=end_date,
            project_name=project_name,
            description=description,
            scope=scope,
            currency=resolve_currency(currency),
            advance_payment_percentage=advance_payment_percentage,
            cost_codes=list(cost_codes or []),
            notes=notes,
            terms=terms,
            warranty_period=warranty_period,
            created_by=created_by,
        )
        subcontract.payment_schedule = build_payment_schedule(subcontract.id, total_amount, payment_schedule)

        user_id = created_by or SYSTEM_USER_ID
        try:
            self._subcontract_repo.add(subcontract)
            self._log_subcontract("subcontract_created", subcontract, user_id, user_id)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Subcontract %s created for project %s", subcontract.contract_number, project_id)
        domain_events.subcontracts_changed.emit(project_id)
        return subcontract

    def update_subcontract(
        self,
        subcontract_id: str,
        *,
        total_amount: float | None = None,
        retention_percentage: float | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        payment_schedule: Sequence[PaymentScheduleEntry] | None = None,
        cost_codes: Sequence[str] | None = None,
        description: str | None = None,
        scope: str | None = None,
        notes: str | None = None,
        terms: str | None = None,
        warranty_period: int | None = None,
        user_id: str | None = None,
    ) -> Subcontract:
        subcontract = self._require_subcontract(subcontract_id)
        if subcontract.status in _TERMINAL_STATES:
            raise BusinessRuleError(
                f"Cannot update a {subcontract.status.value} subcontract",
                code="INVALID_STATUS",
            )
        validate_subcontract_terms(
            total_amount=total_amount,
            retention_percentage=retention_percentage,
            start_date=start_date or subcontract.start_date,
            end_date=end_date or subcontract.end_date,
            schedule=list(payment_schedule) if payment_schedule is not None else None,
        )
        if subcontract.total_certified > 0 and (total_amount is not None or payment_schedule is not None):
            raise BusinessRuleError(
                "Cannot change amounts of a subcontract with certified work",
                code="INVALID_STATUS",
            )
        commitment_changed = subcontract.status == SubcontractStatus.ACTIVE and (
            total_amount is not None or cost_codes is not None
        )
        previous = copy.copy(subcontract)

        if total_amount is not None:
            subcontract.total_amount = total_amount
        if retention_percentage is not None:
            subcontract.retention_percentage = retention_percentage
        if start_date is not None:
            subcontract.start_date = start_date
        if end_date is not None:
            subcontract.end_date = end_date
        if cost_codes is not None:
            subcontract.cost_codes = list(cost_codes)
        for field_name, value in (
            ("description", description),
            ("scope", scope),
            ("notes", notes),
            ("terms", terms),
            ("warranty_period", warranty_period),
        ):
            if value is not None:
                setattr(subcontract, field_name, value)

        if payment_schedule is not None:
            subcontract.payment_schedule = build_payment_schedule(
                subcontract.id, subcontract.total_amount, payment_schedule
            )
        elif total_amount is not None:
            for item in subcontract.payment_schedule:
                item.amount = (subcontract.total_amount * item.percentage) / 100
        recalculate_subcontract_totals(subcontract)
        subcontract.updated_at = datetime.now(timezone.utc)

        actor = user_id or SYSTEM_USER_ID
        try:
            if commitment_changed:
                self._apply_commitment(previous, -1.0)
                self._apply_commitment(subcontract, 1.0)
            self._subcontract_repo.update(subcontract)
            self._log_subcontract("subcontract_updated", subcontract, actor, actor)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.subcontracts_changed.emit(subcontract.project_id)
        if commitment_changed:
            domain_events.budgets_changed.emit(subcontract.project_id)
        return subcontract

    def approve_subcontract(
        self,
        subcontract_id: str,
        approver_id: str,
        approver_name: str | None = None,
    ) -> Subcontract:
        subcontract = self._require_subcontract(subcontract_id)
        if subcontract.status != SubcontractStatus.DRAFT:
            raise BusinessRuleError("Only draft subcontracts can be approved", code="INVALID_STATUS")

        previous = subcontract.status
        now = datetime.now(timezone.utc)
        subcontract.status = SubcontractStatus.ACTIVE
        subcontract.approved_by = approver_id
        subcontract.approved_at = now
        subcontract.updated_at = now

        try:
            self._subcontract_repo.update(subcontract)
            self._apply_commitment(subcontract, 1.0)
            self._log_subcontract(
                "subcontract_approved",
                subcontract,
                approver_id,
                approver_name or approver_id,
                changes=[status_change(previous, subcontract.status)],
                financial_impact=FinancialImpact(
                    amount=subcontract.total_amount,
                    currency=subcontract.currency,
                    description=f"Subcontract approved: {subcontract.contract_number}",
                ),
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.subcontracts_changed.emit(subcontract.project_id)
        domain_events.budgets_changed.emit(subcontract.project_id)
        return subcontract

    def complete_subcontract(
        self,
        subcontract_id: str,
        completion_date: date,
        user_id: str | None = None,
    ) -> Subcontract:
        subcontract = self._require_subcontract(subcontract_id)
        if subcontract.status != SubcontractStatus.ACTIVE:
            raise BusinessRuleError("Only active subcontracts can be completed", code="INVALID_STATUS")

        previous = subcontract.status
        subcontract.status = SubcontractStatus.COMPLETED
        subcontract.completion_date = completion_date
        subcontract.updated_at = datetime.now(timezone.utc)

        actor = user_id or SYSTEM_USER_ID
        try:
            self._subcontract_repo.update(subcontract)
            self._log_subcontract(
                "subcontract_completed",
                subcontract,
                actor,
                actor,
                changes=[status_change(previous, subcontract.status)],
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.subcontracts_changed.emit(subcontract.project_id)
        return subcontract

    def cancel_subcontract(
        self,
        subcontract_id: str,
        reason: str,
        user_id: str | None = None,
    ) -> Subcontract:
        subcontract = self._require_subcontract(subcontract_id)
        if subcontract.total_paid > 0:
            raise BusinessRuleError("Cannot cancel subcontract with payments made", code="PAYMENTS_MADE")
        if subcontract.status in _TERMINAL_STATES:
            raise BusinessRuleError(
                f"Cannot cancel a {subcontract.status.value} subcontract",
                code="INVALID_STATUS",
            )

        previous = subcontract.status
        subcontract.status = SubcontractStatus.CANCELLED
        subcontract.notes = f"{subcontract.notes or ''}\n\nCancellation reason: {reason}"
        subcontract.updated_at = datetime.now(timezone.utc)

        actor = user_id or SYSTEM_USER_ID
        try:
            if previous == SubcontractStatus.ACTIVE:
                self._apply_commitment(subcontract, -1.0)
            self._subcontract_repo.update(subcontract)
            self._log_subcontract(
                "subcontract_cancelled",
                subcontract,
                actor,
                actor,
                changes=[status_change(previous, subcontract.status)],
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.subcontracts_changed.emit(subcontract.project_id)
        if previous == SubcontractStatus.ACTIVE:
            domain_events.budgets_changed.emit(subcontract.project_id)
        return subcontract

    def delete_subcontract(self, subcontract_id: str, user_id: str | None = None) -> None:
        subcontract = self._require_subcontract(subcontract_id)
        if subcontract.total_paid > 0:
            raise BusinessRuleError("Cannot delete subcontract with payments made", code="NOT_DELETABLE")

        actor = user_id or SYSTEM_USER_ID
        try:
            if subcontract.status == SubcontractStatus.ACTIVE:
                self._apply_commitment(subcontract, -1.0)
            self._subcontract_repo.delete(subcontract_id)
            self._log_subcontract("subcontract_deleted", subcontract, actor, actor)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.subcontracts_changed.emit(subcontract.project_id)


__all__ = ["SubcontractLifecycleMixin"]
