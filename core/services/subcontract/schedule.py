from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError
from core.interfaces import SubcontractRepository
from core.models import PaymentItemStatus, PaymentScheduleItem, Subcontract, SubcontractStatus
from core.services.subcontract.financials import recalculate_subcontract_totals
from core.services.subcontract.validation import SCHEDULE_TOLERANCE


# pending -> certified -> paid; items never move backwards
_NEXT_STATUS = {
    PaymentItemStatus.PENDING: PaymentItemStatus.CERTIFIED,
    PaymentItemStatus.CERTIFIED: PaymentItemStatus.PAID,
}


class SubcontractScheduleMixin:
    _session: Session
    _subcontract_repo: SubcontractRepository

    def update_payment_schedule_item(
        self,
        subcontract_id: str,
        item_id: str,
        status: PaymentItemStatus,
        on: datetime | None = None,
        *,
        commit: bool = True,
    ) -> Subcontract:
        """Move one schedule item and re-derive the subcontract totals.

        With ``commit=False`` the change is only staged on the session so the
        caller can commit it together with its own writes.
        """
        subcontract = self._require_subcontract(subcontract_id)
        item = next((i for i in subcontract.payment_schedule if i.id == item_id), None)
        if item is None:
            raise NotFoundError("Payment schedule item not found", code="PAYMENT_ITEM_NOT_FOUND")

        status = PaymentItemStatus(status)
        if _NEXT_STATUS.get(item.status) != status:
            raise BusinessRuleError(
                f"Payment schedule item cannot move from {item.status.value} to {status.value}",
                code="INVALID_STATUS",
            )
        stamp = on or datetime.now(timezone.utc)
        item.status = status
        if status == PaymentItemStatus.CERTIFIED:
            item.certified_date = stamp
        elif status == PaymentItemStatus.PAID:
            item.paid_date = stamp
            if item.certified_date is None:
                item.certified_date = stamp

        recalculate_subcontract_totals(subcontract)
        subcontract.updated_at = datetime.now(timezone.utc)
        self._subcontract_repo.update(subcontract)

        if commit:
            try:
                self._session.commit()
            except Exception as e:
                self._session.rollback()
                raise e
            domain_events.subcontracts_changed.emit(subcontract.project_id)
        return subcontract

    def next_pending_item_id(self, subcontract_id: str) -> str | None:
        subcontract = self._require_subcontract(subcontract_id)
        pending = [i for i in subcontract.payment_schedule if i.status == PaymentItemStatus.PENDING]
        pending.sort(key=lambda i: i.sequence)
        return pending[0].id if pending else None

    def match_pending_item_id(
        self,
        subcontract_id: str,
        amount: float,
        item_id: str | None = None,
    ) -> str:
        """Pending schedule item whose amount equals ``amount``.

        ``item_id`` pins the item; otherwise the lowest-sequence pending item
        with a matching amount is chosen.
        """
        subcontract = self._require_subcontract(subcontract_id)
        if item_id is not None:
            item = next((i for i in subcontract.payment_schedule if i.id == item_id), None)
            if item is None:
                raise NotFoundError("Payment schedule item not found", code="PAYMENT_ITEM_NOT_FOUND")
            if item.status != PaymentItemStatus.PENDING:
                raise BusinessRuleError(
                    f"Payment schedule item {item.sequence} is already {item.status.value}",
                    code="INVALID_STATUS",
                )
            candidates = [item]
        else:
            candidates = sorted(
                (i for i in subcontract.payment_schedule if i.status == PaymentItemStatus.PENDING),
                key=lambda i: i.sequence,
            )
            if not candidates:
                raise BusinessRuleError(
                    "No pending payment schedule item left to certify",
                    code="NO_PENDING_PAYMENT_ITEM",
                )

        for candidate in candidates:
            if abs(candidate.amount - amount) <= SCHEDULE_TOLERANCE:
                return candidate.id
        raise BusinessRuleError(
            f"Certified amount ({amount}) does not match a pending payment schedule item",
            code="SCHEDULE_AMOUNT_MISMATCH",
        )

    def calculate_committed_cost(self, project_id: str) -> float:
        return sum(
            sc.total_amount
            for sc in self._subcontract_repo.list_by_project(project_id)
            if sc.status == SubcontractStatus.ACTIVE
        )

    def calculate_retention_balance(self, subcontract_id: str) -> float:
        return self._require_subcontract(subcontract_id).total_retained

    def list_payment_schedule(self, subcontract_id: str) -> List[PaymentScheduleItem]:
        return list(self._require_subcontract(subcontract_id).payment_schedule)


__all__ = ["SubcontractScheduleMixin"]
