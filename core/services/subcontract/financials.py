from __future__ import annotations

from typing import Sequence

from core.models import PaymentItemStatus, PaymentScheduleItem, Subcontract
from core.services.subcontract.models import PaymentScheduleEntry


def build_payment_schedule(
    subcontract_id: str,
    total_amount: float,
    entries: Sequence[PaymentScheduleEntry],
) -> list[PaymentScheduleItem]:
    return [
        PaymentScheduleItem.create(
            subcontract_id=subcontract_id,
            sequence=index,
            description=entry.description,
            percentage=entry.percentage,
            total_amount=total_amount,
            due_date=entry.due_date,
        )
        for index, entry in enumerate(entries, start=1)
    ]


def recalculate_subcontract_totals(subcontract: Subcontract) -> Subcontract:
    """Derive certified, paid, retained and remaining from the schedule."""
    certified_states = (PaymentItemStatus.CERTIFIED, PaymentItemStatus.PAID)
    subcontract.total_certified = sum(
        item.amount for item in subcontract.payment_schedule if item.status in certified_states
    )
    subcontract.total_paid = sum(
        item.amount for item in subcontract.payment_schedule if item.status == PaymentItemStatus.PAID
    )
    subcontract.total_retained = subcontract.total_certified * (subcontract.retention_percentage / 100)
    subcontract.remaining_balance = subcontract.total_amount - subcontract.total_certified
    return subcontract


def split_commitment(total_amount: float, cost_code_ids: Sequence[str]) -> dict[str, float]:
    """Spread a contract value evenly over its cost codes."""
    unique_ids = list(dict.fromkeys(cost_code_ids))
    if not unique_ids:
        return {}
    share = total_amount / len(unique_ids)
    return {cost_code_id: share for cost_code_id in unique_ids}


__all__ = ["build_payment_schedule", "recalculate_subcontract_totals", "split_commitment"]
