from __future__ import annotations

from datetime import date
from typing import Sequence

from core.exceptions import ValidationError
from core.services.subcontract.models import PaymentScheduleEntry


SCHEDULE_TOLERANCE = 0.01


def validate_total_amount(total_amount: float | None) -> None:
    if total_amount is not None and total_amount <= 0:
        raise ValidationError("Total amount must be greater than 0", code="INVALID_AMOUNT")


def validate_retention(retention_percentage: float | None) -> None:
    if retention_percentage is not None and not (0 <= retention_percentage <= 100):
        raise ValidationError(
            "Retention percentage must be between 0 and 100",
            code="INVALID_RETENTION",
        )


def validate_dates(start_date: date | None, end_date: date | None) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("Start date must be before end date", code="INVALID_DATES")


def validate_schedule(schedule: Sequence[PaymentScheduleEntry] | None) -> None:
    if schedule is None:
        return
    total = sum(entry.percentage for entry in schedule)
    if abs(total - 100) > SCHEDULE_TOLERANCE:
        raise ValidationError(
            "Payment schedule percentages must sum to 100%",
            code="INVALID_SCHEDULE",
        )


def validate_subcontract_terms(
    *,
    total_amount: float | None = None,
    retention_percentage: float | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    schedule: Sequence[PaymentScheduleEntry] | None = None,
) -> None:
    """Raise on the first broken rule; ``None`` arguments are not checked."""
    validate_total_amount(total_amount)
    validate_retention(retention_percentage)
    validate_dates(start_date, end_date)
    validate_schedule(schedule)


__all__ = [
    "SCHEDULE_TOLERANCE",
    "validate_subcontract_terms",
    "validate_total_amount",
    "validate_retention",
    "validate_dates",
    "validate_schedule",
]
