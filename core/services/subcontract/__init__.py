from .financials import build_payment_schedule, recalculate_subcontract_totals, split_commitment
from .models import PaymentScheduleEntry, SubcontractFilters, SubcontractStats
from .service import SubcontractService
from .validation import validate_subcontract_terms

__all__ = [
    "SubcontractService",
    "PaymentScheduleEntry",
    "SubcontractFilters",
    "SubcontractStats",
    "build_payment_schedule",
    "recalculate_subcontract_totals",
    "split_commitment",
    "validate_subcontract_terms",
]
