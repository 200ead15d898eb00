"""Change notifications for ledgers, keyed by project id (cost codes have none)."""
from __future__ import annotations

from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.cost_codes_changed: Signal[str] = Signal()  # cost_code_id
        self.budgets_changed: Signal[str] = Signal()  # project_id
        self.subcontracts_changed: Signal[str] = Signal()  # project_id
        self.certificates_changed: Signal[str] = Signal()  # project_id
        self.expenses_changed: Signal[str] = Signal()  # project_id
        self.financials_recalculated: Signal[str] = Signal()  # project_id


# SINGLE global instance
domain_events = DomainEvents()
