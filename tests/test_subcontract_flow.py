from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.models import DocumentType, PaymentItemStatus, SubcontractStatus
from core.services.subcontract import PaymentScheduleEntry, SubcontractFilters, split_commitment


def _create(services, **overrides):
    fields = dict(
        contract_number="SC-100",
        project_id="proj-1",
        subcontractor_id="sub-1",
        subcontractor_name="Acme Electrical",
        total_amount=1000.0,
        retention_percentage=5.0,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 6, 30),
        payment_schedule=[PaymentScheduleEntry("Single", 100)],
    )
    fields.update(overrides)
    return services["subcontract_service"].create_subcontract(**fields)


def test_create_subcontract_builds_schedule_in_draft(services, make_subcontract):
    sc = make_subcontract()

    assert sc.status == SubcontractStatus.DRAFT
    assert [item.amount for item in sc.payment_schedule] == [50000.0, 30000.0, 20000.0]
    assert [item.sequence for item in sc.payment_schedule] == [1, 2, 3]
    assert all(item.status == PaymentItemStatus.PENDING for item in sc.payment_schedule)
    assert sc.remaining_balance == 100000.0
    assert sc.total_certified == 0.0

    stored = services["subcontract_service"].get_subcontract(sc.id)
    assert stored.contract_number == "SC-001"
    assert len(stored.payment_schedule) == 3


def test_subcontract_validation_rules(services):
    with pytest.raises(ValidationError) as exc_amount:
        _create(services, total_amount=0)
    assert exc_amount.value.code == "INVALID_AMOUNT"
    assert str(exc_amount.value) == "Total amount must be greater than 0"

    with pytest.raises(ValidationError) as exc_retention:
        _create(services, retention_percentage=120)
    assert exc_retention.value.code == "INVALID_RETENTION"

    with pytest.raises(ValidationError) as exc_dates:
        _create(services, start_date=date(2025, 7, 1))
    assert exc_dates.value.code == "INVALID_DATES"

    with pytest.raises(ValidationError) as exc_schedule:
        _create(
            services,
            payment_schedule=[PaymentScheduleEntry("A", 60), PaymentScheduleEntry("B", 30)],
        )
    assert exc_schedule.value.code == "INVALID_SCHEDULE"
    assert str(exc_schedule.value) == "Payment schedule percentages must sum to 100%"

    assert services["subcontract_service"].list_by_project("proj-1") == []


def test_schedule_within_tolerance_is_accepted(services):
    sc = _create(
        services,
        payment_schedule=[
            PaymentScheduleEntry("A", 33.33),
            PaymentScheduleEntry("B", 33.33),
            PaymentScheduleEntry("C", 33.34),
        ],
    )
    assert len(sc.payment_schedule) == 3


def test_lifecycle_transitions(services, make_subcontract):
    scs = services["subcontract_service"]
    sc = make_subcontract()

    with pytest.raises(BusinessRuleError) as exc_complete_draft:
        scs.complete_subcontract(sc.id, date(2025, 12, 1))
    assert exc_complete_draft.value.code == "INVALID_STATUS"

    approved = scs.approve_subcontract(sc.id, "mgr-1", "Manager")
    assert approved.status == SubcontractStatus.ACTIVE
    assert approved.approved_by == "mgr-1"
    assert approved.approved_at is not None

    with pytest.raises(BusinessRuleError) as exc_reapprove:
        scs.approve_subcontract(sc.id, "mgr-1")
    assert str(exc_reapprove.value) == "Only draft subcontracts can be approved"

    completed = scs.complete_subcontract(sc.id, date(2025, 12, 1))
    assert completed.status == SubcontractStatus.COMPLETED
    assert completed.completion_date == date(2025, 12, 1)

    with pytest.raises(BusinessRuleError):
        scs.cancel_subcontract(sc.id, "too late")


def test_approval_commits_cost_and_cancel_reverses_it(services, budgeted_project, make_subcontract):
    scs = services["subcontract_service"]
    ccs = services["cost_code_service"]
    concrete = budgeted_project["concrete"]
    wiring = budgeted_project["wiring"]
    sc = make_subcontract(cost_codes=[concrete.id, wiring.id])

    assert ccs.get_budget_for("proj-1", concrete.id).committed_amount == 0.0

    scs.approve_subcontract(sc.id, "mgr-1")
    assert ccs.get_budget_for("proj-1", concrete.id).committed_amount == 50000.0
    assert ccs.get_budget_for("proj-1", wiring.id).committed_amount == 50000.0
    assert scs.calculate_committed_cost("proj-1") == 100000.0

    cancelled = scs.cancel_subcontract(sc.id, "Scope removed", user_id="mgr-1")
    assert cancelled.status == SubcontractStatus.CANCELLED
    assert "Cancellation reason: Scope removed" in cancelled.notes
    assert ccs.get_budget_for("proj-1", concrete.id).committed_amount == 0.0
    assert scs.calculate_committed_cost("proj-1") == 0.0


def test_paid_subcontract_cannot_be_cancelled_or_deleted(services, make_subcontract):
    scs = services["subcontract_service"]
    sc = make_subcontract()
    scs.approve_subcontract(sc.id, "mgr-1")
    first = scs.next_pending_item_id(sc.id)
    scs.update_payment_schedule_item(sc.id, first, PaymentItemStatus.CERTIFIED)
    scs.update_payment_schedule_item(sc.id, first, PaymentItemStatus.PAID)

    with pytest.raises(BusinessRuleError) as exc_cancel:
        scs.cancel_subcontract(sc.id, "no")
    assert exc_cancel.value.code == "PAYMENTS_MADE"

    with pytest.raises(BusinessRuleError) as exc_delete:
        scs.delete_subcontract(sc.id)
    assert exc_delete.value.code == "NOT_DELETABLE"


def test_schedule_item_updates_rederive_totals(services, make_subcontract):
    scs = services["subcontract_service"]
    sc = make_subcontract()
    scs.approve_subcontract(sc.id, "mgr-1")
    items = scs.list_payment_schedule(sc.id)

    scs.update_payment_schedule_item(sc.id, items[0].id, PaymentItemStatus.CERTIFIED)
    scs.update_payment_schedule_item(sc.id, items[1].id, PaymentItemStatus.CERTIFIED)
    certified = scs.update_payment_schedule_item(sc.id, items[1].id, PaymentItemStatus.PAID)

    assert certified.total_certified == 80000.0
    assert certified.total_paid == 30000.0
    assert certified.total_retained == pytest.approx(8000.0)
    assert certified.remaining_balance == 20000.0
    assert scs.calculate_retention_balance(sc.id) == pytest.approx(8000.0)
    assert scs.next_pending_item_id(sc.id) == items[2].id

    with pytest.raises(NotFoundError) as exc:
        scs.update_payment_schedule_item(sc.id, "missing-item", PaymentItemStatus.PAID)
    assert exc.value.code == "PAYMENT_ITEM_NOT_FOUND"


def test_schedule_items_only_move_forward(services, make_subcontract):
    scs = services["subcontract_service"]
    sc = make_subcontract()
    scs.approve_subcontract(sc.id, "mgr-1")
    item = scs.list_payment_schedule(sc.id)[0]

    with pytest.raises(BusinessRuleError) as exc_skip:
        scs.update_payment_schedule_item(sc.id, item.id, PaymentItemStatus.PAID)
    assert exc_skip.value.code == "INVALID_STATUS"

    scs.update_payment_schedule_item(sc.id, item.id, PaymentItemStatus.CERTIFIED)
    paid = scs.update_payment_schedule_item(sc.id, item.id, PaymentItemStatus.PAID)
    assert paid.total_paid == 50000.0

    for status in (PaymentItemStatus.CERTIFIED, PaymentItemStatus.PENDING, PaymentItemStatus.PAID):
        with pytest.raises(BusinessRuleError) as exc_back:
            scs.update_payment_schedule_item(sc.id, item.id, status)
        assert exc_back.value.code == "INVALID_STATUS"

    stored = scs.get_subcontract(sc.id)
    assert stored.total_paid == 50000.0
    assert stored.payment_schedule[0].status == PaymentItemStatus.PAID


def test_update_scales_schedule_and_moves_commitment(services, budgeted_project, make_subcontract):
    scs = services["subcontract_service"]
    ccs = services["cost_code_service"]
    concrete = budgeted_project["concrete"]
    sc = make_subcontract(cost_codes=[concrete.id])
    scs.approve_subcontract(sc.id, "mgr-1")

    updated = scs.update_subcontract(sc.id, total_amount=120000.0)
    assert [item.amount for item in updated.payment_schedule] == [60000.0, 36000.0, 24000.0]
    assert updated.remaining_balance == 120000.0
    assert ccs.get_budget_for("proj-1", concrete.id).committed_amount == 120000.0


def test_delete_draft_subcontract(services, make_subcontract):
    scs = services["subcontract_service"]
    sc = make_subcontract()

    scs.delete_subcontract(sc.id)

    assert scs.get_subcontract(sc.id) is None
    with pytest.raises(NotFoundError) as exc:
        scs.approve_subcontract(sc.id, "mgr-1")
    assert exc.value.code == "SUBCONTRACT_NOT_FOUND"


def test_documents_attach_and_detach(services, make_subcontract):
    scs = services["subcontract_service"]
    sc = make_subcontract()

    doc = scs.attach_document(sc.id, "contract.pdf", DocumentType.CONTRACT, 2048, "application/pdf")
    assert [d.id for d in scs.get_subcontract(sc.id).documents] == [doc.id]

    scs.detach_document(sc.id, doc.id)
    assert scs.get_subcontract(sc.id).documents == []

    with pytest.raises(NotFoundError) as exc:
        scs.detach_document(sc.id, doc.id)
    assert exc.value.code == "DOCUMENT_NOT_FOUND"


def test_query_and_stats(services, make_subcontract):
    scs = services["subcontract_service"]
    first = make_subcontract(contract_number="SC-001")
    make_subcontract(contract_number="SC-002", total_amount=50000.0, retention=5.0)
    scs.approve_subcontract(first.id, "mgr-1")

    active = scs.query_subcontracts(SubcontractFilters(status=SubcontractStatus.ACTIVE))
    assert [sc.id for sc in active.data] == [first.id]

    large = scs.query_subcontracts(SubcontractFilters(min_amount=60000.0))
    assert large.total == 1

    paged = scs.query_subcontracts(page=2, limit=1)
    assert paged.total == 2
    assert paged.total_pages == 2
    assert len(paged.data) == 1

    stats = scs.get_subcontract_stats()
    assert stats.total == 2
    assert stats.active == 1
    assert stats.total_value == 150000.0
    assert stats.average_retention_percentage == pytest.approx(7.5)


def test_split_commitment_ignores_duplicate_codes():
    assert split_commitment(900.0, ["a", "b", "a", "c"]) == {"a": 300.0, "b": 300.0, "c": 300.0}
    assert split_commitment(900.0, []) == {}


def test_query_filters_by_cost_code_and_search(services, budgeted_project, make_subcontract):
    scs = services["subcontract_service"]
    concrete = budgeted_project["concrete"]
    wiring = budgeted_project["wiring"]
    first = make_subcontract(contract_number="SC-001", cost_codes=[concrete.id])
    second = make_subcontract(contract_number="SC-002", cost_codes=[concrete.id, wiring.id])

    by_code = scs.query_subcontracts(SubcontractFilters(cost_code_id=wiring.id))
    assert [sc.id for sc in by_code.data] == [second.id]
    assert by_code.total == 1

    both = scs.query_subcontracts(SubcontractFilters(cost_code_id=concrete.id))
    assert [sc.id for sc in both.data] == [first.id, second.id]
    assert [len(sc.payment_schedule) for sc in both.data] == [3, 3]

    assert [sc.id for sc in scs.query_subcontracts(SubcontractFilters(search="sc-002")).data] == [second.id]
    assert scs.query_subcontracts(SubcontractFilters(search="%")).total == 0
