from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.models import CertificateStatus, PaymentItemStatus
from core.services.certificate import calculate_net_payable
from core.services.subcontract import PaymentScheduleEntry


def _active_subcontract(services, make_subcontract):
    sc = make_subcontract()
    services["subcontract_service"].approve_subcontract(sc.id, "mgr-1")
    return sc


def _certificate(services, subcontract_id, amount, number="CERT-001"):
    return services["certificate_service"].create_certificate(
        number,
        subcontract_id,
        date(2025, 2, 1),
        date(2025, 2, 28),
        amount,
        submitted_by="site-eng",
    )


def test_calculate_net_payable_splits_retention():
    calc = calculate_net_payable(100000.0, 10.0, 50000.0, 20000.0)

    assert calc.retention_amount == pytest.approx(5000.0)
    assert calc.net_payable == pytest.approx(45000.0)
    assert calc.cumulative_certified == 70000.0
    assert calc.remaining_balance == 30000.0
    assert calc.percentage_complete == pytest.approx(70.0)


def test_create_certificate_computes_amounts(services, make_subcontract):
    sc = _active_subcontract(services, make_subcontract)

    cert = _certificate(services, sc.id, 50000.0)

    assert cert.status == CertificateStatus.DRAFT
    assert cert.project_id == "proj-1"
    assert cert.retention_amount == pytest.approx(5000.0)
    assert cert.net_payable == pytest.approx(45000.0)
    assert cert.previous_certified == 0.0
    assert cert.cumulative_certified == 50000.0
    assert cert.percentage_complete == pytest.approx(50.0)


def test_create_certificate_validation(services, make_subcontract):
    cs = services["certificate_service"]
    sc = _active_subcontract(services, make_subcontract)

    with pytest.raises(ValidationError) as exc_amount:
        _certificate(services, sc.id, 0)
    assert exc_amount.value.code == "INVALID_AMOUNT"

    with pytest.raises(ValidationError) as exc_dates:
        cs.create_certificate("CERT-X", sc.id, date(2025, 3, 1), date(2025, 2, 1), 100.0)
    assert exc_dates.value.code == "INVALID_DATES"

    with pytest.raises(NotFoundError) as exc_missing:
        _certificate(services, "missing-subcontract", 100.0)
    assert exc_missing.value.code == "SUBCONTRACT_NOT_FOUND"


def test_remaining_balance_bounds_certified_amount(services, make_subcontract):
    cs = services["certificate_service"]
    sc = _active_subcontract(services, make_subcontract)

    first = _certificate(services, sc.id, 50000.0)
    cs.submit_for_approval(first.id, "site-eng")
    cs.approve_certificate(first.id, "mgr-1")

    with pytest.raises(BusinessRuleError) as exc:
        _certificate(services, sc.id, 50000.01, number="CERT-002")
    assert exc.value.code == "EXCEEDS_REMAINING_BALANCE"
    assert str(exc.value) == "Certified amount (50000.01) exceeds remaining balance (50000.0)"

    exact = _certificate(services, sc.id, 50000.0, number="CERT-002")
    assert exact.previous_certified == 50000.0
    assert exact.cumulative_certified == 100000.0


def test_approval_certifies_next_pending_schedule_item(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    sc = _active_subcontract(services, make_subcontract)
    items = scs.list_payment_schedule(sc.id)

    cert = _certificate(services, sc.id, 50000.0)
    with pytest.raises(BusinessRuleError) as exc_draft:
        cs.approve_certificate(cert.id, "mgr-1")
    assert str(exc_draft.value) == "Only pending certificates can be approved"

    cs.submit_for_approval(cert.id)
    assert [c.id for c in cs.get_pending_approvals()] == [cert.id]

    approved = cs.approve_certificate(cert.id, "mgr-1", "Manager")
    assert approved.status == CertificateStatus.APPROVED
    assert approved.schedule_item_id == items[0].id

    subcontract = scs.get_subcontract(sc.id)
    assert subcontract.payment_schedule[0].status == PaymentItemStatus.CERTIFIED
    assert subcontract.payment_schedule[0].certified_date is not None
    assert subcontract.total_certified == 50000.0
    assert subcontract.total_retained == pytest.approx(5000.0)
    assert subcontract.remaining_balance == 50000.0


def test_approval_with_unknown_schedule_item_changes_nothing(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    sc = _active_subcontract(services, make_subcontract)
    cert = _certificate(services, sc.id, 50000.0)
    cs.submit_for_approval(cert.id)

    with pytest.raises(NotFoundError) as exc:
        cs.approve_certificate(cert.id, "mgr-1", payment_item_id="missing-item")
    assert exc.value.code == "PAYMENT_ITEM_NOT_FOUND"

    stored = cs.get_certificate(cert.id)
    assert stored.status == CertificateStatus.PENDING_APPROVAL
    assert stored.schedule_item_id is None
    assert scs.get_subcontract(sc.id).total_certified == 0.0
    assert all(
        item.status == PaymentItemStatus.PENDING for item in scs.list_payment_schedule(sc.id)
    )


def test_approval_without_pending_items_is_rejected(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    sc = _active_subcontract(services, make_subcontract)
    cert = _certificate(services, sc.id, 1000.0)
    cs.submit_for_approval(cert.id)
    for item in scs.list_payment_schedule(sc.id):
        scs.update_payment_schedule_item(sc.id, item.id, PaymentItemStatus.CERTIFIED)

    with pytest.raises(BusinessRuleError) as exc:
        cs.approve_certificate(cert.id, "mgr-1")
    assert exc.value.code == "NO_PENDING_PAYMENT_ITEM"
    assert cs.get_certificate(cert.id).status == CertificateStatus.PENDING_APPROVAL


def test_reject_requires_reason(services, make_subcontract):
    cs = services["certificate_service"]
    sc = _active_subcontract(services, make_subcontract)
    cert = _certificate(services, sc.id, 1000.0)
    cs.submit_for_approval(cert.id)

    with pytest.raises(ValidationError) as exc:
        cs.reject_certificate(cert.id, "mgr-1", "  ")
    assert exc.value.code == "REQUIRED_FIELD"

    rejected = cs.reject_certificate(cert.id, "mgr-1", "Photos missing")
    assert rejected.status == CertificateStatus.REJECTED
    assert rejected.rejection_reason == "Photos missing"

    with pytest.raises(BusinessRuleError) as exc_again:
        cs.reject_certificate(cert.id, "mgr-1", "Again")
    assert exc_again.value.code == "INVALID_STATUS"


def test_mark_as_paid_pays_schedule_item_and_audits_payment(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    audit = services["audit_service"]
    sc = _active_subcontract(services, make_subcontract)
    cert = _certificate(services, sc.id, 50000.0)
    cs.submit_for_approval(cert.id)

    with pytest.raises(BusinessRuleError) as exc_pending:
        cs.mark_as_paid(cert.id, "PAY-1")
    assert str(exc_pending.value) == "Only approved certificates can be marked as paid"

    cs.approve_certificate(cert.id, "mgr-1")
    paid = cs.mark_as_paid(cert.id, "PAY-1", user_id="fin-1")

    assert paid.status == CertificateStatus.PAID
    assert paid.payment_id == "PAY-1"
    subcontract = scs.get_subcontract(sc.id)
    assert subcontract.payment_schedule[0].status == PaymentItemStatus.PAID
    assert subcontract.total_paid == 50000.0

    payments = audit.get_entity_history("payment", "PAY-1")
    assert len(payments) == 1
    assert payments[0].financial_impact.amount == pytest.approx(45000.0)
    assert payments[0].entity_name == "Payment to Acme Electrical"


def test_create_payment_from_certificate(services, make_subcontract):
    cs = services["certificate_service"]
    sc = _active_subcontract(services, make_subcontract)
    cert = _certificate(services, sc.id, 30000.0)
    cs.submit_for_approval(cert.id)

    with pytest.raises(BusinessRuleError):
        cs.create_payment_from_certificate(cert.id)

    cs.approve_certificate(cert.id, "mgr-1")
    payment = cs.create_payment_from_certificate(cert.id, user_id="fin-1")

    assert payment.id.startswith("PAY-")
    assert payment.amount == pytest.approx(27000.0)
    assert payment.retention_amount == pytest.approx(3000.0)
    assert payment.status == "pending"
    assert cs.get_certificate(cert.id).status == CertificateStatus.PAID
    assert cs.get_certificate(cert.id).payment_id == payment.id


def test_only_draft_certificates_are_editable_or_deletable(services, make_subcontract):
    cs = services["certificate_service"]
    sc = _active_subcontract(services, make_subcontract)
    cert = _certificate(services, sc.id, 1000.0)

    updated = cs.update_certificate(cert.id, amount_certified=2000.0, notes="Revised")
    assert updated.retention_amount == pytest.approx(200.0)
    assert updated.net_payable == pytest.approx(1800.0)
    assert updated.notes == "Revised"

    cs.submit_for_approval(cert.id)
    with pytest.raises(BusinessRuleError) as exc_update:
        cs.update_certificate(cert.id, notes="late")
    assert str(exc_update.value) == "Only draft certificates can be updated"
    with pytest.raises(BusinessRuleError) as exc_delete:
        cs.delete_certificate(cert.id)
    assert str(exc_delete.value) == "Only draft certificates can be deleted"

    draft = _certificate(services, sc.id, 500.0, number="CERT-002")
    cs.delete_certificate(draft.id)
    assert cs.get_certificate(draft.id) is None


def test_certificate_stats(services, make_subcontract):
    cs = services["certificate_service"]
    sc = _active_subcontract(services, make_subcontract)
    paid = _certificate(services, sc.id, 50000.0)
    cs.submit_for_approval(paid.id)
    cs.approve_certificate(paid.id, "mgr-1")
    cs.mark_as_paid(paid.id, "PAY-1")
    _certificate(services, sc.id, 10000.0, number="CERT-002")

    stats = cs.get_certificate_stats()
    assert stats.total == 2
    assert stats.paid == 1
    assert stats.total_certified == 60000.0
    assert stats.total_paid == pytest.approx(45000.0)
    assert stats.total_retained == pytest.approx(6000.0)
    assert stats.average_approval_time >= 0.0

    newest = cs.query_certificates(page=1, limit=1)
    assert newest.total == 2
    assert newest.data[0].certificate_number == "CERT-002"


def test_approval_picks_schedule_item_matching_certified_amount(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    sc = _active_subcontract(services, make_subcontract)
    items = scs.list_payment_schedule(sc.id)

    rough_in = _certificate(services, sc.id, 30000.0)
    cs.submit_for_approval(rough_in.id)
    approved = cs.approve_certificate(rough_in.id, "mgr-1")
    assert approved.schedule_item_id == items[1].id

    advance = _certificate(services, sc.id, 50000.0, number="CERT-002")
    assert advance.previous_certified == 30000.0
    cs.submit_for_approval(advance.id)
    approved = cs.approve_certificate(advance.id, "mgr-1")
    assert approved.schedule_item_id == items[0].id

    subcontract = scs.get_subcontract(sc.id)
    assert subcontract.total_certified == approved.cumulative_certified == 80000.0
    assert subcontract.remaining_balance == 20000.0
    assert subcontract.payment_schedule[2].status == PaymentItemStatus.PENDING


def test_approval_rejects_amount_without_matching_schedule_item(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    sc = _active_subcontract(services, make_subcontract)
    cert = _certificate(services, sc.id, 25000.0)
    cs.submit_for_approval(cert.id)

    with pytest.raises(BusinessRuleError) as exc:
        cs.approve_certificate(cert.id, "mgr-1")
    assert exc.value.code == "SCHEDULE_AMOUNT_MISMATCH"

    with pytest.raises(BusinessRuleError) as exc_pinned:
        cs.approve_certificate(cert.id, "mgr-1", payment_item_id=scs.list_payment_schedule(sc.id)[0].id)
    assert exc_pinned.value.code == "SCHEDULE_AMOUNT_MISMATCH"

    assert cs.get_certificate(cert.id).status == CertificateStatus.PENDING_APPROVAL
    subcontract = scs.get_subcontract(sc.id)
    assert subcontract.total_certified == 0.0
    assert subcontract.remaining_balance == 100000.0


def test_lump_sum_schedule_only_certifies_the_full_amount(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    sc = make_subcontract(schedule=[PaymentScheduleEntry("Lump sum", 100)])
    scs.approve_subcontract(sc.id, "mgr-1")

    partial = _certificate(services, sc.id, 50000.0)
    cs.submit_for_approval(partial.id)
    with pytest.raises(BusinessRuleError) as exc:
        cs.approve_certificate(partial.id, "mgr-1")
    assert exc.value.code == "SCHEDULE_AMOUNT_MISMATCH"
    assert scs.get_subcontract(sc.id).remaining_balance == 100000.0

    full = _certificate(services, sc.id, 100000.0, number="CERT-002")
    cs.submit_for_approval(full.id)
    cs.approve_certificate(full.id, "mgr-1")
    assert scs.get_subcontract(sc.id).remaining_balance == 0.0


def test_paid_schedule_item_cannot_be_certified_again(services, make_subcontract):
    cs = services["certificate_service"]
    scs = services["subcontract_service"]
    sc = _active_subcontract(services, make_subcontract)
    first = _certificate(services, sc.id, 50000.0)
    cs.submit_for_approval(first.id)
    cs.approve_certificate(first.id, "mgr-1")
    cs.mark_as_paid(first.id, "PAY-1")
    paid_item_id = cs.get_certificate(first.id).schedule_item_id

    second = _certificate(services, sc.id, 50000.0, number="CERT-002")
    cs.submit_for_approval(second.id)
    with pytest.raises(BusinessRuleError) as exc:
        cs.approve_certificate(second.id, "mgr-1", payment_item_id=paid_item_id)
    assert exc.value.code == "INVALID_STATUS"

    subcontract = scs.get_subcontract(sc.id)
    assert subcontract.total_paid == 50000.0
    assert subcontract.payment_schedule[0].status == PaymentItemStatus.PAID
    assert cs.get_certificate(second.id).status == CertificateStatus.PENDING_APPROVAL
