from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.models import AttachmentType, ExpenseStatus, OCRData, OCRExpenseInput, OCRFile, PaymentStatus
from core.services.expense import ExpenseFilters, validate_expense_classification, validate_ocr_data


def _expense(services, cost_code_id, amount=1000.0, **overrides):
    fields = dict(
        project_id="proj-1",
        cost_code_id=cost_code_id,
        supplier_id="supplier-1",
        amount=amount,
        description="Cement bags for columns",
        invoice_date=date(2025, 3, 1),
        supplier_name="Cementos SA",
        invoice_number="F-001",
    )
    fields.update(overrides)
    return services["expense_service"].create_expense(**fields)


def _ocr_input(confidence, **overrides):
    fields = dict(
        amount=250.0,
        date=date(2025, 3, 5),
        supplier="Pinturas del Norte",
        description="Compra de pintura para fachada",
        ocr_data=OCRData(
            raw_text="PINTURAS DEL NORTE ... TOTAL 250.00",
            confidence=confidence,
            processed_at=datetime(2025, 3, 5, tzinfo=timezone.utc),
        ),
        file=OCRFile(name="invoice.pdf", mime_type="application/pdf", data="JVBERi0xLjQ="),
    )
    fields.update(overrides)
    return OCRExpenseInput(**fields)


def test_classification_requires_every_mandatory_field():
    result = validate_expense_classification(
        project_id="proj-1",
        cost_code_id=None,
        supplier_id="",
        amount=0,
        description="abc",
        invoice_date=None,
    )

    assert not result.is_valid
    assert [e.field for e in result.errors] == [
        "cost_code_id",
        "supplier_id",
        "amount",
        "description",
        "invoice_date",
    ]
    assert result.errors[0].message == "Cost code is required for expense classification"
    assert any(w.message == "Invoice number not provided" for w in result.warnings)


def test_large_amount_warning_uses_configured_threshold(monkeypatch):
    monkeypatch.setenv("JC_LARGE_EXPENSE_THRESHOLD", "500")
    result = validate_expense_classification(
        project_id="p",
        cost_code_id="c",
        supplier_id="s",
        amount=600.0,
        description="Concrete pour",
        invoice_date=date(2025, 1, 1),
        invoice_number="F-1",
    )

    assert result.is_valid
    assert [w.message for w in result.warnings] == ["Large expense amount detected"]


def test_expense_missing_cost_code_is_not_stored(services):
    es = services["expense_service"]

    with pytest.raises(ValidationError) as exc:
        _expense(services, None)
    assert exc.value.code == "REQUIRED_FIELD"
    assert "Cost code is required for expense classification" in str(exc.value)
    assert es.list_by_project("proj-1") == []


def test_expense_with_unknown_cost_code_is_rejected(services):
    with pytest.raises(NotFoundError) as exc:
        _expense(services, "missing-cost-code")
    assert exc.value.code == "COST_CODE_NOT_FOUND"


def test_create_expense_adds_budget_actuals(services, budgeted_project):
    ccs = services["cost_code_service"]
    concrete = budgeted_project["concrete"]

    expense = _expense(services, concrete.id, amount=1000.0, tax_amount=180.0)

    assert expense.status == ExpenseStatus.DRAFT
    assert expense.payment_status == PaymentStatus.UNPAID
    assert expense.total_amount == 1180.0
    assert ccs.get_budget_for("proj-1", concrete.id).actual_amount == 1180.0


def test_update_and_classify_move_actuals_between_budgets(services, budgeted_project):
    es = services["expense_service"]
    ccs = services["cost_code_service"]
    concrete = budgeted_project["concrete"]
    wiring = budgeted_project["wiring"]
    expense = _expense(services, concrete.id, amount=1000.0)

    es.update_expense(expense.id, amount=1500.0)
    assert ccs.get_budget_for("proj-1", concrete.id).actual_amount == 1500.0

    classified = es.classify_expense(expense.id, "proj-1", wiring.id, "supplier-2", supplier_name="Other")
    assert classified.cost_code_id == wiring.id
    assert classified.needs_review is False
    assert ccs.get_budget_for("proj-1", concrete.id).actual_amount == 0.0
    assert ccs.get_budget_for("proj-1", wiring.id).actual_amount == 1500.0

    with pytest.raises(ValidationError) as exc:
        es.update_expense(expense.id, colour="blue")
    assert exc.value.code == "INVALID_FIELD"


def test_delete_and_reject_reverse_actuals(services, budgeted_project):
    es = services["expense_service"]
    ccs = services["cost_code_service"]
    concrete = budgeted_project["concrete"]
    draft = _expense(services, concrete.id, amount=400.0)
    pending = _expense(services, concrete.id, amount=600.0, invoice_number="F-002")
    assert ccs.get_budget_for("proj-1", concrete.id).actual_amount == 1000.0

    es.delete_expense(draft.id)
    assert es.get_expense(draft.id) is None
    assert ccs.get_budget_for("proj-1", concrete.id).actual_amount == 600.0

    es.submit_for_approval(pending.id)
    with pytest.raises(BusinessRuleError) as exc_delete:
        es.delete_expense(pending.id)
    assert exc_delete.value.code == "NOT_DELETABLE"

    with pytest.raises(ValidationError) as exc_reason:
        es.reject_expense(pending.id, "mgr-1", "")
    assert exc_reason.value.code == "REQUIRED_FIELD"

    rejected = es.reject_expense(pending.id, "mgr-1", "Duplicate invoice")
    assert rejected.status == ExpenseStatus.REJECTED
    assert ccs.get_budget_for("proj-1", concrete.id).actual_amount == 0.0


def test_approval_workflow_and_partial_payments(services, budgeted_project):
    es = services["expense_service"]
    expense = _expense(services, budgeted_project["concrete"].id, amount=1000.0)

    with pytest.raises(BusinessRuleError) as exc_draft:
        es.approve_expense(expense.id, "mgr-1")
    assert str(exc_draft.value) == "Only pending expenses can be approved"

    es.submit_for_approval(expense.id, "site-eng")
    approved = es.approve_expense(expense.id, "mgr-1", notes="Checked against delivery note")
    assert approved.status == ExpenseStatus.APPROVED
    assert approved.approved_by == "mgr-1"
    assert "Approval notes: Checked against delivery note" in approved.notes

    partial = es.record_payment(expense.id, 400.0, date(2025, 3, 10), payment_method="transfer")
    assert partial.payment_status == PaymentStatus.PARTIAL
    assert partial.status == ExpenseStatus.APPROVED
    assert partial.paid_amount == 400.0

    with pytest.raises(BusinessRuleError) as exc_over:
        es.record_payment(expense.id, 600.01, date(2025, 3, 11))
    assert exc_over.value.code == "PAYMENT_EXCEEDS_TOTAL"
    assert str(exc_over.value) == "Payment amount exceeds total expense amount"

    paid = es.record_payment(expense.id, 600.0, date(2025, 3, 11), notes="Final transfer")
    assert paid.payment_status == PaymentStatus.PAID
    assert paid.status == ExpenseStatus.PAID
    assert paid.paid_amount == 1000.0
    assert "Payment notes: Final transfer" in paid.notes

    with pytest.raises(BusinessRuleError) as exc_update:
        es.update_expense(expense.id, notes="late edit")
    assert str(exc_update.value) == "Cannot update paid expenses"


def test_bulk_approve_skips_failures(services, budgeted_project):
    es = services["expense_service"]
    concrete_id = budgeted_project["concrete"].id
    first = _expense(services, concrete_id, amount=100.0)
    second = _expense(services, concrete_id, amount=200.0, invoice_number="F-002")
    still_draft = _expense(services, concrete_id, amount=300.0, invoice_number="F-003")
    es.submit_for_approval(first.id)
    es.submit_for_approval(second.id)

    approved = es.bulk_approve_expenses([first.id, still_draft.id, "missing", second.id], "mgr-1")

    assert [exp.id for exp in approved] == [first.id, second.id]
    assert es.get_expense(still_draft.id).status == ExpenseStatus.DRAFT

    rejected = es.bulk_reject_expenses([first.id, still_draft.id], "mgr-1", "Wrong period")
    assert rejected == []


def test_ocr_expense_with_low_confidence_needs_review(services):
    es = services["expense_service"]
    data = _ocr_input(0.65)

    result = validate_ocr_data(data)
    assert result.is_valid
    assert [w.message for w in result.warnings] == ["Low OCR confidence detected"]

    expense = es.create_expense_from_ocr(data)
    paint = services["cost_code_service"].get_cost_code_by_code("07.02.01")

    assert expense.status == ExpenseStatus.PENDING_APPROVAL
    assert expense.is_auto_created is True
    assert expense.needs_review is True
    assert expense.ocr_confidence == 0.65
    assert expense.cost_code_id == paint.id
    assert expense.project_id == "default-project-id"
    assert expense.supplier_id == "unknown-supplier-id"
    assert expense.expense_number.startswith("AUTO-")
    assert expense.supplier_name == "Pinturas del Norte"

    attachment = expense.attachments[0]
    assert attachment.attachment_type == AttachmentType.INVOICE
    assert attachment.url == f"/uploads/expenses/{expense.id}/invoice.pdf"
    assert attachment.size == len("JVBERi0xLjQ=")

    assert [exp.id for exp in es.get_expenses_needing_review()] == [expense.id]


def test_ocr_expense_with_high_confidence_skips_review(services, monkeypatch):
    monkeypatch.setenv("JC_OCR_DEFAULT_PROJECT_ID", "proj-ocr")
    es = services["expense_service"]

    expense = es.create_expense_from_ocr(_ocr_input(0.95, supplier_id="supplier-9"))

    assert expense.needs_review is False
    assert expense.project_id == "proj-ocr"
    assert expense.supplier_id == "supplier-9"
    assert es.get_expenses_needing_review() == []


def test_ocr_input_without_file_or_confidence_is_rejected(services):
    es = services["expense_service"]

    with pytest.raises(ValidationError) as exc_file:
        es.create_expense_from_ocr(_ocr_input(0.9, file=None))
    assert exc_file.value.code == "OCR_MISSING_FILE"

    with pytest.raises(ValidationError) as exc_conf:
        es.create_expense_from_ocr(_ocr_input(0.2))
    assert exc_conf.value.code == "OCR_LOW_CONFIDENCE"

    with pytest.raises(ValidationError) as exc_unclassified:
        es.create_expense_from_ocr(_ocr_input(0.9, description="zzz qqq"))
    assert exc_unclassified.value.code == "REQUIRED_FIELD"

    assert es.query_expenses().total == 0


def test_query_and_stats(services, budgeted_project):
    es = services["expense_service"]
    concrete_id = budgeted_project["concrete"].id
    small = _expense(services, concrete_id, amount=100.0, tags=["site"])
    big = _expense(services, concrete_id, amount=5000.0, invoice_number="F-002")
    es.submit_for_approval(big.id)

    newest = es.query_expenses(ExpenseFilters(project_id="proj-1"), page=1, limit=1)
    assert newest.total == 2
    assert newest.data[0].id == big.id

    assert [e.id for e in es.query_expenses(ExpenseFilters(min_amount=1000.0)).data] == [big.id]
    assert [e.id for e in es.query_expenses(ExpenseFilters(tags=("site",))).data] == [small.id]
    assert [e.id for e in es.get_pending_approvals()] == [big.id]
    assert es.query_expenses(ExpenseFilters(search="cementos")).total == 2
    assert [e.id for e in es.query_expenses(ExpenseFilters(search="f-002")).data] == [big.id]
    assert es.query_expenses(ExpenseFilters(project_id="proj-1"), page=3, limit=1).data == []

    stats = es.get_expense_stats()
    assert stats.total == 2
    assert stats.draft == 1
    assert stats.pending_approval == 1
    assert stats.total_amount == 5100.0
    assert stats.unpaid_amount == 5100.0
    assert stats.by_cost_code == {concrete_id: 5100.0}


@pytest.mark.parametrize(
    "changes, code",
    [
        ({"description": "ab"}, "INVALID_DESCRIPTION"),
        ({"invoice_date": None}, "REQUIRED_FIELD"),
        ({"amount": 0}, "INVALID_AMOUNT"),
        ({"supplier_id": ""}, "REQUIRED_FIELD"),
    ],
)
def test_update_expense_revalidates_changed_fields(services, budgeted_project, changes, code):
    es = services["expense_service"]
    ccs = services["cost_code_service"]
    concrete_id = budgeted_project["concrete"].id
    expense = _expense(services, concrete_id, amount=1000.0)

    with pytest.raises(ValidationError) as exc:
        es.update_expense(expense.id, **changes)
    assert exc.value.code == code

    stored = es.get_expense(expense.id)
    assert stored.description == "Cement bags for columns"
    assert stored.invoice_date == date(2025, 3, 1)
    assert stored.amount == 1000.0
    assert ccs.get_budget_for("proj-1", concrete_id).actual_amount == 1000.0


def test_partial_payments_settle_despite_float_sums(services, budgeted_project):
    es = services["expense_service"]
    expense = _expense(services, budgeted_project["concrete"].id, amount=0.3)
    es.submit_for_approval(expense.id)
    es.approve_expense(expense.id, "mgr-1")

    es.record_payment(expense.id, 0.1, date(2025, 3, 10))
    paid = es.record_payment(expense.id, 0.2, date(2025, 3, 11))

    assert paid.status == ExpenseStatus.PAID
    assert paid.payment_status == PaymentStatus.PAID
    assert paid.paid_amount == 0.3
