from datetime import date

from core.events.domain_events import domain_events
from core.events.signal import Signal


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[str] = []

    def _handler(project_id: str) -> None:
        seen.append(project_id)

    domain_events.budgets_changed.connect(_handler)
    domain_events.budgets_changed.emit("p-1")
    domain_events.budgets_changed.disconnect(_handler)
    domain_events.budgets_changed.emit("p-2")

    assert seen == ["p-1"]


def test_connect_returns_unsubscribe_callable():
    signal: Signal[str] = Signal()
    seen: list[str] = []

    unsubscribe = signal.connect(seen.append)
    signal.connect(seen.append)
    assert signal.subscriber_count() == 1

    signal.emit("a")
    unsubscribe()
    signal.emit("b")

    assert seen == ["a"]
    assert signal.subscriber_count() == 0


def test_signal_emit_prunes_dead_proxy_callbacks():
    signal: Signal[str] = Signal()
    seen: list[str] = []

    class _DeadProxyCallback:
        def __init__(self) -> None:
            self.calls = 0

        def __call__(self, _payload: str) -> None:
            self.calls += 1
            raise ReferenceError("weakly-referenced object no longer exists")

    dead = _DeadProxyCallback()

    def _ok(payload: str) -> None:
        seen.append(payload)

    signal.connect(dead)
    signal.connect(_ok)

    signal.emit("p-1")
    signal.emit("p-2")

    assert dead.calls == 1
    assert seen == ["p-1", "p-2"]


def test_signal_emit_keeps_other_errors_visible():
    signal: Signal[str] = Signal()

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)

    try:
        signal.emit("x")
        assert False, "Expected RuntimeError to propagate"
    except RuntimeError as exc:
        assert str(exc) == "boom"


def test_handler_may_unsubscribe_while_being_notified():
    signal: Signal[str] = Signal()
    calls: list[str] = []

    def _once(payload: str) -> None:
        calls.append(payload)
        signal.disconnect(_once)

    signal.connect(_once)
    signal.emit("first")
    signal.emit("second")

    assert calls == ["first"]


def test_services_emit_project_scoped_events(services, budgeted_project, make_subcontract):
    seen: list[tuple[str, str]] = []

    def _subcontracts(project_id: str) -> None:
        seen.append(("subcontracts", project_id))

    def _budgets(project_id: str) -> None:
        seen.append(("budgets", project_id))

    def _expenses(project_id: str) -> None:
        seen.append(("expenses", project_id))

    domain_events.subcontracts_changed.connect(_subcontracts)
    domain_events.budgets_changed.connect(_budgets)
    domain_events.expenses_changed.connect(_expenses)
    try:
        sc = make_subcontract(cost_codes=[budgeted_project["concrete"].id])
        services["subcontract_service"].approve_subcontract(sc.id, "mgr-1")
        services["expense_service"].create_expense(
            project_id="proj-1",
            cost_code_id=budgeted_project["wiring"].id,
            supplier_id="supplier-1",
            amount=10.0,
            description="Cable ties and clips",
            invoice_date=date(2025, 5, 1),
        )
    finally:
        domain_events.subcontracts_changed.disconnect(_subcontracts)
        domain_events.budgets_changed.disconnect(_budgets)
        domain_events.expenses_changed.disconnect(_expenses)

    assert seen == [
        ("subcontracts", "proj-1"),
        ("subcontracts", "proj-1"),
        ("budgets", "proj-1"),
        ("expenses", "proj-1"),
        ("budgets", "proj-1"),
    ]
