# tests/conftest.py
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import infra.db.models  # noqa: F401  (registers the ORM tables on Base)
from infra.db.base import Base
from infra.services import build_service_graph
from core.services.subcontract import PaymentScheduleEntry


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def services(session):
    # Same wiring as the application, seeded with the default catalog
    return build_service_graph(session).as_dict()


@pytest.fixture
def budgeted_project(services):
    """One project with a 50,000 budget on each of two catalog cost codes."""
    ccs = services["cost_code_service"]
    concrete = ccs.get_cost_code_by_code("03.01.01")
    wiring = ccs.get_cost_code_by_code("05.01.01")
    ccs.create_budget("proj-1", concrete.id, 100, 500)
    ccs.create_budget("proj-1", wiring.id, 1000, 50)
    return {"project_id": "proj-1", "concrete": concrete, "wiring": wiring}


@pytest.fixture
def make_subcontract(services):
    """Factory for a draft subcontract, 50/30/20 schedule unless one is given."""

    def _make(project_id="proj-1", *, contract_number="SC-001", total_amount=100000.0, retention=10.0, cost_codes=None, schedule=None):
        return services["subcontract_service"].create_subcontract(
            contract_number=contract_number,
            project_id=project_id,
            subcontractor_id="sub-1",
            subcontractor_name="Acme Electrical",
            total_amount=total_amount,
            retention_percentage=retention,
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
            payment_schedule=schedule
            or [
                PaymentScheduleEntry("Advance", 50),
                PaymentScheduleEntry("Rough-in", 30),
                PaymentScheduleEntry("Handover", 20),
            ],
            cost_codes=cost_codes,
            project_name="Tower A",
        )

    return _make
