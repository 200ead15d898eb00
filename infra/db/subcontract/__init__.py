from infra.db.subcontract.mapper import (
    document_from_orm,
    document_to_orm,
    schedule_item_from_orm,
    schedule_item_to_orm,
    subcontract_from_orm,
    subcontract_to_orm,
)
from infra.db.subcontract.repository import SqlAlchemySubcontractRepository

__all__ = [
    "schedule_item_to_orm",
    "schedule_item_from_orm",
    "document_to_orm",
    "document_from_orm",
    "subcontract_to_orm",
    "subcontract_from_orm",
    "SqlAlchemySubcontractRepository",
]
