from infra.db.certificate.mapper import certificate_from_orm, certificate_to_orm
from infra.db.certificate.repository import SqlAlchemyProgressCertificateRepository

__all__ = [
    "certificate_to_orm",
    "certificate_from_orm",
    "SqlAlchemyProgressCertificateRepository",
]
