from .calculation import calculate_net_payable
from .models import CertificateFilters, CertificateStats
from .service import ProgressCertificateService

__all__ = [
    "ProgressCertificateService",
    "CertificateFilters",
    "CertificateStats",
    "calculate_net_payable",
]
