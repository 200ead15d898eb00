from __future__ import annotations

from core.models import CertificateCalculation


def calculate_net_payable(
    subcontract_total_amount: float,
    retention_percentage: float,
    amount_certified: float,
    previous_certified: float,
) -> CertificateCalculation:
    """Retention, net payable and cumulative position for one certificate.

    Plain float arithmetic; nothing is rounded.
    """
    retention_amount = amount_certified * (retention_percentage / 100)
    net_payable = amount_certified - retention_amount
    cumulative_certified = previous_certified + amount_certified
    remaining_balance = subcontract_total_amount - cumulative_certified
    percentage_complete = (
        (cumulative_certified / subcontract_total_amount) * 100 if subcontract_total_amount else 0.0
    )
    return CertificateCalculation(
        amount_certified=amount_certified,
        retention_amount=retention_amount,
        net_payable=net_payable,
        cumulative_certified=cumulative_certified,
        remaining_balance=remaining_balance,
        percentage_complete=percentage_complete,
    )


__all__ = ["calculate_net_payable"]
