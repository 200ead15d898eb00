from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import ProgressCertificateRepository
from core.models import (
    CertificatePayment,
    CertificateStatus,
    FinancialImpact,
    PaymentItemStatus,
    ProgressCertificate,
    Subcontract,
    generate_reference,
)
from core.services.audit.helpers import SYSTEM_USER_ID, status_change
from core.services.audit.service import AuditLogService
from core.services.certificate.calculation import calculate_net_payable
from core.services.subcontract.service import SubcontractService


logger = logging.getLogger(__name__)


class CertificateLifecycleMixin:
    _session: Session
    _certificate_repo: ProgressCertificateRepository
    _subcontract_service: SubcontractService
    _audit_service: AuditLogService | None

    def _require_certificate(self, certificate_id: str) -> ProgressCertificate:
        certificate = self._certificate_repo.get(certificate_id)
        if certificate is None:
            raise NotFoundError("Certificate not found", code="CERTIFICATE_NOT_FOUND")
        return certificate

    def _require_subcontract(self, subcontract_id: str) -> Subcontract:
        subcontract = self._subcontract_service.get_subcontract(subcontract_id)
        if subcontract is None:
            raise NotFoundError("Subcontract not found", code="SUBCONTRACT_NOT_FOUND")
        return subcontract

    def _require_status(self, certificate: ProgressCertificate, status: CertificateStatus, message: str) -> None:
        if certificate.status != status:
            raise BusinessRuleError(message, code="INVALID_STATUS")

    def _log_certificate(self, action: str, certificate: ProgressCertificate, user_id: str, user_name: str, **kwargs) -> None:
        if self._audit_service is None:
            return
        self._audit_service.log_certificate_action(
            action,
            certificate.id,
            certificate.certificate_number,
            user_id,
            user_name,
            project_id=certificate.project_id,
            **kwargs,
        )

    def calculate_net_payable(
        self,
        subcontract_total_amount: float,
        retention_percentage: float,
        amount_certified: float,
        previous_certified: float,
    ):
        return calculate_net_payable(
            subcontract_total_amount,
            retention_percentage,
            amount_certified,
            previous_certified,
        )

    def create_certificate(
        self,
        certificate_number: str,
        subcontract_id: str,
        period_start: date,
        period_end: date,
        amount_certified: float,
        percentage_complete: float | None = None,
        project_id: str | None = None,
        submitted_by: str | None = None,
        photos: Optional[list[str]] = None,
        documents: Optional[list[str]] = None,
        notes: str = "",
    ) -> ProgressCertificate:
        subcontract = self._require_subcontract(subcontract_id)
        if amount_certified <= 0:
            raise ValidationError("Certified amount must be greater than 0", code="INVALID_AMOUNT")
        if period_start > period_end:
            raise ValidationError("Period start must be before period end", code="INVALID_DATES")
        if amount_certified > subcontract.remaining_balance:
            raise BusinessRuleError(
                f"Certified amount ({amount_certified}) exceeds remaining balance "
                f"({subcontract.remaining_balance})",
                code="EXCEEDS_REMAINING_BALANCE",
            )

        calculation = calculate_net_payable(
            subcontract.total_amount,
            subcontract.retention_percentage,
            amount_certified,
            subcontract.total_certified,
        )
        certificate = ProgressCertificate.create(
            certificate_number=certificate_number,
            subcontract_id=subcontract.id,
            project_id=project_id or subcontract.project_id,
            period_start=period_start,
            period_end=period_end,
            percentage_complete=(
                percentage_complete if percentage_complete is not None else calculation.percentage_complete
            ),
            calculation=calculation,
            previous_certified=subcontract.total_certified,
            submitted_by=submitted_by,
            photos=photos,
            documents=documents,
            notes=notes,
        )

        actor = submitted_by or SYSTEM_USER_ID
        try:
            self._certificate_repo.add(certificate)
            self._log_certificate("certificate_created", certificate, actor, actor)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.certificates_changed.emit(certificate.project_id)
        return certificate

    def update_certificate(
        self,
        certificate_id: str,
        *,
        amount_certified: float | None = None,
        percentage_complete: float | None = None,
        period_start: date | None = None,
        period_end: date | None = None,
        photos: Optional[list[str]] = None,
        documents: Optional[list[str]] = None,
        notes: str | None = None,
    ) -> ProgressCertificate:
        certificate = self._require_certificate(certificate_id)
        self._require_status(certificate, CertificateStatus.DRAFT, "Only draft certificates can be updated")

        if amount_certified is not None:
            subcontract = self._require_subcontract(certificate.subcontract_id)
            if amount_certified <= 0:
                raise ValidationError("Certified amount must be greater than 0", code="INVALID_AMOUNT")
            if amount_certified > subcontract.remaining_balance:
                raise BusinessRuleError(
                    f"Certified amount ({amount_certified}) exceeds remaining balance "
                    f"({subcontract.remaining_balance})",
                    code="EXCEEDS_REMAINING_BALANCE",
                )
            calculation = calculate_net_payable(
                subcontract.total_amount,
                subcontract.retention_percentage,
                amount_certified,
                subcontract.total_certified,
            )
            certificate.amount_certified = calculation.amount_certified
            certificate.retention_amount = calculation.retention_amount
            certificate.net_payable = calculation.net_payable
            certificate.previous_certified = subcontract.total_certified
            certificate.cumulative_certified = calculation.cumulative_certified

        if percentage_complete is not None:
            certificate.percentage_complete = percentage_complete
        if period_start is not None:
            certificate.period_start = period_start
        if period_end is not None:
            certificate.period_end = period_end
        if certificate.period_start > certificate.period_end:
            raise ValidationError("Period start must be before period end", code="INVALID_DATES")
        if photos is not None:
            certificate.photos = list(photos)
        if documents is not None:
            certificate.documents = list(documents)
        if notes is not None:
            certificate.notes = notes
        certificate.updated_at = datetime.now(timezone.utc)

        try:
            self._certificate_repo.update(certificate)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.certificates_changed.emit(certificate.project_id)
        return certificate

    def submit_for_approval(self, certificate_id: str, user_id: str | None = None) -> ProgressCertificate:
        certificate = self._require_certificate(certificate_id)
        self._require_status(certificate, CertificateStatus.DRAFT, "Only draft certificates can be submitted")

        previous = certificate.status
        now = datetime.now(timezone.utc)
        certificate.status = CertificateStatus.PENDING_APPROVAL
        certificate.submitted_at = now
        certificate.updated_at = now
        if user_id:
            certificate.submitted_by = user_id

        actor = user_id or certificate.submitted_by or SYSTEM_USER_ID
        try:
            self._certificate_repo.update(certificate)
            self._log_certificate(
                "certificate_submitted",
                certificate,
                actor,
                actor,
                changes=[status_change(previous, certificate.status)],
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.certificates_changed.emit(certificate.project_id)
        return certificate

    def approve_certificate(
        self,
        certificate_id: str,
        approver_id: str,
        approver_name: str | None = None,
        payment_item_id: str | None = None,
    ) -> ProgressCertificate:
        """Approve and certify one payment-schedule item in the same commit.

        The item must be pending and its amount must equal the certified
        amount, so subcontract totals stay in step with the certificates. It
        is ``payment_item_id`` when given, otherwise the lowest-sequence
        pending item with that amount.
        """
        certificate = self._require_certificate(certificate_id)
        self._require_status(
            certificate,
            CertificateStatus.PENDING_APPROVAL,
            "Only pending certificates can be approved",
        )
        item_id = self._subcontract_service.match_pending_item_id(
            certificate.subcontract_id,
            certificate.amount_certified,
            payment_item_id,
        )

        previous = certificate.status
        now = datetime.now(timezone.utc)
        certificate.status = CertificateStatus.APPROVED
        certificate.approved_by = approver_id
        certificate.approved_at = now
        certificate.updated_at = now
        certificate.schedule_item_id = item_id

        try:
            self._certificate_repo.update(certificate)
            self._subcontract_service.update_payment_schedule_item(
                certificate.subcontract_id,
                item_id,
                PaymentItemStatus.CERTIFIED,
                now,
                commit=False,
            )
            self._log_certificate(
                "certificate_approved",
                certificate,
                approver_id,
                approver_name or approver_id,
                changes=[status_change(previous, certificate.status)],
                financial_impact=FinancialImpact(
                    amount=certificate.amount_certified,
                    description=f"Certificate approved: {certificate.certificate_number}",
                ),
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Certificate %s approved by %s", certificate.certificate_number, approver_id)
        domain_events.certificates_changed.emit(certificate.project_id)
        domain_events.subcontracts_changed.emit(certificate.project_id)
        return certificate

    def reject_certificate(
        self,
        certificate_id: str,
        rejected_by: str,
        rejection_reason: str,
    ) -> ProgressCertificate:
        certificate = self._require_certificate(certificate_id)
        self._require_status(
            certificate,
            CertificateStatus.PENDING_APPROVAL,
            "Only pending certificates can be rejected",
        )
        if not (rejection_reason or "").strip():
            raise ValidationError("Rejection reason is required", code="REQUIRED_FIELD")

        previous = certificate.status
        now = datetime.now(timezone.utc)
        certificate.status = CertificateStatus.REJECTED
        certificate.rejected_by = rejected_by
        certificate.rejected_at = now
        certificate.rejection_reason = rejection_reason
        certificate.updated_at = now

        try:
            self._certificate_repo.update(certificate)
            self._log_certificate(
                "certificate_rejected",
                certificate,
                rejected_by,
                rejected_by,
                changes=[status_change(previous, certificate.status)],
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.certificates_changed.emit(certificate.project_id)
        return certificate

    def mark_as_paid(
        self,
        certificate_id: str,
        payment_id: str,
        user_id: str | None = None,
    ) -> ProgressCertificate:
        certificate = self._require_certificate(certificate_id)
        self._require_status(
            certificate,
            CertificateStatus.APPROVED,
            "Only approved certificates can be marked as paid",
        )
        if certificate.schedule_item_id is None:
            raise BusinessRuleError(
                "Certificate has no certified payment schedule item",
                code="NO_PENDING_PAYMENT_ITEM",
            )
        subcontract = self._require_subcontract(certificate.subcontract_id)

        previous = certificate.status
        now = datetime.now(timezone.utc)
        certificate.status = CertificateStatus.PAID
        certificate.payment_id = payment_id
        certificate.paid_at = now
        certificate.updated_at = now

        actor = user_id or SYSTEM_USER_ID
        try:
            self._certificate_repo.update(certificate)
            self._subcontract_service.update_payment_schedule_item(
                certificate.subcontract_id,
                certificate.schedule_item_id,
                PaymentItemStatus.PAID,
                now,
                commit=False,
            )
            self._log_certificate(
                "certificate_paid",
                certificate,
                actor,
                actor,
                changes=[status_change(previous, certificate.status)],
                financial_impact=FinancialImpact(
                    amount=certificate.net_payable,
                    currency=subcontract.currency,
                    description=f"Certificate paid: {certificate.certificate_number}",
                ),
            )
            if self._audit_service is not None:
                self._audit_service.log_payment_action(
                    payment_id,
                    certificate.net_payable,
                    subcontract.subcontractor_name,
                    actor,
                    actor,
                    project_id=certificate.project_id,
                    currency=subcontract.currency,
                )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.certificates_changed.emit(certificate.project_id)
        domain_events.subcontracts_changed.emit(certificate.project_id)
        return certificate

    def create_payment_from_certificate(
        self,
        certificate_id: str,
        user_id: str | None = None,
    ) -> CertificatePayment:
        certificate = self._require_certificate(certificate_id)
        self._require_status(
            certificate,
            CertificateStatus.APPROVED,
            "Only approved certificates can generate payments",
        )
        payment = CertificatePayment(
            id=generate_reference("PAY"),
            certificate_id=certificate.id,
            subcontract_id=certificate.subcontract_id,
            amount=certificate.net_payable,
            retention_amount=certificate.retention_amount,
            status="pending",
            created_at=datetime.now(timezone.utc),
        )
        self.mark_as_paid(certificate_id, payment.id, user_id=user_id)
        return payment

    def delete_certificate(self, certificate_id: str) -> None:
        certificate = self._require_certificate(certificate_id)
        self._require_status(certificate, CertificateStatus.DRAFT, "Only draft certificates can be deleted")
        try:
            self._certificate_repo.delete(certificate_id)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.certificates_changed.emit(certificate.project_id)


__all__ = ["CertificateLifecycleMixin"]
