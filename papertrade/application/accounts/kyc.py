"""
Use cases: Know-your-customer submissions and review.

A user submits KYC details once; an administrator moves the record
between pending, approved and rejected.
"""

import logging
from typing import Optional

from papertrade.application.accounts.dtos import SubmitKycCommand
from papertrade.application.audit_trail import ANONYMOUS, RequestContext, record_audit
from papertrade.domain.accounts.entities import AuditAction, KycRecord, KycStatus
from papertrade.domain.accounts.errors import KycAlreadySubmittedError
from papertrade.domain.errors import ResourceNotFoundError
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class SubmitKycUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self, command: SubmitKycCommand, context: RequestContext = ANONYMOUS
    ) -> KycRecord:
        """Store a pending KYC record.

        Raises:
            KycAlreadySubmittedError: If the user already submitted.
            DuplicatePanNumberError: If the PAN belongs to another user.
        """
        with self._uow_factory() as uow:
            if uow.kyc.get_for_user(command.user_id) is not None:
                raise KycAlreadySubmittedError(command.user_id)
            record = uow.kyc.add(
                user_id=command.user_id,
                name=command.name.strip(),
                email=command.email.strip().lower(),
                pan_number=command.pan_number,
                address=command.address.strip(),
                phone=command.phone,
            )
            record_audit(
                uow,
                context,
                action=AuditAction.CREATE,
                resource="kyc",
                user_id=command.user_id,
                resource_id=record.id,
            )
        logger.info("KYC submitted: id=%d, user_id=%d", record.id, record.user_id)
        return record


class GetKycStatusUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> Optional[KycRecord]:
        with self._uow_factory() as uow:
            return uow.kyc.get_for_user(user_id)


class ListKycRecordsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> list[KycRecord]:
        with self._uow_factory() as uow:
            return uow.kyc.list_all()


class UpdateKycStatusUseCase:
    """Admin: approve, reject or reset a submission."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(
        self,
        kyc_id: int,
        status: KycStatus,
        admin_id: int,
        context: RequestContext = ANONYMOUS,
    ) -> KycRecord:
        with self._uow_factory() as uow:
            record = uow.kyc.update_status(kyc_id, status)
            if record is None:
                raise ResourceNotFoundError("KYC record", kyc_id)
            record_audit(
                uow,
                context,
                action=AuditAction.UPDATE,
                resource="kyc",
                user_id=admin_id,
                resource_id=kyc_id,
                details={"status": status.value},
            )
        logger.info("KYC status updated: id=%d, status=%s", kyc_id, status.value)
        return record
