"""
Use cases: Manage a user's price and volume alerts.

Users only ever see and change their own alerts; another user's
alert id is reported as not found.
"""

import logging

from papertrade.application.trading.dtos import CreateAlertCommand, UpdateAlertCommand
from papertrade.domain.errors import ResourceNotFoundError, ValidationError
from papertrade.domain.trading.entities import Alert
from papertrade.domain.trading.errors import ProductNotFoundError
from papertrade.domain.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


def _alert_not_found(alert_id: int) -> ResourceNotFoundError:
    return ResourceNotFoundError("Alert", alert_id)


class CreateAlertUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: CreateAlertCommand) -> Alert:
        """Create an active alert.

        Raises:
            ValidationError: If the target value is not positive.
            ProductNotFoundError: If the product does not exist.
        """
        if command.target_value <= 0:
            raise ValidationError("Target value must be greater than 0")
        with self._uow_factory() as uow:
            if uow.products.get_by_id(command.product_id) is None:
                raise ProductNotFoundError(command.product_id)
            alert = uow.alerts.add(
                user_id=command.user_id,
                product_id=command.product_id,
                alert_type=command.alert_type,
                target_value=command.target_value,
            )
        logger.info("Alert created: id=%d, user_id=%d", alert.id, alert.user_id)
        return alert


class ListUserAlertsUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> list[Alert]:
        with self._uow_factory() as uow:
            return uow.alerts.list_for_user(user_id)


class UpdateAlertUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: UpdateAlertCommand) -> Alert:
        if command.target_value is not None and command.target_value <= 0:
            raise ValidationError("Target value must be greater than 0")
        with self._uow_factory() as uow:
            alert = uow.alerts.update(
                command.alert_id,
                command.user_id,
                alert_type=command.alert_type,
                target_value=command.target_value,
                is_active=command.is_active,
            )
            if alert is None:
                raise _alert_not_found(command.alert_id)
        return alert


class DeleteAlertUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, alert_id: int, user_id: int) -> Alert:
        with self._uow_factory() as uow:
            alert = uow.alerts.delete(alert_id, user_id)
            if alert is None:
                raise _alert_not_found(alert_id)
        logger.info("Alert deleted: id=%d, user_id=%d", alert_id, user_id)
        return alert
