"""
Use case: Evaluate active alerts against current product data.

Input: none
Output: AlertCheckReport (number checked, alerts triggered)
Side effects: Each triggered alert is deactivated, stamped with
    `triggered_at`, and an alert notification is written for its owner.
    All changes of one run commit together.
Failure cases: None; alerts on deleted products cannot exist (cascade).
"""

import logging
from dataclasses import replace

from papertrade.application.trading.dtos import AlertCheckReport
from papertrade.domain.accounts.entities import NotificationDraft, NotificationType
from papertrade.domain.trading.entities import Alert, AlertType, Product
from papertrade.domain.unit_of_work import UnitOfWorkFactory
from papertrade.shared.clock import utcnow

logger = logging.getLogger(__name__)

_CONDITION_LABELS = {
    AlertType.PRICE_ABOVE: "price rose above",
    AlertType.PRICE_BELOW: "price fell below",
    AlertType.VOLUME_ABOVE: "volume rose above",
}


def _describe(alert: Alert, product: Product) -> str:
    return f"{product.name} {_CONDITION_LABELS[alert.alert_type]} {alert.target_value}"


class CheckAlertsUseCase:
    """Fires every active alert whose condition currently holds."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> AlertCheckReport:
        triggered: list[Alert] = []
        now = utcnow()

        with self._uow_factory() as uow:
            active = uow.alerts.list_active()
            products: dict[int, Product] = {}

            for alert in active:
                product = products.get(alert.product_id)
                if product is None:
                    product = uow.products.get_by_id(alert.product_id)
                    if product is None:
                        continue
                    products[alert.product_id] = product

                if not alert.is_triggered_by(product):
                    continue

                uow.alerts.mark_triggered(alert.id, now)
                uow.notifications.add(
                    NotificationDraft(
                        user_id=alert.user_id,
                        type=NotificationType.ALERT,
                        title="Price alert triggered",
                        message=_describe(alert, product),
                        data={
                            "alert_id": alert.id,
                            "product_id": product.id,
                            "alert_type": alert.alert_type.value,
                            "target_value": str(alert.target_value),
                            "current_price": str(product.price),
                        },
                    )
                )
                triggered.append(replace(alert, is_active=False, triggered_at=now))

        logger.info("Alert check: %d active, %d triggered", len(active), len(triggered))
        return AlertCheckReport(checked=len(active), triggered=triggered)
