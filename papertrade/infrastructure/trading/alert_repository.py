"""
Adapter: Alert repository.

Implements AlertRepository port on SQLAlchemy Core.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Connection

from papertrade.domain.trading.entities import Alert, AlertType
from papertrade.domain.trading.ports import AlertRepository
from papertrade.infrastructure.database.tables import alerts, products


def _row_to_alert(row: Any) -> Alert:
    data = row._mapping
    return Alert(
        id=data["id"],
        user_id=data["user_id"],
        product_id=data["product_id"],
        alert_type=AlertType(data["alert_type"]),
        target_value=data["target_value"],
        is_active=bool(data["is_active"]),
        triggered_at=data["triggered_at"],
        created_at=data["created_at"],
        product_name=data.get("product_name"),
    )


class SqlAlertRepository(AlertRepository):
    """Reads and writes the alerts table."""

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def _select_with_product(self):
        return select(alerts, products.c.name.label("product_name")).select_from(
            alerts.join(products, products.c.id == alerts.c.product_id)
        )

    def _get(self, alert_id: int) -> Optional[Alert]:
        row = self._conn.execute(
            self._select_with_product().where(alerts.c.id == alert_id)
        ).first()
        return _row_to_alert(row) if row else None

    def add(
        self,
        *,
        user_id: int,
        product_id: int,
        alert_type: AlertType,
        target_value: Decimal,
    ) -> Alert:
        result = self._conn.execute(
            alerts.insert().values(
                user_id=user_id,
                product_id=product_id,
                alert_type=alert_type.value,
                target_value=target_value,
                is_active=True,
            )
        )
        return self._get(result.inserted_primary_key[0])

    def list_for_user(self, user_id: int) -> list[Alert]:
        query = (
            self._select_with_product()
            .where(alerts.c.user_id == user_id)
            .order_by(alerts.c.created_at.desc(), alerts.c.id.desc())
        )
        return [_row_to_alert(row) for row in self._conn.execute(query)]

    def update(
        self,
        alert_id: int,
        user_id: int,
        *,
        alert_type: Optional[AlertType] = None,
        target_value: Optional[Decimal] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[Alert]:
        existing = self._get(alert_id)
        if existing is None or existing.user_id != user_id:
            return None

        values: dict[str, Any] = {}
        if alert_type is not None:
            values["alert_type"] = alert_type.value
        if target_value is not None:
            values["target_value"] = target_value
        if is_active is not None:
            values["is_active"] = is_active
            if is_active:
                # Re-arming clears the previous trigger
                values["triggered_at"] = None
        if values:
            self._conn.execute(update(alerts).where(alerts.c.id == alert_id).values(**values))
        return self._get(alert_id)

    def delete(self, alert_id: int, user_id: int) -> Optional[Alert]:
        existing = self._get(alert_id)
        if existing is None or existing.user_id != user_id:
            return None
        self._conn.execute(delete(alerts).where(alerts.c.id == alert_id))
        return existing

    def list_active(self) -> list[Alert]:
        query = (
            self._select_with_product()
            .where(alerts.c.is_active.is_(True))
            .order_by(alerts.c.created_at, alerts.c.id)
        )
        return [_row_to_alert(row) for row in self._conn.execute(query)]

    def mark_triggered(self, alert_id: int, at: datetime) -> None:
        self._conn.execute(
            update(alerts)
            .where(alerts.c.id == alert_id)
            .values(is_active=False, triggered_at=at)
        )
