"""Lab dashboard: every order, worked in priority order."""
from __future__ import annotations

from datetime import date
from typing import Optional

from ..models import Carrier, Order, OrderPriority, OrderStatus
from ..services.order_queries import filter_orders, sort_by_priority_then_due, status_counts
from ..services.order_store import OrderStore


class LabView:
    def __init__(self, order_store: OrderStore, *, actor: Optional[str] = None) -> None:
        self._store = order_store
        self.actor = actor

    def orders(self, *, status: Optional[str] = None, priority: Optional[str] = None) -> list[Order]:
        return sort_by_priority_then_due(
            filter_orders(self._store.list_orders(), status=status, priority=priority)
        )

    def status_summary(self) -> dict[str, int]:
        return status_counts(self._store.list_orders())

    def get_order(self, order_id: str) -> Order:
        return self._store.get(order_id)

    def update_status(self, order_id: str, status: OrderStatus | str, notes: Optional[str] = None) -> Order:
        return self._store.update_status(order_id, status, notes, updated_by=self.actor)

    def update_tracking(self, order_id: str, tracking_number: str, carrier: Optional[Carrier] = None) -> Order:
        return self._store.update_tracking(order_id, tracking_number, carrier)

    def update_priority(self, order_id: str, priority: OrderPriority | str) -> Order:
        return self._store.update_priority(order_id, priority)

    def update_estimated_completion(self, order_id: str, completion: date) -> Order:
        return self._store.update_estimated_completion(order_id, completion)

    def upload_production_photo(
        self,
        order_id: str,
        *,
        url: str,
        stage: Optional[OrderStatus | str] = None,
        caption: Optional[str] = None,
    ) -> Order:
        """Attach a photo; without an explicit stage it is filed under the current status."""
        photo_stage = stage or self._store.get(order_id).status
        return self._store.attach_photo(order_id, url=url, stage=photo_stage, caption=caption)
