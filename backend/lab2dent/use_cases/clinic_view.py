"""Clinic dashboard: a clinic sees and edits only the orders it placed."""
from __future__ import annotations

from datetime import date
from typing import Optional

from ..domain_errors import NotFoundError
from ..models import Carrier, Order, OrderPriority, OrderStatus, ProstheticType
from ..services.order_queries import sort_by_recent_update
from ..services.order_store import OrderDraft, OrderStore
from ..services.status_progression import OrderProgress, order_progress


class ClinicView:
    def __init__(self, order_store: OrderStore, *, clinic_name: str) -> None:
        self._store = order_store
        self.clinic_name = clinic_name

    def orders(self) -> list[Order]:
        """Own orders, most recently updated first."""
        return sort_by_recent_update(
            order for order in self._store.list_orders() if order.clinic_name == self.clinic_name
        )

    def get_order(self, order_id: str) -> Order:
        order = self._store.get(order_id)
        # Orders of other clinics are reported as missing, not forbidden.
        if order.clinic_name != self.clinic_name:
            raise NotFoundError("Order not found", code="ORDER_NOT_FOUND", details={"order_id": order_id})
        return order

    def create_order(
        self,
        *,
        patient_name: str,
        prosthetic_type: ProstheticType | str,
        due_date: Optional[date],
        special_instructions: str = "",
    ) -> Order:
        return self._store.create_order(
            OrderDraft(
                patient_name=patient_name,
                prosthetic_type=prosthetic_type,
                clinic_name=self.clinic_name,
                due_date=due_date,
                special_instructions=special_instructions,
                status=OrderStatus.PREPARATION,
                priority=OrderPriority.NORMAL,
            )
        )

    def update_tracking(self, order_id: str, tracking_number: str, carrier: Optional[Carrier] = None) -> Order:
        self.get_order(order_id)
        return self._store.update_tracking(order_id, tracking_number, carrier)

    def progress(self, order_id: str, *, today: Optional[date] = None) -> OrderProgress:
        return order_progress(self.get_order(order_id), today=today)
