"""Admin dashboard: all orders, overrides, analytics and user management."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..domain_errors import ValidationError
from ..models import Order, OrderStatus, User
from ..schemas import AdminOrderUpdateRequest
from ..services.analytics import Analytics, generate_analytics
from ..services.order_queries import distinct_labs, filter_orders, sort_by_priority_then_due, sort_by_recent_update
from ..services.order_store import OrderStore
from ..services.order_updates import (
    AssignLab,
    OrderUpdate,
    SetDetails,
    SetEstimatedCompletion,
    SetNotes,
    SetPriority,
    SetStatus,
    SetTracking,
)
from ..services.status_progression import is_active_status, is_overdue
from ..services.user_store import UserDraft, UserPatch, UserStore


@dataclass(frozen=True)
class AdminOverview:
    total_orders: int
    active_orders: int
    overdue_orders: int
    total_clinics: int
    total_labs: int
    total_users: int
    active_users: int
    labs: list[str]
    recent_orders: list[Order]


def updates_from_request(payload: AdminOrderUpdateRequest) -> list[OrderUpdate]:
    """Translate the admin edit form into store update variants."""
    updates: list[OrderUpdate] = []
    if any(
        value is not None
        for value in (
            payload.patient_name,
            payload.prosthetic_type,
            payload.special_instructions,
            payload.clinic_name,
            payload.due_date,
        )
    ):
        updates.append(
            SetDetails(
                patient_name=payload.patient_name,
                prosthetic_type=payload.prosthetic_type,
                special_instructions=payload.special_instructions,
                clinic_name=payload.clinic_name,
                due_date=payload.due_date,
            )
        )
    if payload.priority is not None:
        updates.append(SetPriority(priority=payload.priority))
    if payload.assigned_lab is not None:
        updates.append(AssignLab(lab_name=payload.assigned_lab))
    if payload.tracking_number is not None:
        updates.append(SetTracking(tracking_number=payload.tracking_number, carrier=payload.carrier))
    elif payload.carrier is not None:
        raise ValidationError(
            "carrier requires tracking_number",
            code="MISSING_REQUIRED_FIELD",
            details={"field": "tracking_number"},
        )
    if payload.estimated_completion_time is not None:
        updates.append(SetEstimatedCompletion(estimated_completion_time=payload.estimated_completion_time))
    if payload.lab_notes is not None or payload.admin_notes is not None:
        updates.append(SetNotes(lab_notes=payload.lab_notes, admin_notes=payload.admin_notes))
    if payload.status is not None:
        updates.append(SetStatus(status=payload.status, notes=payload.status_notes))
    return updates


class AdminView:
    def __init__(self, order_store: OrderStore, user_store: UserStore) -> None:
        self._orders = order_store
        self._users = user_store

    # Orders

    def orders(
        self,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        lab: Optional[str] = None,
    ) -> list[Order]:
        return sort_by_priority_then_due(
            filter_orders(self._orders.list_orders(), status=status, priority=priority, lab=lab, search=search)
        )

    def get_order(self, order_id: str) -> Order:
        return self._orders.get(order_id)

    def update_order(self, order_id: str, payload: AdminOrderUpdateRequest) -> Order:
        return self._orders.admin_update(order_id, updates_from_request(payload))

    def override_status(self, order_id: str, status: OrderStatus | str, admin_notes: str) -> Order:
        return self._orders.admin_override_status(order_id, status, admin_notes)

    def assign_to_lab(self, order_id: str, lab_name: str) -> Order:
        return self._orders.assign_to_lab(order_id, lab_name)

    def labs(self) -> list[str]:
        return distinct_labs(self._orders.list_orders())

    # Reporting

    def analytics(
        self,
        *,
        now: Optional[datetime] = None,
        revenue_per_order: int = 450,
        months: int = 12,
    ) -> Analytics:
        return generate_analytics(
            self._orders.list_orders(),
            now=now,
            revenue_per_order=revenue_per_order,
            months=months,
        )

    def overview(self, *, today: Optional[date] = None, recent_limit: int = 5) -> AdminOverview:
        orders = self._orders.list_orders()
        users = self._users.list_users()
        return AdminOverview(
            total_orders=len(orders),
            active_orders=sum(1 for order in orders if is_active_status(order.status)),
            overdue_orders=sum(1 for order in orders if is_overdue(order, today=today)),
            total_clinics=len({order.clinic_name for order in orders}),
            total_labs=len(distinct_labs(orders)),
            total_users=len(users),
            active_users=sum(1 for user in users if user.is_active),
            labs=distinct_labs(orders),
            recent_orders=sort_by_recent_update(orders)[:recent_limit],
        )

    # Users

    def list_users(self) -> list[User]:
        return self._users.list_users()

    def get_user(self, user_id: str) -> User:
        return self._users.get(user_id)

    def create_user(self, draft: UserDraft) -> User:
        return self._users.create_user(draft)

    def update_user(self, user_id: str, patch: UserPatch) -> User:
        return self._users.update_user(user_id, patch)

    def delete_user(self, user_id: str) -> None:
        self._users.delete_user(user_id)
