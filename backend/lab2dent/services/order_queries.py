"""Filtering, search and ordering shared by the dashboards."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from ..models import PRIORITY_RANK, Order, OrderPriority, OrderStatus
from .order_store import coerce_enum
from .status_progression import STATUS_SEQUENCE

ALL = "All"


def _is_unset(value: Optional[str]) -> bool:
    return value is None or value == "" or value == ALL


def sort_by_priority_then_due(orders: Iterable[Order]) -> list[Order]:
    """Urgent first; within equal priority the earliest due date first."""
    return sorted(orders, key=lambda order: (-PRIORITY_RANK[order.priority], order.due_date))


def sort_by_recent_update(orders: Iterable[Order]) -> list[Order]:
    return sorted(orders, key=lambda order: order.updated_at, reverse=True)


def matches_search(order: Order, term: Optional[str]) -> bool:
    """Case-insensitive substring match on number, clinic, patient and lab."""
    if not term:
        return True
    needle = term.lower()
    haystack = (order.order_number, order.clinic_name, order.patient_name, order.assigned_lab or "")
    return any(needle in value.lower() for value in haystack if value)


def filter_orders(
    orders: Iterable[Order],
    *,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    lab: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Order]:
    wanted_status = None if _is_unset(status) else coerce_enum(OrderStatus, status, field_name="status")
    wanted_priority = None if _is_unset(priority) else coerce_enum(OrderPriority, priority, field_name="priority")
    return [
        order
        for order in orders
        if (wanted_status is None or order.status == wanted_status)
        and (wanted_priority is None or order.priority == wanted_priority)
        and (_is_unset(lab) or order.assigned_lab == lab)
        and matches_search(order, search)
    ]


def status_counts(orders: Iterable[Order]) -> dict[str, int]:
    """Count per status, every stage present even when zero."""
    counts = {status.value: 0 for status in STATUS_SEQUENCE}
    for order in orders:
        counts[order.status.value] += 1
    return counts


def distinct_labs(orders: Iterable[Order]) -> list[str]:
    seen: dict[str, None] = {}
    for order in orders:
        if order.assigned_lab:
            seen.setdefault(order.assigned_lab, None)
    return list(seen)
