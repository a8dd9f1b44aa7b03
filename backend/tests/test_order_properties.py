from __future__ import annotations

import itertools
from datetime import date, datetime, timezone

import pytest

from lab2dent.models import OrderPriority, OrderStatus, ProstheticType
from lab2dent.seed_data import sample_orders
from lab2dent.services.analytics import generate_analytics
from lab2dent.services.order_queries import sort_by_priority_then_due
from lab2dent.services.order_store import OrderDraft, OrderStore
from lab2dent.services.status_progression import STATUS_SEQUENCE


def _store() -> OrderStore:
    counter = itertools.count(1)
    return OrderStore(
        clock=lambda: datetime(2026, 5, 20, 12, 0, tzinfo=timezone.utc),
        id_factory=lambda: f"order-{next(counter)}",
    )


def _draft(priority: OrderPriority = OrderPriority.NORMAL, due: date = date(2026, 6, 1)) -> OrderDraft:
    return OrderDraft(
        patient_name="Patient",
        prosthetic_type=ProstheticType.VENEER,
        clinic_name="Smile Center",
        due_date=due,
        priority=priority,
    )


def test_order_numbers_are_unique_and_increasing_within_year() -> None:
    store = _store()

    numbers = [store.create_order(_draft()).order_number for _ in range(12)]

    assert len(set(numbers)) == len(numbers)
    assert numbers == sorted(numbers)
    assert numbers[-1] == "ORD-2026-012"


@pytest.mark.parametrize("calls", [0, 1, 4, 9])
def test_history_length_is_calls_plus_one_and_ends_in_current_status(calls: int) -> None:
    store = _store()
    order = store.create_order(_draft())

    for step in range(calls):
        order = store.update_status(order.id, STATUS_SEQUENCE[step % len(STATUS_SEQUENCE)])

    assert len(order.status_history) == calls + 1
    assert order.status_history[-1].status == order.status


def test_analytics_totals_match_collection() -> None:
    orders = sample_orders()

    analytics = generate_analytics(orders, now=datetime(2025, 7, 1, tzinfo=timezone.utc))

    assert analytics.total_orders == len(orders)
    assert analytics.active_orders + analytics.completed_orders == analytics.total_orders


def test_equal_priority_sorts_by_earlier_due_date() -> None:
    store = _store()
    late = store.create_order(_draft(due=date(2026, 8, 1)))
    early = store.create_order(_draft(due=date(2026, 6, 1)))

    ordered = sort_by_priority_then_due([late, early])

    assert [order.id for order in ordered] == [early.id, late.id]


def test_created_order_can_ship_and_be_found_by_status() -> None:
    store = _store()
    order = store.create_order(_draft())

    store.update_status(order.id, "Shipped", "left warehouse")
    shipped = store.query_by_status("Shipped")

    assert [found.id for found in shipped] == [order.id]
    history = shipped[0].status_history
    assert len(history) == 2
    assert history[-1].status == OrderStatus.SHIPPED
    assert history[-1].notes == "left warehouse"


def test_urgent_order_sorts_first() -> None:
    store = _store()
    orders = [
        store.create_order(_draft(OrderPriority.LOW, date(2026, 5, 1))),
        store.create_order(_draft(OrderPriority.URGENT, date(2026, 12, 1))),
        store.create_order(_draft(OrderPriority.NORMAL, date(2026, 4, 1))),
    ]

    ordered = sort_by_priority_then_due(orders)

    assert ordered[0].priority == OrderPriority.URGENT
    assert [order.priority for order in ordered] == [OrderPriority.URGENT, OrderPriority.NORMAL, OrderPriority.LOW]


def test_empty_collection_yields_zero_report() -> None:
    analytics = generate_analytics([], now=datetime(2026, 5, 20, tzinfo=timezone.utc))

    assert analytics.total_orders == 0
    assert analytics.average_completion_time == 0
    assert len(analytics.monthly_order_volume) == 12
    assert all(row["count"] == 0 for row in analytics.monthly_order_volume)
    assert analytics.total_revenue == 0
