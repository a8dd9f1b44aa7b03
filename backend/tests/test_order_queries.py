from __future__ import annotations

from dataclasses import replace

import pytest

from lab2dent.domain_errors import ValidationError
from lab2dent.seed_data import sample_orders
from lab2dent.services.order_queries import (
    distinct_labs,
    filter_orders,
    matches_search,
    sort_by_priority_then_due,
    sort_by_recent_update,
    status_counts,
)


def _numbers(orders) -> list[str]:
    return [order.order_number for order in orders]


def test_priority_then_due_sort_over_samples() -> None:
    ordered = sort_by_priority_then_due(sample_orders())

    assert _numbers(ordered) == [
        "ORD-2024-004",  # Urgent
        "ORD-2024-002",  # High
        "ORD-2024-005",  # Normal, due 2025-06-28
        "ORD-2024-001",  # Normal, due 2025-09-05
        "ORD-2024-003",  # Normal, due 2025-12-02
        "ORD-2024-006",  # Low
    ]


def test_recent_update_sort_is_newest_first() -> None:
    ordered = sort_by_recent_update(sample_orders())

    assert _numbers(ordered)[0] == "ORD-2024-005"
    assert ordered[0].updated_at >= ordered[-1].updated_at


@pytest.mark.parametrize(
    "term,expected",
    [
        ("ord-2024-003", ["ORD-2024-003"]),
        ("downtown", ["ORD-2024-001", "ORD-2024-005"]),
        ("SARAH", ["ORD-2024-002"]),
        ("premium", ["ORD-2024-001"]),
        ("", ["ORD-2024-001", "ORD-2024-002", "ORD-2024-003", "ORD-2024-004", "ORD-2024-005", "ORD-2024-006"]),
    ],
)
def test_search_matches_number_clinic_patient_and_lab(term: str, expected: list[str]) -> None:
    orders = sample_orders()
    orders[0] = replace(orders[0], assigned_lab="Premium Dental Lab")

    assert _numbers(filter_orders(orders, search=term)) == expected


def test_search_does_not_match_special_instructions() -> None:
    order = sample_orders()[0]

    assert not matches_search(order, "natural shade")


def test_all_disables_filters() -> None:
    orders = sample_orders()

    assert filter_orders(orders, status="All", priority="All", lab="All") == orders


def test_filters_combine() -> None:
    orders = sample_orders()

    result = filter_orders(orders, status="Preparation", priority="High")

    assert _numbers(result) == ["ORD-2024-002"]


def test_unknown_filter_value_is_rejected() -> None:
    with pytest.raises(ValidationError, match="status must be one of") as exc_info:
        filter_orders(sample_orders(), status="Lost")

    assert exc_info.value.code == "INVALID_ENUM_VALUE"


def test_status_counts_include_empty_stages() -> None:
    counts = status_counts(sample_orders()[:2])

    assert counts == {
        "Preparation": 1,
        "In Production": 1,
        "Post-Production Processing": 0,
        "Ready for Shipping": 0,
        "Shipped": 0,
        "Delivered": 0,
    }


def test_distinct_labs_keeps_first_seen_order() -> None:
    orders = sample_orders()
    orders[0] = replace(orders[0], assigned_lab="TechLab Solutions")
    orders[2] = replace(orders[2], assigned_lab="Premium Dental Lab")
    orders[3] = replace(orders[3], assigned_lab="TechLab Solutions")

    assert distinct_labs(orders) == ["TechLab Solutions", "Premium Dental Lab"]
