from __future__ import annotations

from datetime import datetime, timezone

from lab2dent.seed_data import sample_orders
from lab2dent.services.analytics import generate_analytics, trailing_months

NOW = datetime(2025, 7, 15, tzinfo=timezone.utc)


def test_trailing_months_wrap_year_boundary_oldest_first() -> None:
    months = trailing_months(datetime(2026, 2, 3, tzinfo=timezone.utc), 4)

    assert months == [(2025, 11), (2025, 12), (2026, 1), (2026, 2)]


def test_sample_collection_report() -> None:
    analytics = generate_analytics(sample_orders(), now=NOW)

    assert analytics.total_orders == 6
    assert analytics.completed_orders == 1
    assert analytics.active_orders == 5
    assert analytics.orders_by_status["Shipped"] == 1
    assert analytics.orders_by_priority == {"Normal": 3, "High": 1, "Urgent": 1, "Low": 1}
    assert analytics.orders_by_clinic["Downtown Dental"] == 2
    # No sample order is assigned to a lab.
    assert analytics.orders_by_lab == {}


def test_average_completion_time_uses_delivered_orders_only() -> None:
    analytics = generate_analytics(sample_orders(), now=NOW)

    # ORD-2024-006: created 2025-06-10, last updated 2025-06-27.
    assert analytics.average_completion_time == 17.0


def test_revenue_is_count_times_rate_inside_window() -> None:
    analytics = generate_analytics(sample_orders(), now=NOW, revenue_per_order=100)

    june = next(bucket for bucket in analytics.months if bucket.month == "Jun 2025")
    assert june.count == 6
    assert june.revenue == 600
    assert analytics.total_revenue == sum(row["revenue"] for row in analytics.revenue_by_month)
    assert analytics.monthly_order_volume[-1] == {"month": "Jul 2025", "count": 0}


def test_orders_outside_window_count_in_totals_but_not_revenue() -> None:
    analytics = generate_analytics(sample_orders(), now=datetime(2027, 1, 1, tzinfo=timezone.utc))

    assert analytics.total_orders == 6
    assert analytics.total_revenue == 0
    assert len(analytics.months) == 12
