"""Aggregate reporting over the order collection."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..models import Order, OrderStatus
from .status_progression import is_active_status

SECONDS_PER_DAY = 86400
DEFAULT_REVENUE_PER_ORDER = 450
DEFAULT_MONTHS = 12


@dataclass(frozen=True)
class MonthBucket:
    month: str
    year: int
    month_number: int
    count: int = 0
    revenue: int = 0


@dataclass(frozen=True)
class Analytics:
    total_orders: int = 0
    active_orders: int = 0
    completed_orders: int = 0
    total_revenue: int = 0
    average_completion_time: float = 0.0
    orders_by_status: dict[str, int] = field(default_factory=dict)
    orders_by_priority: dict[str, int] = field(default_factory=dict)
    orders_by_lab: dict[str, int] = field(default_factory=dict)
    orders_by_clinic: dict[str, int] = field(default_factory=dict)
    months: tuple[MonthBucket, ...] = ()

    @property
    def monthly_order_volume(self) -> list[dict[str, object]]:
        return [{"month": bucket.month, "count": bucket.count} for bucket in self.months]

    @property
    def revenue_by_month(self) -> list[dict[str, object]]:
        return [{"month": bucket.month, "revenue": bucket.revenue} for bucket in self.months]


def trailing_months(now: datetime, count: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the last ``count`` calendar months, oldest first."""
    months: list[tuple[int, int]] = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    months.reverse()
    return months


def _month_label(year: int, month: int) -> str:
    return datetime(year, month, 1).strftime("%b %Y")


def _completion_days(order: Order) -> float:
    return (order.updated_at - order.created_at).total_seconds() / SECONDS_PER_DAY


def generate_analytics(
    orders: Iterable[Order],
    *,
    now: Optional[datetime] = None,
    revenue_per_order: int = DEFAULT_REVENUE_PER_ORDER,
    months: int = DEFAULT_MONTHS,
) -> Analytics:
    """Recompute the full report from scratch.

    Revenue is simulated as ``count * revenue_per_order`` per month, and only
    orders created inside the trailing window contribute to it.
    """
    collected = list(orders)
    reference = now or datetime.now(timezone.utc)

    completed = [order for order in collected if order.status == OrderStatus.DELIVERED]
    active_count = sum(1 for order in collected if is_active_status(order.status))
    average_days = (
        sum(_completion_days(order) for order in completed) / len(completed)
        if completed
        else 0.0
    )

    per_month = Counter((order.created_at.year, order.created_at.month) for order in collected)
    buckets = tuple(
        MonthBucket(
            month=_month_label(year, month),
            year=year,
            month_number=month,
            count=per_month.get((year, month), 0),
            revenue=per_month.get((year, month), 0) * revenue_per_order,
        )
        for year, month in trailing_months(reference, months)
    )

    return Analytics(
        total_orders=len(collected),
        active_orders=active_count,
        completed_orders=len(completed),
        total_revenue=sum(bucket.revenue for bucket in buckets),
        average_completion_time=average_days,
        orders_by_status=dict(Counter(order.status.value for order in collected)),
        orders_by_priority=dict(Counter(order.priority.value for order in collected)),
        orders_by_lab=dict(Counter(order.assigned_lab for order in collected if order.assigned_lab)),
        orders_by_clinic=dict(Counter(order.clinic_name for order in collected)),
        months=buckets,
    )
