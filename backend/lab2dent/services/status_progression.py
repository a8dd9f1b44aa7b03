"""Order status sequence, step classification and transition policy."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..domain_errors import TransitionError
from ..models import Order, OrderStatus


STATUS_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PREPARATION,
    OrderStatus.IN_PRODUCTION,
    OrderStatus.POST_PRODUCTION,
    OrderStatus.READY_FOR_SHIPPING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

ACTIVE_STATUSES: frozenset[OrderStatus] = frozenset(STATUS_SEQUENCE[:-1])
TERMINAL_STATUS = OrderStatus.DELIVERED

STATUS_SHORT_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PREPARATION: "Prep",
    OrderStatus.IN_PRODUCTION: "Production",
    OrderStatus.POST_PRODUCTION: "Processing",
    OrderStatus.READY_FOR_SHIPPING: "Ready",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
}

# Forward-only graph used when strict transitions are enabled.
_ALLOWED_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    current: ({STATUS_SEQUENCE[index + 1]} if index + 1 < len(STATUS_SEQUENCE) else set())
    for index, current in enumerate(STATUS_SEQUENCE)
}


class StepState(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class ProgressStep:
    index: int
    status: OrderStatus
    label: str
    state: StepState


def status_index(status: OrderStatus | str) -> int:
    """Position of ``status`` in the fixed six-stage sequence."""
    return STATUS_SEQUENCE.index(OrderStatus(status))


def step_state(step_index: int, current_status: OrderStatus | str) -> StepState:
    current_index = status_index(current_status)
    if step_index < current_index:
        return StepState.COMPLETED
    if step_index == current_index:
        return StepState.CURRENT
    return StepState.UPCOMING


def progress_steps(current_status: OrderStatus | str) -> list[ProgressStep]:
    return [
        ProgressStep(
            index=index,
            status=status,
            label=STATUS_SHORT_LABELS[status],
            state=step_state(index, current_status),
        )
        for index, status in enumerate(STATUS_SEQUENCE)
    ]


def step_caption(current_status: OrderStatus | str) -> str:
    return f"Step {status_index(current_status) + 1} of {len(STATUS_SEQUENCE)}"


def is_terminal_status(status: OrderStatus | str) -> bool:
    return OrderStatus(status) == TERMINAL_STATUS


def is_active_status(status: OrderStatus | str) -> bool:
    return OrderStatus(status) in ACTIVE_STATUSES


def validate_status_transition(
    *,
    current_status: OrderStatus,
    next_status: OrderStatus,
    enforce_forward: bool,
) -> OrderStatus:
    """Return ``next_status`` if the policy allows the move.

    The permissive policy accepts any of the six statuses from any status.
    The strict policy only allows advancing to the next stage; re-applying the
    current status is always allowed.
    """
    if not enforce_forward or next_status == current_status:
        return next_status

    if next_status not in _ALLOWED_TRANSITIONS.get(current_status, set()):
        raise TransitionError(
            f"Invalid status transition: {current_status.value} -> {next_status.value}",
            details={"from": current_status.value, "to": next_status.value},
        )
    return next_status


def is_overdue(order: Order, *, today: Optional[date] = None) -> bool:
    """Due date has passed and the order has not been delivered."""
    reference = today or date.today()
    return order.due_date < reference and not is_terminal_status(order.status)


@dataclass(frozen=True)
class OrderProgress:
    order_id: str
    order_number: str
    current_status: OrderStatus
    caption: str
    is_terminal: bool
    is_overdue: bool
    steps: list[ProgressStep]


def order_progress(order: Order, *, today: Optional[date] = None) -> OrderProgress:
    return OrderProgress(
        order_id=order.id,
        order_number=order.order_number,
        current_status=order.status,
        caption=step_caption(order.status),
        is_terminal=is_terminal_status(order.status),
        is_overdue=is_overdue(order, today=today),
        steps=progress_steps(order.status),
    )
