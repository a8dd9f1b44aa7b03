"""In-memory order store: the single source of truth for lab orders."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional, TypeVar

from ..domain_errors import DuplicateError, NotFoundError, ValidationError
from ..models import (
    ADMIN_ACTOR,
    Carrier,
    Order,
    OrderPriority,
    OrderStatus,
    ProductionPhoto,
    ProstheticType,
    StatusUpdate,
)
from .order_updates import (
    AssignLab,
    OrderUpdate,
    SetDetails,
    SetEstimatedCompletion,
    SetNotes,
    SetPriority,
    SetStatus,
    SetTracking,
)
from .status_progression import validate_status_transition

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

CREATION_NOTE = "Order created"


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class OrderDraft:
    """Fields a clinic supplies when placing an order."""

    patient_name: str
    prosthetic_type: ProstheticType | str
    clinic_name: str
    due_date: Optional[date]
    special_instructions: str = ""
    status: OrderStatus | str = OrderStatus.PREPARATION
    priority: OrderPriority | str = OrderPriority.NORMAL
    assigned_lab: Optional[str] = None
    estimated_completion_time: Optional[date] = None


def coerce_enum(enum_cls: type[E], value: Any, *, field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"{field_name} must be one of: {allowed}",
            code="INVALID_ENUM_VALUE",
            details={"field": field_name, "value": str(value)},
        )


def _require_text(value: Optional[str], *, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(
            f"{field_name} is required",
            code="MISSING_REQUIRED_FIELD",
            details={"field": field_name},
        )
    return str(value).strip()


class OrderStore:
    """Holds every order and exposes the mutation API used by the role views.

    Each write builds a new ``Order`` and swaps a new list in under a lock, so
    a failed mutation leaves the collection untouched and concurrent writers
    resolve as last-write-wins.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = now_utc,
        number_prefix: str = "ORD",
        number_width: int = 3,
        enforce_forward_transitions: bool = False,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._clock = clock
        self._number_prefix = number_prefix
        self._number_width = number_width
        self._enforce_forward = enforce_forward_transitions
        self._id_factory = id_factory
        self._orders: list[Order] = []
        self._lock = threading.RLock()

    # Reads

    def list_orders(self) -> list[Order]:
        return list(self._orders)

    def __len__(self) -> int:
        return len(self._orders)

    def get(self, order_id: str) -> Order:
        for order in self._orders:
            if order.id == order_id:
                return order
        raise NotFoundError(
            "Order not found",
            code="ORDER_NOT_FOUND",
            details={"order_id": order_id},
        )

    def query_by_status(self, status: OrderStatus | str) -> list[Order]:
        wanted = coerce_enum(OrderStatus, status, field_name="status")
        return [order for order in self._orders if order.status == wanted]

    # Creation

    def generate_order_number(self, *, year: Optional[int] = None) -> str:
        """Next sequential number for the calendar year, e.g. ``ORD-2026-007``.

        Continues after the highest suffix already used under the year prefix,
        so imported numbers with gaps never get reissued.
        """
        target_year = year if year is not None else self._clock().year
        prefix = f"{self._number_prefix}-{target_year}-"
        suffixes = [
            int(order.order_number[len(prefix):])
            for order in self._orders
            if order.order_number.startswith(prefix) and order.order_number[len(prefix):].isdigit()
        ]
        return f"{prefix}{max(suffixes, default=0) + 1:0{self._number_width}d}"

    def create_order(self, draft: OrderDraft) -> Order:
        patient_name = _require_text(draft.patient_name, field_name="patient_name")
        clinic_name = _require_text(draft.clinic_name, field_name="clinic_name")
        if draft.prosthetic_type is None or draft.prosthetic_type == "":
            raise ValidationError(
                "prosthetic_type is required",
                code="MISSING_REQUIRED_FIELD",
                details={"field": "prosthetic_type"},
            )
        if draft.due_date is None:
            raise ValidationError(
                "due_date is required",
                code="MISSING_REQUIRED_FIELD",
                details={"field": "due_date"},
            )
        prosthetic_type = coerce_enum(ProstheticType, draft.prosthetic_type, field_name="prosthetic_type")
        status = coerce_enum(OrderStatus, draft.status or OrderStatus.PREPARATION, field_name="status")
        priority = coerce_enum(OrderPriority, draft.priority or OrderPriority.NORMAL, field_name="priority")

        with self._lock:
            now = self._clock()
            order_number = self.generate_order_number(year=now.year)
            if any(order.order_number == order_number for order in self._orders):
                raise DuplicateError(
                    f"Order number {order_number} already exists",
                    code="ORDER_NUMBER_TAKEN",
                    details={"order_number": order_number},
                )

            order = Order(
                id=self._id_factory(),
                order_number=order_number,
                patient_name=patient_name,
                prosthetic_type=prosthetic_type,
                clinic_name=clinic_name,
                status=status,
                priority=priority,
                created_at=now,
                updated_at=now,
                due_date=draft.due_date,
                special_instructions=draft.special_instructions or "",
                assigned_lab=draft.assigned_lab,
                estimated_completion_time=draft.estimated_completion_time,
                status_history=(StatusUpdate(status=status, timestamp=now, notes=CREATION_NOTE),),
            )
            self._orders = [*self._orders, order]

        logger.info("order.created id=%s number=%s clinic=%s", order.id, order.order_number, order.clinic_name)
        return order

    def load(self, orders: Iterable[Order]) -> None:
        """Bulk-insert existing records (sample data, imports)."""
        incoming = list(orders)
        with self._lock:
            numbers = {order.order_number for order in self._orders}
            ids = {order.id for order in self._orders}
            for order in incoming:
                if order.order_number in numbers or order.id in ids:
                    raise DuplicateError(
                        f"Order {order.order_number} already exists",
                        code="ORDER_NUMBER_TAKEN",
                        details={"order_number": order.order_number},
                    )
                if not order.status_history or order.status_history[-1].status != order.status:
                    raise ValidationError(
                        f"Order {order.order_number} history does not end in its current status",
                        code="INCONSISTENT_STATUS_HISTORY",
                    )
                numbers.add(order.order_number)
                ids.add(order.id)
            self._orders = [*self._orders, *incoming]

    # Targeted mutations

    def update_status(
        self,
        order_id: str,
        status: OrderStatus | str,
        notes: Optional[str] = None,
        *,
        updated_by: Optional[str] = None,
    ) -> Order:
        new_status = coerce_enum(OrderStatus, status, field_name="status")

        def _apply(order: Order, now: datetime) -> Order:
            validate_status_transition(
                current_status=order.status,
                next_status=new_status,
                enforce_forward=self._enforce_forward,
            )
            return self._with_status(order, new_status, now, notes=notes, updated_by=updated_by)

        order = self._mutate(order_id, _apply)
        logger.info("order.status_changed id=%s status=%s", order.id, order.status.value)
        return order

    def update_tracking(self, order_id: str, tracking_number: str, carrier: Optional[Carrier | str] = None) -> Order:
        update = SetTracking(
            tracking_number=_require_text(tracking_number, field_name="tracking_number"),
            carrier=coerce_enum(Carrier, carrier, field_name="carrier") if carrier else None,
        )
        return self._mutate(order_id, lambda order, now: self._apply_update(order, update, now))

    def update_priority(self, order_id: str, priority: OrderPriority | str) -> Order:
        update = SetPriority(priority=coerce_enum(OrderPriority, priority, field_name="priority"))
        return self._mutate(order_id, lambda order, now: self._apply_update(order, update, now))

    def update_estimated_completion(self, order_id: str, completion: date) -> Order:
        if completion is None:
            raise ValidationError(
                "estimated_completion_time is required",
                code="MISSING_REQUIRED_FIELD",
                details={"field": "estimated_completion_time"},
            )
        update = SetEstimatedCompletion(estimated_completion_time=completion)
        return self._mutate(order_id, lambda order, now: self._apply_update(order, update, now))

    def assign_to_lab(self, order_id: str, lab_name: str) -> Order:
        update = AssignLab(lab_name=_require_text(lab_name, field_name="lab_name"))

        def _apply(order: Order, now: datetime) -> Order:
            return replace(self._apply_update(order, update, now), last_modified_by=ADMIN_ACTOR)

        order = self._mutate(order_id, _apply)
        logger.info("order.assigned id=%s lab=%s", order.id, order.assigned_lab)
        return order

    def attach_photo(
        self,
        order_id: str,
        *,
        url: str,
        stage: OrderStatus | str,
        caption: Optional[str] = None,
    ) -> Order:
        photo_url = _require_text(url, field_name="url")
        photo_stage = coerce_enum(OrderStatus, stage, field_name="stage")

        def _apply(order: Order, now: datetime) -> Order:
            photo = ProductionPhoto(
                id=self._id_factory(),
                stage=photo_stage,
                url=photo_url,
                caption=caption,
                uploaded_at=now,
            )
            return replace(
                order,
                production_photos=(*order.production_photos, photo),
                updated_at=self._touch(order, now),
            )

        return self._mutate(order_id, _apply)

    # Admin mutations

    def admin_update(self, order_id: str, updates: Sequence[OrderUpdate]) -> Order:
        """Apply several update variants as one write, stamped by the admin."""
        if not updates:
            raise ValidationError("At least one update is required", code="EMPTY_UPDATE")

        def _apply(order: Order, now: datetime) -> Order:
            for update in updates:
                if isinstance(update, SetStatus):
                    status = coerce_enum(OrderStatus, update.status, field_name="status")
                    order = self._with_status(order, status, now, notes=update.notes, updated_by=ADMIN_ACTOR)
                else:
                    order = self._apply_update(order, update, now)
            return replace(order, last_modified_by=ADMIN_ACTOR)

        order = self._mutate(order_id, _apply)
        logger.info("order.admin_updated id=%s updates=%d", order.id, len(updates))
        return order

    def admin_override_status(self, order_id: str, status: OrderStatus | str, admin_notes: str) -> Order:
        new_status = coerce_enum(OrderStatus, status, field_name="status")
        notes = _require_text(admin_notes, field_name="admin_notes")

        def _apply(order: Order, now: datetime) -> Order:
            order = self._with_status(
                order,
                new_status,
                now,
                notes=f"Admin override: {notes}",
                updated_by=ADMIN_ACTOR,
            )
            return replace(order, admin_notes=notes, last_modified_by=ADMIN_ACTOR)

        order = self._mutate(order_id, _apply)
        logger.info("order.status_overridden id=%s status=%s", order.id, order.status.value)
        return order

    # Internals

    def _mutate(self, order_id: str, apply: Callable[[Order, datetime], Order]) -> Order:
        with self._lock:
            current = self.get(order_id)
            updated = apply(current, self._clock())
            self._orders = [updated if order.id == order_id else order for order in self._orders]
        return updated

    @staticmethod
    def _touch(order: Order, now: datetime) -> datetime:
        return now if now >= order.created_at else order.created_at

    def _with_status(
        self,
        order: Order,
        status: OrderStatus,
        now: datetime,
        *,
        notes: Optional[str],
        updated_by: Optional[str],
    ) -> Order:
        entry = StatusUpdate(
            status=status,
            timestamp=now,
            notes=notes or f"Status updated to {status.value}",
            updated_by=updated_by,
        )
        return replace(
            order,
            status=status,
            status_history=(*order.status_history, entry),
            updated_at=self._touch(order, now),
        )

    def _apply_update(self, order: Order, update: OrderUpdate, now: datetime) -> Order:
        changes: dict[str, Any]
        if isinstance(update, SetTracking):
            changes = {"tracking_number": update.tracking_number, "carrier": update.carrier}
        elif isinstance(update, SetPriority):
            changes = {"priority": update.priority}
        elif isinstance(update, SetEstimatedCompletion):
            changes = {"estimated_completion_time": update.estimated_completion_time}
        elif isinstance(update, AssignLab):
            changes = {"assigned_lab": _require_text(update.lab_name, field_name="lab_name")}
        elif isinstance(update, SetNotes):
            changes = {}
            if update.lab_notes is not None:
                changes["lab_notes"] = update.lab_notes
            if update.admin_notes is not None:
                changes["admin_notes"] = update.admin_notes
        elif isinstance(update, SetDetails):
            changes = {}
            if update.patient_name is not None:
                changes["patient_name"] = _require_text(update.patient_name, field_name="patient_name")
            if update.clinic_name is not None:
                changes["clinic_name"] = _require_text(update.clinic_name, field_name="clinic_name")
            if update.prosthetic_type is not None:
                changes["prosthetic_type"] = coerce_enum(
                    ProstheticType, update.prosthetic_type, field_name="prosthetic_type"
                )
            if update.special_instructions is not None:
                changes["special_instructions"] = update.special_instructions
            if update.due_date is not None:
                changes["due_date"] = update.due_date
        elif isinstance(update, SetStatus):
            return self._with_status(order, update.status, now, notes=update.notes, updated_by=None)
        else:
            raise ValidationError(f"Unsupported order update: {type(update).__name__}", code="UNSUPPORTED_UPDATE")

        return replace(order, **changes, updated_at=self._touch(order, now))
