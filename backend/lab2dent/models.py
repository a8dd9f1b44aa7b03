"""Domain records for orders and managed user accounts.

Records are frozen: stores replace a whole record on every mutation instead of
editing it in place, so a reference handed out by a store never changes under
the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    PREPARATION = "Preparation"
    IN_PRODUCTION = "In Production"
    POST_PRODUCTION = "Post-Production Processing"
    READY_FOR_SHIPPING = "Ready for Shipping"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


class ProstheticType(str, Enum):
    DENTURES = "Dentures"
    CROWN = "Crown"
    BRIDGE = "Bridge"
    VENEER = "Veneer"
    IMPLANT = "Implant"
    PARTIAL_DENTURE = "Partial Denture"
    NIGHT_GUARD = "Night Guard"


class OrderPriority(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"
    URGENT = "Urgent"


class Carrier(str, Enum):
    UPS = "UPS"
    FEDEX = "FedEx"
    DHL = "DHL"
    USPS = "USPS"
    LOCAL_DELIVERY = "Local Delivery"


class UserRole(str, Enum):
    ADMIN = "admin"
    CLINIC = "clinic"
    LAB = "lab"


# Urgency rank used by the dashboard sort (higher sorts first).
PRIORITY_RANK: dict[OrderPriority, int] = {
    OrderPriority.URGENT: 4,
    OrderPriority.HIGH: 3,
    OrderPriority.NORMAL: 2,
    OrderPriority.LOW: 1,
}

ADMIN_ACTOR = "Admin"


@dataclass(frozen=True)
class StatusUpdate:
    status: OrderStatus
    timestamp: datetime
    notes: Optional[str] = None
    updated_by: Optional[str] = None


@dataclass(frozen=True)
class ProductionPhoto:
    id: str
    stage: OrderStatus
    url: str
    uploaded_at: datetime
    caption: Optional[str] = None


@dataclass(frozen=True)
class Order:
    """One prosthetic fabrication job tracked from intake to delivery."""

    id: str
    order_number: str
    patient_name: str
    prosthetic_type: ProstheticType
    clinic_name: str
    status: OrderStatus
    priority: OrderPriority
    created_at: datetime
    updated_at: datetime
    due_date: date
    status_history: tuple[StatusUpdate, ...]
    special_instructions: str = ""
    assigned_lab: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[Carrier] = None
    estimated_completion_time: Optional[date] = None
    production_photos: tuple[ProductionPhoto, ...] = ()
    lab_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    last_modified_by: Optional[str] = None


@dataclass(frozen=True)
class ContactInfo:
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


@dataclass(frozen=True)
class User:
    """Admin-managed account. ``password_hash`` is never serialized."""

    id: str
    email: str
    name: str
    role: UserRole
    organization_name: str
    is_active: bool
    created_at: datetime
    permissions: tuple[str, ...] = ()
    last_login: Optional[datetime] = None
    contact_info: Optional[ContactInfo] = None
    password_hash: Optional[str] = field(default=None, repr=False)
