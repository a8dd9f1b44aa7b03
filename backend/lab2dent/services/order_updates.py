"""Explicit mutation variants accepted by the order store.

Each variant names exactly the fields one kind of edit may touch, so an
admin patch can never overwrite identity, timestamps or history directly.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..models import Carrier, OrderPriority, OrderStatus, ProstheticType


@dataclass(frozen=True)
class SetStatus:
    status: OrderStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class SetTracking:
    tracking_number: str
    carrier: Optional[Carrier] = None


@dataclass(frozen=True)
class SetPriority:
    priority: OrderPriority


@dataclass(frozen=True)
class SetEstimatedCompletion:
    estimated_completion_time: date


@dataclass(frozen=True)
class AssignLab:
    lab_name: str


@dataclass(frozen=True)
class SetNotes:
    lab_notes: Optional[str] = None
    admin_notes: Optional[str] = None


@dataclass(frozen=True)
class SetDetails:
    patient_name: Optional[str] = None
    prosthetic_type: Optional[ProstheticType] = None
    special_instructions: Optional[str] = None
    clinic_name: Optional[str] = None
    due_date: Optional[date] = None


OrderUpdate = Union[
    SetStatus,
    SetTracking,
    SetPriority,
    SetEstimatedCompletion,
    AssignLab,
    SetNotes,
    SetDetails,
]
