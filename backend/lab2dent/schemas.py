"""Pydantic schemas for API."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date, datetime

from .models import Carrier, OrderPriority, OrderStatus, ProstheticType, UserRole


# Order schemas
class StatusUpdateResponse(BaseModel):
    status: OrderStatus
    timestamp: datetime
    notes: Optional[str] = None
    updated_by: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class ProductionPhotoResponse(BaseModel):
    id: str
    stage: OrderStatus
    url: str
    caption: Optional[str] = None
    uploaded_at: datetime
    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    id: str
    order_number: str
    patient_name: str
    prosthetic_type: ProstheticType
    special_instructions: str
    status: OrderStatus
    priority: OrderPriority
    clinic_name: str
    assigned_lab: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    due_date: date
    estimated_completion_time: Optional[date] = None
    tracking_number: Optional[str] = None
    carrier: Optional[Carrier] = None
    status_history: list[StatusUpdateResponse]
    production_photos: list[ProductionPhotoResponse]
    lab_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    last_modified_by: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class OrderCreate(BaseModel):
    patient_name: str = Field(min_length=1, max_length=200)
    prosthetic_type: ProstheticType
    special_instructions: str = ""
    due_date: date


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus
    notes: Optional[str] = None


class TrackingUpdateRequest(BaseModel):
    tracking_number: str = Field(min_length=1, max_length=100)
    carrier: Optional[Carrier] = None


class PriorityUpdateRequest(BaseModel):
    priority: OrderPriority


class EstimatedCompletionRequest(BaseModel):
    estimated_completion_time: date


class LabAssignmentRequest(BaseModel):
    lab_name: str = Field(min_length=1, max_length=200)


class StatusOverrideRequest(BaseModel):
    status: OrderStatus
    admin_notes: str = Field(min_length=1)


class AdminOrderUpdateRequest(BaseModel):
    """Admin edit form. Only the fields listed here can be changed."""

    patient_name: Optional[str] = None
    prosthetic_type: Optional[ProstheticType] = None
    special_instructions: Optional[str] = None
    clinic_name: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[OrderStatus] = None
    status_notes: Optional[str] = None
    priority: Optional[OrderPriority] = None
    assigned_lab: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[Carrier] = None
    estimated_completion_time: Optional[date] = None
    lab_notes: Optional[str] = None
    admin_notes: Optional[str] = None


# Progress schemas
class ProgressStepResponse(BaseModel):
    index: int
    status: OrderStatus
    label: str
    state: str
    model_config = ConfigDict(from_attributes=True)


class OrderProgressResponse(BaseModel):
    order_id: str
    order_number: str
    current_status: OrderStatus
    caption: str
    is_terminal: bool
    is_overdue: bool
    steps: list[ProgressStepResponse]


# Dashboard schemas
class LabSummaryResponse(BaseModel):
    total: int
    status_counts: dict[str, int]


class MonthlyVolume(BaseModel):
    month: str
    count: int


class MonthlyRevenue(BaseModel):
    month: str
    revenue: int


class AnalyticsResponse(BaseModel):
    total_orders: int
    active_orders: int
    completed_orders: int
    total_revenue: int
    average_completion_time: float
    orders_by_status: dict[str, int]
    orders_by_priority: dict[str, int]
    orders_by_lab: dict[str, int]
    orders_by_clinic: dict[str, int]
    monthly_order_volume: list[MonthlyVolume]
    revenue_by_month: list[MonthlyRevenue]
    model_config = ConfigDict(from_attributes=True)


class AdminOverviewResponse(BaseModel):
    total_orders: int
    active_orders: int
    overdue_orders: int
    total_clinics: int
    total_labs: int
    total_users: int
    active_users: int
    labs: list[str]
    recent_orders: list[OrderResponse]


# User schemas
class ContactInfoSchema(BaseModel):
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class UserBase(BaseModel):
    email: str
    name: str
    role: UserRole
    organization_name: str
    contact_info: Optional[ContactInfoSchema] = None


class UserCreate(UserBase):
    is_active: bool = True
    permissions: Optional[list[str]] = None
    password: Optional[str] = Field(default=None, min_length=6)


class UserUpdate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None
    organization_name: Optional[str] = None
    is_active: Optional[bool] = None
    permissions: Optional[list[str]] = None
    contact_info: Optional[ContactInfoSchema] = None
    password: Optional[str] = Field(default=None, min_length=6)


class UserResponse(UserBase):
    id: str
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None
    permissions: list[str]
    model_config = ConfigDict(from_attributes=True)


# Auth schemas
class LoginRequest(BaseModel):
    email: str
    password: str


class SessionUserResponse(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole
    organization_name: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    redirect_path: str
    user: SessionUserResponse
    permissions: dict[str, bool]
