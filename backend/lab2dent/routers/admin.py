"""Admin dashboard endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends

from ..auth import PermissionChecker, RoleChecker
from ..config import Settings
from ..dependencies import get_app_settings, get_order_store, get_user_store
from ..models import UserRole
from ..presenters import analytics_response, order_response, overview_response
from ..schemas import (
    AdminOrderUpdateRequest,
    AdminOverviewResponse,
    AnalyticsResponse,
    LabAssignmentRequest,
    OrderResponse,
    StatusOverrideRequest,
)
from ..services.order_store import OrderStore
from ..services.user_store import UserStore
from ..use_cases.admin_view import AdminView

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(RoleChecker([UserRole.ADMIN]))],
)


def get_admin_view(
    order_store: OrderStore = Depends(get_order_store),
    user_store: UserStore = Depends(get_user_store),
) -> AdminView:
    return AdminView(order_store, user_store)


@router.get("/orders", response_model=list[OrderResponse])
def list_orders(
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    lab: Optional[str] = None,
    view: AdminView = Depends(get_admin_view),
):
    """Search and filter every order; "All" disables a filter."""
    orders = view.orders(search=search, status=status, priority=priority, lab=lab)
    return [order_response(order) for order in orders]


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, view: AdminView = Depends(get_admin_view)):
    return order_response(view.get_order(order_id))


@router.patch(
    "/orders/{order_id}",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canAdminEditOrders"))],
)
def update_order(order_id: str, payload: AdminOrderUpdateRequest, view: AdminView = Depends(get_admin_view)):
    return order_response(view.update_order(order_id, payload))


@router.post(
    "/orders/{order_id}/override-status",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canAdminEditOrders"))],
)
def override_status(order_id: str, payload: StatusOverrideRequest, view: AdminView = Depends(get_admin_view)):
    return order_response(view.override_status(order_id, payload.status, payload.admin_notes))


@router.put(
    "/orders/{order_id}/lab",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canAssignLabs"))],
)
def assign_lab(order_id: str, payload: LabAssignmentRequest, view: AdminView = Depends(get_admin_view)):
    return order_response(view.assign_to_lab(order_id, payload.lab_name))


@router.get("/labs", response_model=list[str])
def list_labs(view: AdminView = Depends(get_admin_view)):
    return view.labs()


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    dependencies=[Depends(PermissionChecker("canViewAnalytics"))],
)
def get_analytics(
    view: AdminView = Depends(get_admin_view),
    settings: Settings = Depends(get_app_settings),
):
    analytics = view.analytics(
        revenue_per_order=settings.REVENUE_PER_ORDER,
        months=settings.ANALYTICS_MONTHS,
    )
    return analytics_response(analytics)


@router.get("/overview", response_model=AdminOverviewResponse)
def get_overview(view: AdminView = Depends(get_admin_view)):
    return overview_response(view.overview())
