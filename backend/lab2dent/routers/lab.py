"""Lab dashboard endpoints: the whole queue, production updates and photos."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..auth import PermissionChecker, RoleChecker
from ..config import Settings
from ..dependencies import get_app_settings, get_order_store
from ..models import OrderStatus, User, UserRole
from ..presenters import order_response, progress_response
from ..schemas import (
    EstimatedCompletionRequest,
    LabSummaryResponse,
    OrderProgressResponse,
    OrderResponse,
    OrderStatusUpdateRequest,
    PriorityUpdateRequest,
    TrackingUpdateRequest,
)
from ..services.order_store import OrderStore
from ..services.status_progression import order_progress
from ..use_cases.lab_view import LabView
from .uploads import save_photo

router = APIRouter(prefix="/lab", tags=["lab"])

require_lab = RoleChecker([UserRole.LAB, UserRole.ADMIN])


def get_lab_view(
    current_user: User = Depends(require_lab),
    order_store: OrderStore = Depends(get_order_store),
) -> LabView:
    return LabView(order_store, actor=current_user.organization_name)


@router.get("/orders", response_model=list[OrderResponse])
def list_orders(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    view: LabView = Depends(get_lab_view),
):
    """All orders, most urgent first, then earliest due date."""
    return [order_response(order) for order in view.orders(status=status, priority=priority)]


@router.get("/summary", response_model=LabSummaryResponse)
def get_summary(view: LabView = Depends(get_lab_view)):
    counts = view.status_summary()
    return LabSummaryResponse(total=sum(counts.values()), status_counts=counts)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, view: LabView = Depends(get_lab_view)):
    return order_response(view.get_order(order_id))


@router.get("/orders/{order_id}/progress", response_model=OrderProgressResponse)
def get_order_progress(order_id: str, view: LabView = Depends(get_lab_view)):
    return progress_response(order_progress(view.get_order(order_id)))


@router.put(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canUpdateOrderStatus"))],
)
def update_status(order_id: str, payload: OrderStatusUpdateRequest, view: LabView = Depends(get_lab_view)):
    return order_response(view.update_status(order_id, payload.status, payload.notes))


@router.put(
    "/orders/{order_id}/tracking",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canUpdateTracking"))],
)
def update_tracking(order_id: str, payload: TrackingUpdateRequest, view: LabView = Depends(get_lab_view)):
    return order_response(view.update_tracking(order_id, payload.tracking_number, payload.carrier))


@router.put(
    "/orders/{order_id}/priority",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canUpdatePriority"))],
)
def update_priority(order_id: str, payload: PriorityUpdateRequest, view: LabView = Depends(get_lab_view)):
    return order_response(view.update_priority(order_id, payload.priority))


@router.put("/orders/{order_id}/estimated-completion", response_model=OrderResponse)
def update_estimated_completion(
    order_id: str,
    payload: EstimatedCompletionRequest,
    view: LabView = Depends(get_lab_view),
):
    return order_response(view.update_estimated_completion(order_id, payload.estimated_completion_time))


@router.post(
    "/orders/{order_id}/photos",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canUploadPhotos"))],
)
async def upload_photo(
    order_id: str,
    file: UploadFile = File(...),
    stage: Optional[OrderStatus] = Form(None),
    caption: Optional[str] = Form(None),
    view: LabView = Depends(get_lab_view),
    settings: Settings = Depends(get_app_settings),
):
    """Store a production photo and attach it to the order."""
    # 404 before anything is written to disk.
    view.get_order(order_id)
    url = await save_photo(file, settings)
    return order_response(view.upload_production_photo(order_id, url=url, stage=stage, caption=caption))
