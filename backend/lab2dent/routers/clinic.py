"""Clinic dashboard endpoints: own orders only."""
from fastapi import APIRouter, Depends, status

from ..auth import PermissionChecker, RoleChecker
from ..dependencies import get_order_store
from ..models import User, UserRole
from ..presenters import order_response, progress_response
from ..schemas import OrderCreate, OrderProgressResponse, OrderResponse, TrackingUpdateRequest
from ..services.order_store import OrderStore
from ..use_cases.clinic_view import ClinicView

router = APIRouter(prefix="/clinic", tags=["clinic"])

require_clinic = RoleChecker([UserRole.CLINIC])


def get_clinic_view(
    current_user: User = Depends(require_clinic),
    order_store: OrderStore = Depends(get_order_store),
) -> ClinicView:
    return ClinicView(order_store, clinic_name=current_user.organization_name)


@router.get("/orders", response_model=list[OrderResponse])
def list_orders(view: ClinicView = Depends(get_clinic_view)):
    """Orders placed by the signed-in clinic, most recently updated first."""
    return [order_response(order) for order in view.orders()]


@router.post(
    "/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(PermissionChecker("canCreateOrders"))],
)
def create_order(payload: OrderCreate, view: ClinicView = Depends(get_clinic_view)):
    order = view.create_order(
        patient_name=payload.patient_name,
        prosthetic_type=payload.prosthetic_type,
        due_date=payload.due_date,
        special_instructions=payload.special_instructions,
    )
    return order_response(order)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, view: ClinicView = Depends(get_clinic_view)):
    return order_response(view.get_order(order_id))


@router.get("/orders/{order_id}/progress", response_model=OrderProgressResponse)
def get_order_progress(order_id: str, view: ClinicView = Depends(get_clinic_view)):
    """Six-step progress bar for one order."""
    return progress_response(view.progress(order_id))


@router.put(
    "/orders/{order_id}/tracking",
    response_model=OrderResponse,
    dependencies=[Depends(PermissionChecker("canUpdateTracking"))],
)
def update_tracking(order_id: str, payload: TrackingUpdateRequest, view: ClinicView = Depends(get_clinic_view)):
    return order_response(view.update_tracking(order_id, payload.tracking_number, payload.carrier))
