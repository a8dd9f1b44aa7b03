"""User endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, status

from ..auth import PermissionChecker, hash_password
from ..dependencies import get_order_store, get_user_store
from ..models import ContactInfo
from ..presenters import user_response
from ..schemas import ContactInfoSchema, UserCreate, UserResponse, UserUpdate
from ..services.order_store import OrderStore
from ..services.user_store import UserDraft, UserPatch, UserStore
from ..use_cases.admin_view import AdminView

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(PermissionChecker("canManageUsers"))],
)


def get_admin_view(
    order_store: OrderStore = Depends(get_order_store),
    user_store: UserStore = Depends(get_user_store),
) -> AdminView:
    return AdminView(order_store, user_store)


def _contact_info(schema: Optional[ContactInfoSchema]) -> Optional[ContactInfo]:
    if schema is None:
        return None
    return ContactInfo(**schema.model_dump())


@router.get("", response_model=list[UserResponse])
def get_users(view: AdminView = Depends(get_admin_view)):
    """Get all users."""
    return [user_response(user) for user in view.list_users()]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, view: AdminView = Depends(get_admin_view)):
    user = view.create_user(
        UserDraft(
            email=payload.email,
            name=payload.name,
            role=payload.role,
            organization_name=payload.organization_name,
            is_active=payload.is_active,
            permissions=payload.permissions,
            contact_info=_contact_info(payload.contact_info),
            password_hash=hash_password(payload.password) if payload.password else None,
        )
    )
    return user_response(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, view: AdminView = Depends(get_admin_view)):
    """Get user by ID."""
    return user_response(view.get_user(user_id))


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(user_id: str, payload: UserUpdate, view: AdminView = Depends(get_admin_view)):
    user = view.update_user(
        user_id,
        UserPatch(
            email=payload.email,
            name=payload.name,
            role=payload.role,
            organization_name=payload.organization_name,
            is_active=payload.is_active,
            permissions=payload.permissions,
            contact_info=_contact_info(payload.contact_info),
            password_hash=hash_password(payload.password) if payload.password else None,
        ),
    )
    return user_response(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, view: AdminView = Depends(get_admin_view)):
    view.delete_user(user_id)
