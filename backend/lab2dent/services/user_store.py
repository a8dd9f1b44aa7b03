"""In-memory store of admin-managed user accounts."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from ..domain_errors import DuplicateError, NotFoundError, ValidationError
from ..models import ContactInfo, User, UserRole
from .order_store import coerce_enum, now_utc

logger = logging.getLogger(__name__)


DEFAULT_PERMISSIONS: dict[UserRole, tuple[str, ...]] = {
    UserRole.ADMIN: (
        "view_orders",
        "create_orders",
        "edit_orders",
        "delete_orders",
        "manage_users",
        "view_analytics",
        "system_admin",
    ),
    UserRole.CLINIC: ("view_orders", "create_orders", "edit_orders"),
    UserRole.LAB: ("view_orders", "edit_orders"),
}


@dataclass(frozen=True)
class UserDraft:
    email: str
    name: str
    role: UserRole | str
    organization_name: str
    is_active: bool = True
    permissions: Optional[Iterable[str]] = None
    contact_info: Optional[ContactInfo] = None
    password_hash: Optional[str] = None


@dataclass(frozen=True)
class UserPatch:
    """Fields an admin may change on an existing account; ``None`` keeps the value."""

    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole | str] = None
    organization_name: Optional[str] = None
    is_active: Optional[bool] = None
    permissions: Optional[Iterable[str]] = None
    contact_info: Optional[ContactInfo] = None
    password_hash: Optional[str] = None


def _normalize_email(email: Optional[str]) -> str:
    value = (email or "").strip().lower()
    if not value or "@" not in value:
        raise ValidationError(
            "A valid email is required",
            code="INVALID_EMAIL",
            details={"field": "email"},
        )
    return value


def _required(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(
            f"{field_name} is required",
            code="MISSING_REQUIRED_FIELD",
            details={"field": field_name},
        )
    return value.strip()


def _unique_permissions(permissions: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(p.strip() for p in permissions if p and p.strip()))


class UserStore:
    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = now_utc,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._users: list[User] = []
        self._lock = threading.RLock()

    def list_users(self) -> list[User]:
        return list(self._users)

    def __len__(self) -> int:
        return len(self._users)

    def get(self, user_id: str) -> User:
        for user in self._users:
            if user.id == user_id:
                return user
        raise NotFoundError("User not found", code="USER_NOT_FOUND", details={"user_id": user_id})

    def find_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").strip().lower()
        for user in self._users:
            if user.email == wanted:
                return user
        return None

    def load(self, users: Iterable[User]) -> None:
        with self._lock:
            for user in users:
                self._ensure_email_free(user.email)
                self._users = [*self._users, replace(user, email=_normalize_email(user.email))]

    def create_user(self, draft: UserDraft) -> User:
        role = coerce_enum(UserRole, draft.role, field_name="role")
        email = _normalize_email(draft.email)
        permissions = DEFAULT_PERMISSIONS[role] if draft.permissions is None else _unique_permissions(draft.permissions)

        with self._lock:
            self._ensure_email_free(email)
            user = User(
                id=self._id_factory(),
                email=email,
                name=_required(draft.name, "name"),
                role=role,
                organization_name=_required(draft.organization_name, "organization_name"),
                is_active=draft.is_active,
                created_at=self._clock(),
                permissions=permissions,
                contact_info=draft.contact_info,
                password_hash=draft.password_hash,
            )
            self._users = [*self._users, user]

        logger.info("user.created id=%s role=%s", user.id, user.role.value)
        return user

    def update_user(self, user_id: str, patch: UserPatch) -> User:
        changes: dict[str, Any] = {}
        if patch.email is not None:
            changes["email"] = _normalize_email(patch.email)
        if patch.name is not None:
            changes["name"] = _required(patch.name, "name")
        if patch.role is not None:
            changes["role"] = coerce_enum(UserRole, patch.role, field_name="role")
        if patch.organization_name is not None:
            changes["organization_name"] = _required(patch.organization_name, "organization_name")
        if patch.is_active is not None:
            changes["is_active"] = patch.is_active
        if patch.permissions is not None:
            changes["permissions"] = _unique_permissions(patch.permissions)
        if patch.contact_info is not None:
            changes["contact_info"] = patch.contact_info
        if patch.password_hash is not None:
            changes["password_hash"] = patch.password_hash

        with self._lock:
            current = self.get(user_id)
            if "email" in changes and changes["email"] != current.email:
                self._ensure_email_free(changes["email"])
            updated = replace(current, **changes)
            self._users = [updated if user.id == user_id else user for user in self._users]

        logger.info("user.updated id=%s fields=%s", user_id, ",".join(sorted(changes)) or "-")
        return updated

    def delete_user(self, user_id: str) -> None:
        with self._lock:
            self.get(user_id)
            self._users = [user for user in self._users if user.id != user_id]
        logger.info("user.deleted id=%s", user_id)

    def record_login(self, user_id: str) -> User:
        with self._lock:
            updated = replace(self.get(user_id), last_login=self._clock())
            self._users = [updated if user.id == user_id else user for user in self._users]
        return updated

    def _ensure_email_free(self, email: str) -> None:
        if self.find_by_email(email) is not None:
            raise DuplicateError(
                "A user with this email already exists",
                code="USER_EMAIL_TAKEN",
                details={"email": email},
            )
