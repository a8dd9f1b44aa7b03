"""Authentication and authorization."""
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Iterable, Optional
import logging
import time
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from .config import Settings
from .dependencies import get_app_settings, get_session_store, get_user_store
from .domain_errors import PermissionDeniedError
from .models import User, UserRole
from .services.session_store import SessionStore
from .services.user_store import UserStore

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
logger = logging.getLogger(__name__)

# Bearer token scheme
security = HTTPBearer()


DASHBOARD_PATHS: dict[UserRole, str] = {
    UserRole.CLINIC: "/clinic/dashboard",
    UserRole.LAB: "/lab/dashboard",
    UserRole.ADMIN: "/admin/dashboard",
}


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Invalid/corrupted hash should not crash login flow.
        logger.exception("Password verification failed due to invalid hash format")
        return False


def hash_password(password: str) -> str:
    """Hash password."""
    return pwd_context.hash(password)


def get_redirect_path(role: UserRole | str) -> str:
    try:
        return DASHBOARD_PATHS[UserRole(role)]
    except ValueError:
        return "/"


def authenticate_user(user_store: UserStore, email: str, password: str) -> Optional[User]:
    """Return the active account matching the credentials, else None."""
    user = user_store.find_by_email(email)
    if user is None or not user.is_active or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    now = int(time.time())
    if expires_delta:
        exp = now + int(expires_delta.total_seconds())
    else:
        exp = now + int(settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES) * 60
    to_encode.update({"exp": exp, "iat": now, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict:
    """Decode JWT token, applying the configured clock-skew leeway to ``exp``."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError:
        raise _credentials_error()

    now = int(time.time())
    try:
        exp_int = int(payload["exp"])
    except (KeyError, TypeError, ValueError):
        raise _credentials_error()
    if now > exp_int + int(settings.JWT_LEEWAY_SECONDS):
        raise _credentials_error("Token expired")

    iat = payload.get("iat")
    if iat is not None:
        try:
            iat_int = int(iat)
        except (TypeError, ValueError):
            raise _credentials_error()
        # Reject tokens issued far in the future (clock skew / malicious tokens).
        if iat_int > now + int(settings.JWT_LEEWAY_SECONDS):
            raise _credentials_error()
    return payload


def session_record(user: User) -> dict[str, Any]:
    """Serializable current-user record kept in the session store."""
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "organization_name": user.organization_name,
    }


@dataclass(frozen=True)
class CurrentSession:
    session_id: str
    user: User
    record: dict[str, Any]


def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_app_settings),
    session_store: SessionStore = Depends(get_session_store),
    user_store: UserStore = Depends(get_user_store),
) -> CurrentSession:
    """Resolve bearer token -> live session -> active user."""
    payload = decode_token(credentials.credentials, settings)
    if payload.get("type") != "access":
        raise _credentials_error("Invalid token type")

    session_id = payload.get("sid")
    user_id = payload.get("sub")
    if not session_id or not user_id:
        raise _credentials_error()

    record = session_store.load(str(session_id))
    if record is None or record.get("id") != user_id:
        raise _credentials_error("Session expired or logged out")

    for user in user_store.list_users():
        if user.id == user_id and user.is_active:
            return CurrentSession(session_id=str(session_id), user=user, record=record)
    raise _credentials_error("User not found or inactive")


def get_current_user(current: CurrentSession = Depends(get_current_session)) -> User:
    """Get current authenticated user."""
    return current.user


# Role permissions matrix
ROLE_PERMISSIONS: dict[str, dict[str, bool]] = {
    "admin": {
        "canViewAllOrders": True,
        "canCreateOrders": False,
        "canUpdateOrderStatus": True,
        "canUpdateTracking": True,
        "canUpdatePriority": True,
        "canUploadPhotos": True,
        "canAdminEditOrders": True,
        "canAssignLabs": True,
        "canManageUsers": True,
        "canViewAnalytics": True,
    },
    "lab": {
        "canViewAllOrders": True,
        "canCreateOrders": False,
        "canUpdateOrderStatus": True,
        "canUpdateTracking": True,
        "canUpdatePriority": True,
        "canUploadPhotos": True,
        "canAdminEditOrders": False,
        "canAssignLabs": False,
        "canManageUsers": False,
        "canViewAnalytics": False,
    },
    "clinic": {
        "canViewAllOrders": False,
        "canCreateOrders": True,
        "canUpdateOrderStatus": False,
        "canUpdateTracking": True,
        "canUpdatePriority": False,
        "canUploadPhotos": False,
        "canAdminEditOrders": False,
        "canAssignLabs": False,
        "canManageUsers": False,
        "canViewAnalytics": False,
    },
}

PERMISSION_KEYS: tuple[str, ...] = tuple(ROLE_PERMISSIONS["admin"].keys())


def _role_key(role: UserRole | str) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


def get_role_permissions(role: UserRole | str) -> dict[str, bool]:
    """Full capability map for a role; unknown roles are denied everything."""
    permissions = ROLE_PERMISSIONS.get(_role_key(role), {})
    return {key: bool(permissions.get(key, False)) for key in PERMISSION_KEYS}


def check_permission(user: User, permission: str) -> bool:
    """Check if user has specific permission."""
    permissions = ROLE_PERMISSIONS.get(_role_key(user.role), {})
    return permissions.get(permission, False)


class PermissionChecker:
    """Check user permissions based on role."""

    def __init__(self, required_permission: str):
        self.required_permission = required_permission

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if not check_permission(current_user, self.required_permission):
            raise PermissionDeniedError(
                f"Permission denied: {self.required_permission} required",
                details={"permission": self.required_permission},
            )
        return current_user


class RoleChecker:
    """Restrict a dashboard to the roles allowed to open it."""

    def __init__(self, allowed_roles: Iterable[UserRole]):
        self.allowed_roles = frozenset(allowed_roles)

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in self.allowed_roles:
            raise PermissionDeniedError(
                "Access denied for role " + current_user.role.value,
                code="ROLE_NOT_ALLOWED",
                details={"role": current_user.role.value},
            )
        return current_user
