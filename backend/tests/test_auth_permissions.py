from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from lab2dent.auth import (
    PERMISSION_KEYS,
    ROLE_PERMISSIONS,
    PermissionChecker,
    RoleChecker,
    authenticate_user,
    create_access_token,
    decode_token,
    get_redirect_path,
    get_role_permissions,
    hash_password,
    verify_password,
)
from lab2dent.config import Settings
from lab2dent.domain_errors import PermissionDeniedError
from lab2dent.models import UserRole
from lab2dent.seed_data import DEMO_PASSWORD, demo_accounts, sample_users
from lab2dent.services.user_store import UserPatch, UserStore


@pytest.mark.parametrize(
    ("role", "expected"),
    [
        (
            "admin",
            {
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
        ),
        (
            "lab",
            {
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
        ),
        (
            "clinic",
            {
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
        ),
    ],
)
def test_role_permissions_matrix_is_stable(role: str, expected: dict[str, bool]) -> None:
    assert get_role_permissions(role) == expected


def test_role_permissions_have_exact_keyset_for_each_role() -> None:
    for role in ROLE_PERMISSIONS:
        assert set(get_role_permissions(role).keys()) == set(PERMISSION_KEYS)


def test_unknown_role_denies_all_permissions() -> None:
    permissions = get_role_permissions("unknown-role")
    assert set(permissions.keys()) == set(PERMISSION_KEYS)
    assert all(value is False for value in permissions.values())


def test_permission_checker_raises_problem_error_for_missing_permission() -> None:
    clinic_user = SimpleNamespace(role=UserRole.CLINIC)

    with pytest.raises(PermissionDeniedError, match="canManageUsers") as exc_info:
        PermissionChecker("canManageUsers")(current_user=clinic_user)

    assert exc_info.value.http_status == 403
    assert PermissionChecker("canCreateOrders")(current_user=clinic_user) is clinic_user


def test_role_checker_rejects_other_roles() -> None:
    checker = RoleChecker([UserRole.ADMIN])

    with pytest.raises(PermissionDeniedError) as exc_info:
        checker(current_user=SimpleNamespace(role=UserRole.LAB))

    assert exc_info.value.code == "ROLE_NOT_ALLOWED"


@pytest.mark.parametrize(
    ("role", "path"),
    [(UserRole.CLINIC, "/clinic/dashboard"), (UserRole.LAB, "/lab/dashboard"), (UserRole.ADMIN, "/admin/dashboard")],
)
def test_redirect_path_per_role(role: UserRole, path: str) -> None:
    assert get_redirect_path(role) == path


def test_password_hash_round_trip_and_bad_hash() -> None:
    hashed = hash_password("s3cret!")

    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret!", "not-a-hash")


def test_authenticate_user_checks_password_and_active_flag() -> None:
    store = UserStore()
    store.load(demo_accounts())
    store.load(sample_users())

    assert authenticate_user(store, "Clinic@Test.com", DEMO_PASSWORD).id == "demo-clinic"
    assert authenticate_user(store, "clinic@test.com", "nope") is None
    # Sample accounts have no password and cannot sign in.
    assert authenticate_user(store, "admin@lab2dent.com", DEMO_PASSWORD) is None

    store.update_user("demo-lab", UserPatch(is_active=False))
    assert authenticate_user(store, "lab@test.com", DEMO_PASSWORD) is None


def test_access_token_round_trip_and_expiry() -> None:
    settings = Settings(JWT_LEEWAY_SECONDS=0)

    token = create_access_token({"sub": "demo-admin", "sid": "abc"}, settings)
    payload = decode_token(token, settings)

    assert payload["sub"] == "demo-admin"
    assert payload["sid"] == "abc"
    assert payload["type"] == "access"

    expired = create_access_token({"sub": "demo-admin"}, settings, expires_delta=timedelta(seconds=-60))
    with pytest.raises(HTTPException) as exc_info:
        decode_token(expired, settings)
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Token expired"


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = create_access_token({"sub": "x"}, Settings(JWT_SECRET_KEY="one"))

    with pytest.raises(HTTPException) as exc_info:
        decode_token(token, Settings(JWT_SECRET_KEY="two"))

    assert exc_info.value.status_code == 401
