from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest

from lab2dent.domain_errors import DuplicateError, NotFoundError, ValidationError
from lab2dent.models import ContactInfo, UserRole
from lab2dent.seed_data import sample_users
from lab2dent.services.user_store import DEFAULT_PERMISSIONS, UserDraft, UserPatch, UserStore

NOW = datetime(2026, 1, 5, 8, 30, tzinfo=timezone.utc)


def _store() -> UserStore:
    counter = itertools.count(1)
    store = UserStore(clock=lambda: NOW, id_factory=lambda: f"user-{next(counter)}")
    store.load(sample_users())
    return store


def _draft(**overrides) -> UserDraft:
    values = {
        "email": "New.Clinic@Example.com",
        "name": "Dr. New",
        "role": "clinic",
        "organization_name": "New Clinic",
    }
    values.update(overrides)
    return UserDraft(**values)


def test_create_user_normalizes_email_and_defaults_permissions() -> None:
    store = _store()

    user = store.create_user(_draft(contact_info=ContactInfo(phone="555-0100", city="Austin")))

    assert user.id == "user-1"
    assert user.email == "new.clinic@example.com"
    assert user.role == UserRole.CLINIC
    assert user.permissions == DEFAULT_PERMISSIONS[UserRole.CLINIC]
    assert user.created_at == NOW
    assert user.contact_info.city == "Austin"
    assert store.find_by_email("NEW.CLINIC@example.com") == user
    assert len(store) == 9


def test_create_user_rejects_taken_email() -> None:
    store = _store()

    with pytest.raises(DuplicateError, match="already exists") as exc_info:
        store.create_user(_draft(email="ADMIN@lab2dent.com"))

    assert exc_info.value.code == "USER_EMAIL_TAKEN"
    assert exc_info.value.http_status == 409


@pytest.mark.parametrize(
    "overrides,code",
    [
        ({"email": "not-an-email"}, "INVALID_EMAIL"),
        ({"name": " "}, "MISSING_REQUIRED_FIELD"),
        ({"organization_name": ""}, "MISSING_REQUIRED_FIELD"),
        ({"role": "dentist"}, "INVALID_ENUM_VALUE"),
    ],
)
def test_create_user_validation(overrides: dict, code: str) -> None:
    store = _store()

    with pytest.raises(ValidationError) as exc_info:
        store.create_user(_draft(**overrides))

    assert exc_info.value.code == code
    assert len(store) == 8


def test_update_user_changes_only_given_fields() -> None:
    store = _store()
    before = store.get("7")

    updated = store.update_user("7", UserPatch(is_active=True, permissions=["view_orders", "view_orders", "edit_orders"]))

    assert updated.is_active is True
    assert updated.permissions == ("view_orders", "edit_orders")
    assert updated.email == before.email
    assert updated.created_at == before.created_at


def test_update_user_email_collision_is_rejected() -> None:
    store = _store()

    with pytest.raises(DuplicateError):
        store.update_user("2", UserPatch(email="production@premium-lab.com"))

    assert store.get("2").email == "contact@downtown-dental.com"


def test_delete_user_removes_record() -> None:
    store = _store()

    store.delete_user("8")

    assert len(store) == 7
    with pytest.raises(NotFoundError, match="User not found") as exc_info:
        store.get("8")
    assert exc_info.value.code == "USER_NOT_FOUND"


def test_delete_unknown_user_raises_not_found() -> None:
    store = _store()

    with pytest.raises(NotFoundError):
        store.delete_user("missing")


def test_record_login_sets_last_login() -> None:
    store = _store()

    assert store.record_login("4").last_login == NOW
