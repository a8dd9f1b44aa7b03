"""FastAPI dependencies resolving the per-app stores and settings."""
from fastapi import Request

from .config import Settings
from .services.order_store import OrderStore
from .services.session_store import SessionStore
from .services.user_store import UserStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_order_store(request: Request) -> OrderStore:
    return request.app.state.order_store


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store
