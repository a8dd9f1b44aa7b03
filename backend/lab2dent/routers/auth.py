"""Auth endpoints."""
import logging
import time
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.concurrency import run_in_threadpool

from ..auth import (
    CurrentSession,
    authenticate_user,
    create_access_token,
    get_current_session,
    get_redirect_path,
    get_role_permissions,
    session_record,
)
from ..config import Settings
from ..dependencies import get_app_settings, get_session_store, get_user_store
from ..models import User
from ..schemas import LoginRequest, SessionUserResponse, TokenResponse
from ..services.latency import simulated_call
from ..services.session_store import SessionStore
from ..services.user_store import UserStore

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _set_no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store"
    response.headers["Pragma"] = "no-cache"


def _open_session(user_store: UserStore, session_store: SessionStore, user_id: str) -> tuple[User, str, dict]:
    """Stamp the login and persist the session record (blocking; may hit redis)."""
    user = user_store.record_login(user_id)
    session_id = uuid4().hex
    record = session_record(user)
    session_store.save(session_id, record)
    return user, session_id, record


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_app_settings),
    user_store: UserStore = Depends(get_user_store),
    session_store: SessionStore = Depends(get_session_store),
):
    """Login with email and password."""
    start = time.perf_counter()
    _set_no_store(response)

    await simulated_call(None, delay=settings.LOGIN_SIMULATED_DELAY_SECONDS)

    email = (payload.email or "").strip()
    # pbkdf2 and the session write are blocking calls.
    user = await run_in_threadpool(authenticate_user, user_store, email, payload.password)
    if user is None:
        logger.info("auth.login failed email=%s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer", "Cache-Control": "no-store"},
        )

    user, session_id, record = await run_in_threadpool(_open_session, user_store, session_store, user.id)
    access_token = create_access_token({"sub": user.id, "sid": session_id}, settings)

    if settings.DEBUG:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("auth.login user=%s role=%s ms=%.0f", user.id, user.role.value, elapsed_ms)

    return TokenResponse(
        access_token=access_token,
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        redirect_path=get_redirect_path(user.role),
        user=SessionUserResponse(**record),
        permissions=get_role_permissions(user.role),
    )


@router.post("/logout")
def logout(
    response: Response,
    current: CurrentSession = Depends(get_current_session),
    session_store: SessionStore = Depends(get_session_store),
):
    """Logout by dropping the stored session record."""
    _set_no_store(response)
    session_store.clear(current.session_id)
    logger.info("auth.logout user=%s", current.user.id)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=SessionUserResponse)
def get_me(current: CurrentSession = Depends(get_current_session)):
    """Get the signed-in user as stored in the session."""
    return SessionUserResponse(**current.record)


@router.get("/permissions", response_model=dict[str, bool])
def get_my_permissions(current: CurrentSession = Depends(get_current_session)):
    """Capability map of the signed-in user's role."""
    return get_role_permissions(current.user.role)
