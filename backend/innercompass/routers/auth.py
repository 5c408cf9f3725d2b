"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from innercompass.errors import InnerCompassError
from innercompass.routers.deps import get_controller, get_current_session, to_http_exception
from innercompass.services.session import SessionContext, SessionController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    """Request to create an account."""

    email: str
    password: str
    display_name: str


class LoginRequest(BaseModel):
    """Request to log in."""

    email: str
    password: str


class SessionResponse(BaseModel):
    """An authenticated session."""

    token: str
    user_id: str
    email: str
    display_name: str
    view: str


def _session_response(session: SessionContext) -> SessionResponse:
    identity = session.identity
    return SessionResponse(
        token=identity.token,
        user_id=identity.user_id,
        email=identity.email,
        display_name=session.user_record.display_name,
        view=session.view.value,
    )


@router.post("/register", response_model=SessionResponse, status_code=201)
async def register(
    request: RegisterRequest,
    controller: SessionController = Depends(get_controller),
) -> SessionResponse:
    """Create an account and start a session."""
    try:
        session = await controller.register(request.email, request.password, request.display_name)
    except InnerCompassError as e:
        raise to_http_exception(e) from e
    return _session_response(session)


@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    controller: SessionController = Depends(get_controller),
) -> SessionResponse:
    """Log in with email and password."""
    try:
        session = await controller.login(request.email, request.password)
    except InnerCompassError as e:
        raise to_http_exception(e) from e
    return _session_response(session)


@router.post("/logout", status_code=204)
async def logout(
    session: SessionContext = Depends(get_current_session),
    controller: SessionController = Depends(get_controller),
) -> None:
    """End the current session and revoke its token."""
    controller.logout(session)


@router.get("/me", response_model=SessionResponse)
async def me(session: SessionContext = Depends(get_current_session)) -> SessionResponse:
    """Return the current session."""
    return _session_response(session)
