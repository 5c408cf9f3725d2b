"""Shared FastAPI dependencies and error mapping for the API routers."""

import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from innercompass.content import CATALOG
from innercompass.content.catalog import TopicKey
from innercompass.errors import (
    AuthError,
    AuthErrorReason,
    CatalogError,
    InnerCompassError,
    InputRejectedError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
)
from innercompass.services.session import SessionContext, SessionController, get_session_controller

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

_AUTH_STATUS = {
    AuthErrorReason.DUPLICATE_EMAIL: 409,
    AuthErrorReason.WEAK_PASSWORD: 422,
    AuthErrorReason.INVALID_CREDENTIALS: 401,
    AuthErrorReason.UNAUTHENTICATED: 401,
    AuthErrorReason.NETWORK: 503,
}


def get_controller() -> SessionController:
    return get_session_controller()


async def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    controller: SessionController = Depends(get_controller),
) -> SessionContext:
    """Resolve the bearer token to its session, or 401."""
    token = credentials.credentials if credentials else None
    try:
        return await controller.resume(token)
    except InnerCompassError as e:
        raise to_http_exception(e) from e


def topic_key(module_id: str, topic_id: str) -> TopicKey:
    """Path parameters -> TopicKey, 404 when the topic is not in the catalog."""
    key = TopicKey(module_id, topic_id)
    if key not in CATALOG:
        raise HTTPException(status_code=404, detail=f"Topic {key} not found")
    return key


def to_http_exception(error: InnerCompassError) -> HTTPException:
    """Map an application error to the HTTP status the client sees."""
    if isinstance(error, AuthError):
        headers = {"WWW-Authenticate": "Bearer"} if _AUTH_STATUS[error.reason] == 401 else None
        return HTTPException(
            status_code=_AUTH_STATUS[error.reason],
            detail={"reason": error.reason.value, "message": error.message},
            headers=headers,
        )
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, StoreError):
        logger.error(f"[API] Store failure: {error}")
        return HTTPException(status_code=503, detail="保存失败，请稍后再试")
    if isinstance(error, CatalogError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, InputRejectedError):
        return HTTPException(status_code=422, detail=str(error))
    logger.error(f"[API] Unhandled application error: {error}")
    return HTTPException(status_code=500, detail=str(error))
