"""Request-scoped helpers: who is calling and from where."""

import logging
from typing import Optional

from fastapi import Cookie, Header, Request

from quartz.clients.supabase_client import AuthUser, bearer_token
from shared.logging.safe_logging import header_presence

from . import routes as auth_routes

logger = logging.getLogger(__name__)


def optional_user(
    authorization: Optional[str] = Header(default=None),
    session_token: Optional[str] = Cookie(default=None, alias=auth_routes.ACCESS_TOKEN_COOKIE),
) -> Optional[AuthUser]:
    """The signed-in user, or None for anonymous callers.

    The bearer header wins; the session cookie set by the auth callback is the
    fallback.

    Declared sync so FastAPI runs the Supabase round trip in its threadpool.
    """
    user = auth_routes.get_service().get_user(bearer_token(authorization) or session_token)
    logger.debug(
        "[AUTH] %s user=%s",
        header_presence("authorization", bool(authorization)),
        user.id if user else "anonymous",
    )
    return user


def client_id(request: Request, x_client_id: Optional[str] = Header(default=None)) -> str:
    """Stable id for an anonymous caller: the browser-supplied id, else its address."""
    if x_client_id and x_client_id.strip():
        return x_client_id.strip()[:128]
    return request.client.host if request.client else "unknown"


def request_origin(request: Request) -> str:
    """Scheme and host the request was addressed to, without a trailing slash."""
    return str(request.base_url).rstrip("/")
