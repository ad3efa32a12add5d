"""
Auth Routes

Endpoints:
- GET /auth/callback - Exchange a Supabase auth code and redirect back into the app
"""

import base64
import logging
from typing import Mapping, Optional

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from quartz.clients.supabase_client import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

CODE_VERIFIER_SUFFIX = "-auth-token-code-verifier"
ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"
REFRESH_TOKEN_MAX_AGE = 60 * 60 * 24 * 30

# Service instance (initialized by main app)
_service: Optional[AuthService] = None


def initialize_service(service: AuthService) -> AuthService:
    global _service
    _service = service
    return _service


def get_service() -> AuthService:
    """Get auth service instance"""
    if _service is None:
        raise RuntimeError("Auth service not initialized")
    return _service


def safe_next_path(next_path: Optional[str]) -> str:
    """Only same-site relative paths are allowed as redirect targets."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return "/"
    return next_path


def code_verifier_from_cookies(cookies: Mapping[str, str]) -> Optional[str]:
    """PKCE verifier the browser client stored under ``sb-<ref>-auth-token-code-verifier``."""
    for name, value in cookies.items():
        if not name.endswith(CODE_VERIFIER_SUFFIX) or not value:
            continue
        if value.startswith("base64-"):
            try:
                value = base64.urlsafe_b64decode(value[len("base64-"):] + "==").decode()
            except (ValueError, UnicodeDecodeError):
                return None
        return value.strip().strip('"') or None
    return None


@router.get("/callback")
def auth_callback(request: Request, code: Optional[str] = None, next: Optional[str] = None) -> RedirectResponse:
    """
    Complete an OAuth / magic-link sign-in.

    The browser arrives here with ``code``; after the exchange it is sent to
    ``next`` (default ``/``) on the same origin, carrying the new session in
    cookies.
    """
    session = None
    if code:
        session = get_service().exchange_code(code, code_verifier_from_cookies(request.cookies))
        logger.info("[AUTH] callback exchanged=%s", session is not None)

    origin = str(request.base_url).rstrip("/")
    response = RedirectResponse(url=f"{origin}{safe_next_path(next)}")
    if session is not None:
        secure = request.url.scheme == "https"
        response.set_cookie(
            ACCESS_TOKEN_COOKIE, session.access_token, max_age=session.expires_in, secure=secure, samesite="lax"
        )
        if session.refresh_token:
            response.set_cookie(
                REFRESH_TOKEN_COOKIE,
                session.refresh_token,
                max_age=REFRESH_TOKEN_MAX_AGE,
                httponly=True,
                secure=secure,
                samesite="lax",
            )
        for name in request.cookies:
            if name.endswith(CODE_VERIFIER_SUFFIX):
                response.delete_cookie(name)
    return response
