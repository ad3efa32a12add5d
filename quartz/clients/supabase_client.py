"""
Supabase access: the service-role client for cache tables and storage,
one-off clients that complete sign-ins, and the auth helpers that resolve a
bearer token to a user.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from supabase import Client, ClientOptions, create_client

from quartz.config import Settings
from shared.logging.safe_logging import token_presence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: str
    expires_in: int


def create_supabase_client(settings: Settings) -> Optional[Client]:
    """Service-role client (bypasses RLS); None when Supabase is not configured."""
    if not settings.supabase_configured:
        logger.warning("Supabase not configured; cache tables and auth are disabled")
        return None
    key = settings.SUPABASE_SERVICE_ROLE_KEY or settings.SUPABASE_ANON_KEY
    logger.info(
        "Supabase client ready url=%s %s",
        settings.SUPABASE_URL,
        token_presence("service_role_key", settings.SUPABASE_SERVICE_ROLE_KEY),
    )
    return create_client(settings.SUPABASE_URL, key)


def create_session_client_factory(settings: Settings) -> Optional[Callable[[], Client]]:
    """Factory for throwaway clients that complete a user's sign-in.

    A code exchange signs the client in and swaps its ``Authorization``
    header for the user's JWT, so it must never run on the shared
    service-role client.
    """
    if not settings.supabase_configured:
        return None
    key = settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return lambda: create_client(settings.SUPABASE_URL, key, options=options)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthService:
    """Resolves Supabase sessions. Every failure reads as "anonymous"."""

    def __init__(self, client: Optional[Any], session_client_factory: Optional[Callable[[], Any]] = None):
        self.client = client
        self.session_client_factory = session_client_factory

    def get_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if not access_token or self.client is None:
            return None
        try:
            res = self.client.auth.get_user(access_token)
        except Exception as exc:
            logger.info("[AUTH] token rejected %s: %s", token_presence("token", access_token), exc)
            return None
        user = getattr(res, "user", None)
        if user is None:
            return None
        return AuthUser(id=str(user.id), email=getattr(user, "email", None))

    def exchange_code(self, code: str, code_verifier: Optional[str] = None) -> Optional[AuthSession]:
        """Exchange an OAuth / magic-link code for a session on a one-off client."""
        if self.session_client_factory is None:
            logger.warning("[AUTH] code exchange skipped: Supabase not configured")
            return None
        params: dict[str, Any] = {"auth_code": code}
        if code_verifier:
            params["code_verifier"] = code_verifier
        try:
            res = self.session_client_factory().auth.exchange_code_for_session(params)
        except Exception as exc:
            logger.warning("[AUTH] code exchange failed: %s", exc)
            return None
        session = getattr(res, "session", None)
        if session is None or not getattr(session, "access_token", None):
            logger.warning("[AUTH] code exchange returned no session")
            return None
        return AuthSession(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", "") or "",
            expires_in=int(getattr(session, "expires_in", 0) or 3600),
        )
