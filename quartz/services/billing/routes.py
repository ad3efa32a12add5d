"""
Billing Routes

Endpoints:
- POST /api/stripe/checkout - Start a subscription checkout
- POST /api/stripe/webhook - Stripe event receiver
- GET /api/usage - Today's generation count and limit for the caller
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel

from quartz.clients.supabase_client import AuthUser
from quartz.services.auth.dependencies import client_id, optional_user, request_origin

from .subscriptions import SubscriptionService
from .usage import AnonymousUsage, UsageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["billing"])

# Service instances (initialized by main app)
_service: Optional[SubscriptionService] = None
_usage: Optional[UsageService] = None
_anonymous: Optional[AnonymousUsage] = None
_advertised_limits: dict[str, int] = {}


def initialize_service(
    service: SubscriptionService,
    usage: UsageService,
    anonymous: AnonymousUsage,
    advertised_limits: Optional[dict[str, int]] = None,
) -> SubscriptionService:
    global _service, _usage, _anonymous, _advertised_limits
    _advertised_limits = advertised_limits or {}
    _service = service
    _usage = usage
    _anonymous = anonymous
    return _service


def get_service() -> SubscriptionService:
    """Get subscription service instance"""
    if _service is None:
        raise RuntimeError("Billing service not initialized")
    return _service


def get_usage_services() -> tuple[UsageService, AnonymousUsage]:
    if _usage is None or _anonymous is None:
        raise RuntimeError("Usage service not initialized")
    return _usage, _anonymous


class CheckoutRequest(BaseModel):
    userId: Optional[str] = None
    email: Optional[str] = None


@router.post("/stripe/checkout")
def checkout(body: CheckoutRequest, origin: str = Depends(request_origin)) -> dict[str, str]:
    return {"url": get_service().create_checkout(body.userId, body.email, origin)}


@router.post("/stripe/webhook")
async def webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None),
) -> dict[str, bool]:
    """The raw body is needed for signature verification, so it is read directly."""
    service = get_service()
    event = service.verify(await request.body(), stripe_signature)
    service.handle_event(event)
    return {"received": True}


@router.get("/usage")
def usage(
    user: Optional[AuthUser] = Depends(optional_user),
    caller: str = Depends(client_id),
) -> dict[str, Any]:
    usage_service, anonymous = get_usage_services()
    if user is not None:
        stats = usage_service.get_usage_stats(user.id)
    else:
        stats = anonymous.check(caller)
    return {**stats, "limits": _advertised_limits}
