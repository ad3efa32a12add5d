"""Thin Stripe wrapper: customers, subscription checkout and webhook verification."""

import logging
from datetime import UTC, datetime
from typing import Any, Optional

import stripe

from shared.logging.safe_logging import mask_email, token_presence

logger = logging.getLogger(__name__)


def field(obj: Any, name: str) -> Any:
    """Read a key from a StripeObject or plain dict, None when absent."""
    if obj is None:
        return None
    try:
        return obj[name]
    except (KeyError, TypeError):
        return None


def subscription_period_end(subscription: Any) -> Optional[str]:
    """ISO timestamp of the current billing period end.

    Newer API versions carry the period on the subscription items rather
    than the subscription itself.
    """
    ts = field(subscription, "current_period_end")
    if ts is None:
        items = field(field(subscription, "items"), "data") or []
        ts = field(items[0], "current_period_end") if items else None
    if ts is None:
        return None
    return datetime.fromtimestamp(int(ts), tz=UTC).isoformat()


class BillingClient:
    """Stripe calls used by checkout and the webhook handler."""

    def __init__(self, secret_key: str, price_id: str = "", webhook_secret: str = ""):
        self.price_id = price_id
        self.webhook_secret = webhook_secret
        stripe.api_key = secret_key or None
        logger.info(
            "Stripe client ready %s %s price_id=%s",
            token_presence("secret_key", secret_key),
            token_presence("webhook_secret", webhook_secret),
            price_id or "<unset>",
        )

    def create_customer(self, email: str, user_id: str) -> str:
        customer = stripe.Customer.create(email=email, metadata={"supabase_user_id": user_id})
        logger.info("[STRIPE] created customer=%s for %s", customer["id"], mask_email(email))
        return customer["id"]

    def create_checkout_session(self, customer_id: str, user_id: str, origin: str) -> str:
        session = stripe.checkout.Session.create(
            customer=customer_id,
            payment_method_types=["card", "link"],
            line_items=[{"price": self.price_id, "quantity": 1}],
            mode="subscription",
            success_url=f"{origin}?success=true",
            cancel_url=f"{origin}?canceled=true",
            metadata={"supabase_user_id": user_id},
        )
        return session["url"]

    def retrieve_subscription(self, subscription_id: str) -> Any:
        return stripe.Subscription.retrieve(subscription_id)

    def construct_event(self, payload: bytes, signature: str) -> Any:
        """Verify the signature header; raises ``stripe.SignatureVerificationError`` or ValueError."""
        return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
