"""
Subscription Service

Stripe checkout for the paid plan and the webhook handler that mirrors
subscription state into ``quartz_subscriptions``.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional

import stripe

from quartz.clients.stripe_client import BillingClient, field, subscription_period_end
from quartz.utils.dates import utcnow
from shared.errors import APIException, ErrorCode, upstream_failure
from shared.logging.safe_logging import mask_email

from .usage import SUBSCRIPTIONS_TABLE

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(
        self,
        billing: BillingClient,
        supabase: Optional[Any],
        clock: Callable[[], datetime] = utcnow,
    ):
        self.billing = billing
        self.supabase = supabase
        self.clock = clock

    # ------------------------------------------------------------------
    # checkout
    # ------------------------------------------------------------------

    def _stored_customer_id(self, user_id: str) -> Optional[str]:
        if self.supabase is None:
            return None
        rows = (
            self.supabase.table(SUBSCRIPTIONS_TABLE)
            .select("stripe_customer_id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
            .data
            or []
        )
        return rows[0].get("stripe_customer_id") if rows else None

    def create_checkout(self, user_id: Optional[str], email: Optional[str], origin: str) -> str:
        """Return the hosted checkout URL for the subscription plan."""
        if not user_id or not email:
            raise APIException(
                error_code=ErrorCode.VALIDATION_MISSING_FIELD,
                message="User ID and email are required",
            )
        if not self.billing.price_id:
            raise APIException(
                error_code=ErrorCode.CONFIGURATION_ERROR,
                message="Stripe Price ID not configured",
            )

        try:
            customer_id = self._stored_customer_id(user_id)
            if not customer_id:
                customer_id = self.billing.create_customer(email, user_id)
                if self.supabase is not None:
                    self.supabase.table(SUBSCRIPTIONS_TABLE).upsert(
                        {"user_id": user_id, "stripe_customer_id": customer_id, "status": "inactive"},
                        on_conflict="user_id",
                    ).execute()
            url = self.billing.create_checkout_session(customer_id, user_id, origin)
        except Exception as exc:
            logger.error("[CHECKOUT] failed for %s: %s", mask_email(email), exc, exc_info=True)
            raise upstream_failure("Failed to create checkout session") from exc

        logger.info("[CHECKOUT] session created user=%s customer=%s", user_id, customer_id)
        return url

    # ------------------------------------------------------------------
    # webhooks
    # ------------------------------------------------------------------

    def verify(self, payload: bytes, signature: Optional[str]) -> Any:
        if not signature:
            raise APIException(
                error_code=ErrorCode.VALIDATION_MISSING_FIELD,
                message="Missing stripe-signature header",
            )
        try:
            return self.billing.construct_event(payload, signature)
        except (stripe.SignatureVerificationError, ValueError) as exc:
            logger.warning("[WEBHOOK] signature verification failed: %s", exc)
            raise APIException(
                error_code=ErrorCode.PAYMENT_SIGNATURE_INVALID,
                message="Invalid signature",
            ) from exc

    def handle_event(self, event: Any) -> None:
        event_type = field(event, "type")
        obj = field(field(event, "data"), "object")
        logger.info("[WEBHOOK] event=%s", event_type)

        try:
            if event_type == "checkout.session.completed":
                self._checkout_completed(obj)
            elif event_type == "customer.subscription.updated":
                status = field(obj, "status")
                self._update_by_customer(
                    field(obj, "customer"),
                    {"status": status, "current_period_end": subscription_period_end(obj)},
                )
            elif event_type == "customer.subscription.deleted":
                self._update_by_customer(field(obj, "customer"), {"status": "canceled"})
            elif event_type == "invoice.payment_failed":
                self._update_by_customer(field(obj, "customer"), {"status": "past_due"})
        except Exception as exc:
            logger.error("[WEBHOOK] handler failed event=%s: %s", event_type, exc, exc_info=True)
            raise upstream_failure("Webhook handler failed") from exc

    def _checkout_completed(self, session: Any) -> None:
        user_id = field(field(session, "metadata"), "supabase_user_id")
        subscription_id = field(session, "subscription")
        if not user_id or not subscription_id:
            return
        subscription = self.billing.retrieve_subscription(subscription_id)
        self.supabase.table(SUBSCRIPTIONS_TABLE).upsert(
            {
                "user_id": user_id,
                "stripe_customer_id": field(session, "customer"),
                "stripe_subscription_id": subscription_id,
                "status": "active",
                "current_period_end": subscription_period_end(subscription),
                "updated_at": self.clock().isoformat(),
            },
            on_conflict="user_id",
        ).execute()
        logger.info("[WEBHOOK] subscription active user=%s", user_id)

    def _update_by_customer(self, customer_id: Optional[str], changes: dict[str, Any]) -> None:
        if not customer_id:
            return
        rows = (
            self.supabase.table(SUBSCRIPTIONS_TABLE)
            .select("user_id")
            .eq("stripe_customer_id", customer_id)
            .limit(1)
            .execute()
            .data
            or []
        )
        if not rows:
            logger.info("[WEBHOOK] no subscription row for customer=%s", customer_id)
            return
        user_id = rows[0]["user_id"]
        self.supabase.table(SUBSCRIPTIONS_TABLE).update(
            {**changes, "updated_at": self.clock().isoformat()}
        ).eq("user_id", user_id).execute()
        logger.info("[WEBHOOK] user=%s status=%s", user_id, changes.get("status"))
