"""Usage limits, subscriptions and Stripe billing."""

from .subscriptions import SubscriptionService
from .usage import AnonymousUsage, UsageLimitExceeded, UsageResult, UsageService

__all__ = ["AnonymousUsage", "SubscriptionService", "UsageLimitExceeded", "UsageResult", "UsageService"]
