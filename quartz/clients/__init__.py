"""
Provider clients: OpenAI (text, speech, transcription), ElevenLabs,
Supabase and Stripe.
"""

from .elevenlabs import ElevenLabsClient
from .openai_client import MODEL_OPTIONS, LLMClient, ModelOption
from .speech import SpeechSynthesizer
from .stripe_client import BillingClient
from .supabase_client import (
    AuthService,
    AuthSession,
    AuthUser,
    bearer_token,
    create_session_client_factory,
    create_supabase_client,
)

__all__ = [
    "AuthService",
    "AuthSession",
    "AuthUser",
    "BillingClient",
    "ElevenLabsClient",
    "LLMClient",
    "MODEL_OPTIONS",
    "ModelOption",
    "SpeechSynthesizer",
    "bearer_token",
    "create_session_client_factory",
    "create_supabase_client",
]
