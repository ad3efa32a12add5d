"""
Quartz - AI Encyclopedia API
============================
FastAPI application: configuration, logging, provider clients, routers and
error handlers. Provider clients are created in the lifespan hook and handed
to each router's ``initialize_service``.

Run with:
    uvicorn quartz.main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quartz import __version__, sitemap
from quartz.clients import (
    AuthService,
    BillingClient,
    ElevenLabsClient,
    LLMClient,
    SpeechSynthesizer,
    create_session_client_factory,
    create_supabase_client,
)
from quartz.config import Settings, get_settings
from quartz.navigation import routes as navigation_routes
from quartz.services.articles import routes as article_routes
from quartz.services.articles.service import ArticleService
from quartz.services.audio import routes as audio_routes
from quartz.services.audio.podcast import PodcastService
from quartz.services.audio.service import AudioService
from quartz.services.auth import routes as auth_routes
from quartz.services.billing import routes as billing_routes
from quartz.services.billing.subscriptions import SubscriptionService
from quartz.services.billing.usage import AnonymousUsage, UsageService
from quartz.services.chat import routes as chat_routes
from quartz.services.chat.service import ChatService
from quartz.services.media import routes as media_routes
from quartz.services.media.service import MediaService
from quartz.services.quiz import routes as quiz_routes
from quartz.services.quiz.service import QuizService
from quartz.services.simplify import routes as simplify_routes
from quartz.services.simplify.service import SimplifyService
from quartz.services.speech import routes as speech_routes
from quartz.services.speech.service import TranscriptionService
from quartz.storage.content_cache import ContentCache
from shared.errors import APIException, ErrorCode
from shared.health import HealthChecker, HealthResponse
from shared.logging.safe_logging import token_presence
from shared.logging.structured import setup_structured_logging
from shared.storage.cache import CacheConfig, CacheLayer, get_cache, reset_cache

logger = logging.getLogger(__name__)


@dataclass
class Providers:
    """External clients shared by every service."""

    llm: LLMClient
    supabase: Optional[Any]
    cache: CacheLayer
    billing: BillingClient
    elevenlabs: Optional[ElevenLabsClient] = None
    auth_client_factory: Optional[Callable[[], Any]] = None


def create_providers(settings: Settings) -> Providers:
    cache = get_cache(
        CacheConfig(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            password=settings.REDIS_PASSWORD,
            enabled=settings.REDIS_ENABLED,
        )
    )
    elevenlabs = None
    if settings.TTS_PROVIDER == "elevenlabs":
        elevenlabs = ElevenLabsClient(settings.ELEVENLABS_API_KEY, settings.ELEVENLABS_API_URL)
    return Providers(
        llm=LLMClient(
            settings.OPENAI_API_KEY,
            model_key=settings.AI_MODEL,
            reasoning_effort=settings.AI_REASONING_EFFORT,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
        ),
        supabase=create_supabase_client(settings),
        cache=cache,
        billing=BillingClient(
            settings.STRIPE_SECRET_KEY,
            price_id=settings.STRIPE_PRICE_ID,
            webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        ),
        elevenlabs=elevenlabs,
        auth_client_factory=create_session_client_factory(settings),
    )


def initialize_services(settings: Settings, providers: Providers) -> None:
    """Build every service from the providers and hand it to its router."""
    content_cache = ContentCache(
        providers.supabase,
        providers.cache,
        settings.model_version,
        ttl_days=settings.CACHE_TTL_DAYS,
        audio_bucket=settings.AUDIO_BUCKET,
    )
    usage = UsageService(providers.supabase, free_daily_limit=settings.FREE_DAILY_LIMIT)
    anonymous = AnonymousUsage(providers.cache, limit=settings.ANON_DAILY_LIMIT)
    speech = SpeechSynthesizer(providers.llm, settings.TTS_PROVIDER, providers.elevenlabs)

    auth_routes.initialize_service(AuthService(providers.supabase, providers.auth_client_factory))
    article_routes.initialize_service(
        ArticleService(
            providers.llm,
            content_cache,
            usage,
            anonymous,
            enforce_limits=not settings.is_development,
            site_url=settings.SITE_URL,
        )
    )
    simplify_routes.initialize_service(SimplifyService(providers.llm, content_cache))
    audio_routes.initialize_service(
        AudioService(speech, content_cache),
        PodcastService(providers.llm, speech, content_cache),
    )
    quiz_routes.initialize_service(QuizService(providers.llm, content_cache))
    chat_routes.initialize_service(ChatService(providers.llm))
    speech_routes.initialize_service(TranscriptionService(providers.llm))
    media_routes.initialize_service(MediaService(providers.llm))
    billing_routes.initialize_service(
        SubscriptionService(providers.billing, providers.supabase),
        usage,
        anonymous,
        advertised_limits={
            "anonymous": settings.ANON_DAILY_LIMIT,
            "loggedIn": settings.LOGGED_IN_DAILY_LIMIT,
        },
    )
    navigation_routes.initialize_service(providers.cache)
    sitemap.initialize_service(settings.SITE_URL)


def build_health_checker(settings: Settings, cache_provider: Any = None) -> HealthChecker:
    checker = HealthChecker(settings.SERVICE_NAME, __version__)

    async def openai_check() -> tuple[bool, str]:
        return bool(settings.OPENAI_API_KEY), token_presence("api_key", settings.OPENAI_API_KEY)

    async def supabase_check() -> tuple[bool, str]:
        return settings.supabase_configured, f"url={'set' if settings.SUPABASE_URL else 'unset'}"

    async def cache_check() -> tuple[bool, str]:
        cache = cache_provider() if cache_provider else get_cache()
        return cache.ping(), f"backend={cache.backend}"

    checker.register_check("openai", openai_check)
    checker.register_check("supabase", supabase_check)
    checker.register_check("cache", cache_check)
    return checker


def create_app(settings: Optional[Settings] = None, providers: Optional[Providers] = None) -> FastAPI:
    """
    Application factory.

    ``providers`` skips client construction (tests pass fakes); without it
    the clients are created from ``settings`` at startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.STRUCTURED_LOGGING:
            setup_structured_logging(settings.SERVICE_NAME, settings.LOG_LEVEL)
        else:
            logging.basicConfig(
                level=settings.LOG_LEVEL,
                format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            )
        logger.info("Starting Quartz %s (environment=%s model=%s)", __version__, settings.ENVIRONMENT, settings.AI_MODEL)

        active = providers or create_providers(settings)
        initialize_services(settings, active)
        app.state.providers = active
        logger.info("Quartz services initialized (cache backend=%s)", active.cache.backend)

        yield

        if providers is None:
            await active.llm.close()
            if active.elevenlabs is not None:
                await active.elevenlabs.close()
            reset_cache()
        logger.info("Quartz shutdown complete")

    app = FastAPI(title="Quartz", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("[%s] %s %s", exc.error.error_code, request.url.path, exc.error.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = APIException(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Invalid request body",
            details={"errors": [e.get("msg") for e in exc.errors()]},
        )
        return JSONResponse(status_code=400, content=error.to_response())

    health = build_health_checker(settings, lambda: app.state.providers.cache)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        return await health.check_health()

    app.include_router(auth_routes.router)
    app.include_router(article_routes.router)
    app.include_router(simplify_routes.router)
    app.include_router(audio_routes.router)
    app.include_router(quiz_routes.router)
    app.include_router(chat_routes.router)
    app.include_router(speech_routes.router)
    app.include_router(media_routes.router)
    app.include_router(billing_routes.router)
    app.include_router(navigation_routes.router)
    app.include_router(sitemap.router)

    return app


app = create_app()
