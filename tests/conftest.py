"""
Quartz Test Fixtures
Shared fixtures for all test modules.
"""
import sys
from pathlib import Path

import pytest

# Project root for 'quartz.*' and 'shared.*' imports without an install
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from fakes import FakeLLM, FakeSupabase  # noqa: E402

from quartz.config import Settings  # noqa: E402
from quartz.storage.content_cache import ContentCache  # noqa: E402
from shared.storage.cache import CacheConfig, CacheLayer, reset_cache  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        STRUCTURED_LOGGING=False,
        OPENAI_API_KEY="sk-test",
        SUPABASE_URL="https://project.supabase.test",
        SUPABASE_SERVICE_ROLE_KEY="service-role",
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_PRICE_ID="price_123",
        STRIPE_WEBHOOK_SECRET="whsec_test",
        REDIS_ENABLED=False,
    )


@pytest.fixture
def hot_cache() -> CacheLayer:
    return CacheLayer(CacheConfig(enabled=False))


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def content_cache(supabase, hot_cache) -> ContentCache:
    return ContentCache(supabase, hot_cache, model_version="gpt-5.2")


@pytest.fixture(autouse=True)
def _reset_cache_singleton():
    yield
    reset_cache()
