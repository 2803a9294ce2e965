"""Shared dependencies for API endpoints."""

import logging

import aiohttp
import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, Request
from openai import AsyncOpenAI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studio_core.auth.oidc import OIDCClient
from studio_core.auth.users import get_user
from studio_core.config.settings import get_settings
from studio_core.db.engine import get_session_factory as _get_session_factory
from studio_core.extraction.fetcher import UrlFetcher
from studio_core.history.store import HistoryStore
from studio_core.llm.client import ContentGenerator
from studio_core.models.user import User

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"

_redis: aioredis.Redis | None = None
_http: aiohttp.ClientSession | None = None
_fetch_http: aiohttp.ClientSession | None = None
_oidc: OIDCClient | None = None
_generator: ContentGenerator | None = None


async def init_deps() -> None:
    """Initialize shared dependencies (called on app startup)."""
    global _redis, _http, _fetch_http, _oidc
    settings = get_settings()
    _redis = aioredis.from_url(settings.redis_url, decode_responses=True)
    _http = aiohttp.ClientSession()
    # User-supplied URLs only go through the public-address-only connector
    _fetch_http = UrlFetcher.create_session(
        timeout=aiohttp.ClientTimeout(total=settings.url_fetch_timeout)
    )
    _oidc = OIDCClient(
        settings.oidc_issuer,
        settings.oidc_client_id,
        settings.oidc_client_secret,
        settings.oidc_redirect_url,
        settings.oidc_scopes,
        session=_http,
    )
    if not _oidc.configured:
        logger.warning("OIDC_ISSUER / OIDC_CLIENT_ID not set, sign-in is disabled")

    # Create the users table if it doesn't exist
    from studio_core.db.engine import create_tables

    await create_tables()


async def close_deps() -> None:
    """Close shared dependencies (called on app shutdown)."""
    global _redis, _http, _fetch_http, _oidc, _generator
    if _redis:
        await _redis.aclose()
    if _http:
        await _http.close()
    if _fetch_http:
        await _fetch_http.close()
    if _generator:
        await _generator.close()
    _redis = _http = _fetch_http = _oidc = _generator = None

    from studio_core.db.engine import close_engine

    await close_engine()


def get_redis() -> aioredis.Redis:
    """Get the shared Redis client."""
    assert _redis is not None, "Redis not initialized — call init_deps() first"
    return _redis


def get_history_store(redis: aioredis.Redis = Depends(get_redis)) -> HistoryStore:
    return HistoryStore(redis)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return _get_session_factory()


def get_oidc() -> OIDCClient:
    assert _oidc is not None, "OIDC client not initialized — call init_deps() first"
    return _oidc


def get_generator() -> ContentGenerator:
    """Get the shared ContentGenerator, creating the LLM client on first use."""
    global _generator
    if _generator is None:
        settings = get_settings()
        if not settings.llm_api_key:
            raise HTTPException(status_code=503, detail="LLM provider is not configured")
        llm = AsyncOpenAI(api_key=settings.llm_api_key, base_url=settings.llm_base_url)
        _generator = ContentGenerator(llm, settings.llm_model, settings.llm_fast_model)
    return _generator


def get_url_fetcher() -> UrlFetcher:
    settings = get_settings()
    return UrlFetcher(
        timeout=settings.url_fetch_timeout,
        max_chars=settings.url_content_max_chars,
        max_redirects=settings.url_max_redirects,
        session=_fetch_http,
    )


async def get_current_user(
    request: Request,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> User | None:
    """The signed-in user, or None."""
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None
    user = await get_user(session_factory, user_id)
    if user is None:
        # Stale cookie for a user that no longer exists
        request.session.pop(SESSION_USER_KEY, None)
    return user


async def require_user(user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
