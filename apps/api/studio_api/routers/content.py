"""Content generation API — analysis, hashtags, trends, share previews."""

import json
import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from studio_api.deps import get_generator, get_redis, require_user
from studio_core.composer.state import submission_error
from studio_core.config.settings import get_settings
from studio_core.llm.client import ContentGenerator
from studio_core.models.content import GeneratedContent
from studio_core.models.inputs import Style, analysis_request_adapter
from studio_core.models.user import User
from studio_core.share import format_post, share_url

logger = logging.getLogger(__name__)
router = APIRouter(tags=["content"])

TRENDS_CACHE_KEY = "trends:latest"


# ── Request models ──────────────────────────────────


class SharePreviewRequest(BaseModel):
    content: GeneratedContent
    style: Style = Style.LINKEDIN


# ── Endpoints ───────────────────────────────────────


@router.post("/generate")
async def generate(
    payload: dict = Body(...),
    with_hashtags: bool = True,
    user: User = Depends(require_user),
    generator: ContentGenerator = Depends(get_generator),
):
    """Analyze text, images or fetched URLs into a social post."""
    try:
        body = analysis_request_adapter.validate_python(payload)
    except ValidationError as e:
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid analysis request", "detail": json.loads(e.json(include_url=False))},
        )

    reason = submission_error(body)
    if reason:
        return JSONResponse(status_code=400, content={"error": reason})

    logger.info("Generate request from %s: type=%s style=%s", user.id, body.type, body.style.value)
    content = await generator.repurpose(body, with_hashtags=with_hashtags)
    return content.to_json_dict()


@router.post("/hashtags")
async def hashtags(
    content: GeneratedContent,
    user: User = Depends(require_user),
    generator: ContentGenerator = Depends(get_generator),
) -> dict:
    return {"hashtags": await generator.generate_hashtags(content)}


@router.get("/trends")
async def trends(
    refresh: bool = False,
    user: User = Depends(require_user),
    redis: aioredis.Redis = Depends(get_redis),
    generator: ContentGenerator = Depends(get_generator),
) -> dict:
    """Trending topics for the "What's happening" panel, cached in Redis."""
    if not refresh:
        cached = await redis.get(TRENDS_CACHE_KEY)
        if cached:
            return {"trends": json.loads(cached), "cached": True}

    topics = await generator.trending_topics()
    payload = [t.to_json_dict() for t in topics]
    await redis.set(TRENDS_CACHE_KEY, json.dumps(payload), ex=get_settings().trends_cache_ttl)
    return {"trends": payload, "cached": False}


@router.post("/share/preview")
async def share_preview(body: SharePreviewRequest) -> dict:
    text = format_post(body.content, body.style)
    return {
        "style": body.style.value,
        "text": text,
        "shareUrl": share_url(body.style, text),
    }
