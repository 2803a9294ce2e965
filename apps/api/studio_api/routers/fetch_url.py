"""URL content endpoint — server-side fetch + main-content extraction.

Every response, success or failure, carries `title` and `content` so the
client can render the URL card without special-casing errors.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from studio_api.deps import get_url_fetcher
from studio_core.extraction.errors import UrlFetchError, UrlValidationError
from studio_core.extraction.fetcher import UrlFetcher

logger = logging.getLogger(__name__)
router = APIRouter(tags=["fetch-url"])


class FetchUrlRequest(BaseModel):
    url: str | None = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "title": "", "content": ""},
    )


@router.post("/fetch-url")
async def fetch_url(
    body: FetchUrlRequest,
    fetcher: UrlFetcher = Depends(get_url_fetcher),
):
    """Fetch a public web page and return its title and main text."""
    if not body.url or not body.url.strip():
        return _error(400, "URL is required")

    try:
        page = await fetcher.fetch(body.url)
    except UrlValidationError as e:
        logger.info("Rejected URL %r: %s", body.url, e)
        return _error(400, f"Invalid URL: {e}")
    except UrlFetchError as e:
        logger.error("Error fetching URL %s: %s", body.url, e)
        return _error(500, f"Failed to fetch content: {e}")

    return {"title": page.title, "content": page.content}
