"""FastAPI application."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from studio_api.deps import close_deps, init_deps
from studio_api.routers import auth, content, fetch_url, health, history
from studio_core.config.settings import get_settings
from studio_core.llm.errors import ContentGenerationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_deps()
    yield
    await close_deps()


settings = get_settings()

app = FastAPI(
    title="Content Studio API",
    description="Repurpose text, images and web pages into social media posts",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="studio_session",
    max_age=settings.session_max_age,
    same_site="lax",
)


@app.exception_handler(ContentGenerationError)
async def content_generation_error(request: Request, exc: ContentGenerationError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": f"Failed to generate content. {exc}"})


app.include_router(health.router)
app.include_router(health.router, prefix="/api")
app.include_router(fetch_url.router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(content.router, prefix="/api")
app.include_router(history.router, prefix="/api")

# Serve the built client bundle when present
_static_path = Path(settings.static_dir)
if _static_path.is_dir():
    app.mount("/", StaticFiles(directory=str(_static_path), html=True), name="static")
