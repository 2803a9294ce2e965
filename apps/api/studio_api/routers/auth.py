"""Sign-in endpoints delegated to the OpenID Connect provider.

Session cookie keys:
  oidc_state → set by /login, consumed by /callback
  user_id                 → set by /callback, cleared by /logout
"""

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studio_api.deps import (
    SESSION_USER_KEY,
    get_oidc,
    get_session_factory,
    require_user,
)
from studio_core.auth.oidc import AuthError, OIDCClient
from studio_core.auth.users import upsert_user
from studio_core.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.get("/login")
async def login(request: Request, oidc: OIDCClient = Depends(get_oidc)) -> RedirectResponse:
    if not oidc.configured:
        raise HTTPException(status_code=503, detail="Sign-in is not configured")
    state = secrets.token_urlsafe(24)
    request.session["oidc_state"] = state
    try:
        url = await oidc.authorization_url(state)
    except AuthError as e:
        logger.error("Could not start sign-in: %s", e)
        raise HTTPException(status_code=502, detail="Identity provider unavailable") from e
    return RedirectResponse(url, status_code=302)


@router.get("/callback")
async def callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    oidc: OIDCClient = Depends(get_oidc),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> RedirectResponse:
    expected_state = request.session.pop("oidc_state", None)

    if error:
        raise HTTPException(status_code=400, detail=f"Sign-in failed: {error}")
    if not code or not state or not expected_state or not secrets.compare_digest(state, expected_state):
        raise HTTPException(status_code=400, detail="Invalid sign-in state")

    try:
        tokens = await oidc.exchange_code(code)
        claims = await oidc.fetch_userinfo(tokens["access_token"])
    except AuthError as e:
        logger.error("Sign-in callback failed: %s", e)
        raise HTTPException(status_code=502, detail="Identity provider error") from e

    user = await upsert_user(session_factory, claims)
    request.session[SESSION_USER_KEY] = user.id
    logger.info("User %s signed in", user.id)
    return RedirectResponse("/", status_code=302)


@router.get("/logout")
async def logout(request: Request, oidc: OIDCClient = Depends(get_oidc)) -> RedirectResponse:
    request.session.clear()
    target = "/"
    if oidc.configured:
        post_logout = str(request.base_url)
        try:
            target = await oidc.end_session_url(post_logout) or "/"
        except AuthError:
            logger.warning("Provider logout unavailable, signing out locally", exc_info=True)
    return RedirectResponse(target, status_code=302)


@router.get("/auth/user")
async def current_user(user: User = Depends(require_user)) -> dict:
    return user.to_json_dict()
