"""Minimal OpenID Connect authorization-code client over aiohttp."""

import logging
from typing import Any, Optional, Self
from urllib.parse import urlencode

import aiohttp

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """The identity provider rejected or failed a request."""


class OIDCClient:
    """Authorization-code flow against a provider with a discovery document.

    Usage:
        async with OIDCClient(issuer, client_id, secret, redirect_url) as oidc:
            url = await oidc.authorization_url(state)
            ...
            tokens = await oidc.exchange_code(code)
            claims = await oidc.fetch_userinfo(tokens["access_token"])
    """

    def __init__(
        self,
        issuer: str,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        scopes: str = "openid email profile",
        *,
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.issuer = issuer.rstrip("/")
        self.client_id = client_id
        self._client_secret = client_secret
        self.redirect_url = redirect_url
        self.scopes = scopes
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._metadata: dict[str, Any] | None = None

    @property
    def configured(self) -> bool:
        return bool(self.issuer and self.client_id)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session and self._owns_session:
            await self._session.close()
            self._session = None

    async def _json(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._get_session().request(method, url, **kwargs) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise AuthError(f"{method} {url} failed: HTTP {resp.status} {body[:200]}")
                return await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            raise AuthError(f"{method} {url} failed: {e}") from e

    async def discover(self) -> dict[str, Any]:
        """Fetch (once) and return the provider's discovery document."""
        if not self.configured:
            raise AuthError("OIDC provider is not configured")
        if self._metadata is None:
            url = f"{self.issuer}/.well-known/openid-configuration"
            self._metadata = await self._json("GET", url)
            logger.info("Loaded OIDC discovery document from %s", url)
        return self._metadata

    async def _endpoint(self, name: str) -> str:
        metadata = await self.discover()
        endpoint = metadata.get(name)
        if not endpoint:
            raise AuthError(f"Provider does not advertise {name}")
        return endpoint

    async def authorization_url(self, state: str) -> str:
        """Provider sign-in URL.

        Claims are read from the userinfo endpoint with the access token from
        the back-channel code exchange; no ID token is consumed, so no nonce
        is sent.
        """
        endpoint = await self._endpoint("authorization_endpoint")
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_url,
            "scope": self.scopes,
            "state": state,
            "prompt": "login consent",
        }
        return f"{endpoint}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> dict[str, Any]:
        endpoint = await self._endpoint("token_endpoint")
        tokens = await self._json(
            "POST",
            endpoint,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_url,
                "client_id": self.client_id,
                "client_secret": self._client_secret,
            },
        )
        if "access_token" not in tokens:
            raise AuthError("Token response has no access_token")
        return tokens

    async def fetch_userinfo(self, access_token: str) -> dict[str, Any]:
        endpoint = await self._endpoint("userinfo_endpoint")
        claims = await self._json(
            "GET", endpoint, headers={"Authorization": f"Bearer {access_token}"}
        )
        if not claims.get("sub"):
            raise AuthError("Userinfo response has no subject")
        return claims

    async def end_session_url(self, post_logout_redirect: str) -> str | None:
        """Provider logout URL, or None if the provider has no end-session endpoint."""
        metadata = await self.discover()
        endpoint = metadata.get("end_session_endpoint")
        if not endpoint:
            return None
        params = {
            "client_id": self.client_id,
            "post_logout_redirect_uri": post_logout_redirect,
        }
        return f"{endpoint}?{urlencode(params)}"
