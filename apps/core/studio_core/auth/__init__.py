"""Sign-in delegated to an external OpenID Connect provider."""

from studio_core.auth.oidc import AuthError, OIDCClient
from studio_core.auth.users import get_user, upsert_user

__all__ = ["AuthError", "OIDCClient", "get_user", "upsert_user"]
