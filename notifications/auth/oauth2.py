"""OAuth2 authentication backend for Django REST Framework.

Supports two validation modes:
1. Token Introspection: Validates tokens by calling the auth service
2. Local JWT Validation: Validates JWT signatures locally using shared secret
"""

from typing import Any, cast

from django.conf import settings
from django.core.cache import cache

import jwt
import requests
import structlog
from rest_framework import authentication, exceptions

logger = structlog.get_logger(__name__)


class OAuth2User:
    """Caller identity built from token claims.

    This is not a Django User model. ``user_id`` is the opaque portal
    identity that owns notifications and preferences.
    """

    def __init__(self, user_id: str, client_id: str, scopes: list[str]):
        self.id = user_id
        self.user_id = user_id
        self.client_id = client_id
        self.scopes = scopes
        self.is_authenticated = True

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    def __str__(self):
        return f"OAuth2User(user_id={self.user_id}, client_id={self.client_id})"


class OAuth2Authentication(authentication.BaseAuthentication):
    """OAuth2 Bearer token authentication.

    Extracts and validates Bearer tokens from Authorization header.
    Supports both introspection and local JWT validation.
    """

    def authenticate(self, request):
        """Authenticate the request using OAuth2 Bearer token.

        Args:
            request: Django request object

        Returns:
            Tuple of (user, auth) or None if authentication not attempted

        Raises:
            AuthenticationFailed: If authentication fails
        """
        if not settings.OAUTH2_SERVICE_ENABLED:
            return None

        auth_header = request.headers.get("authorization")
        if not auth_header:
            return None

        parts = auth_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise exceptions.AuthenticationFailed("Invalid authorization header format")

        token = parts[1]

        if settings.OAUTH2_INTROSPECTION_ENABLED:
            token_data = self._validate_via_introspection(token)
        else:
            token_data = self._validate_via_jwt(token)

        scopes = token_data.get("scopes") or token_data.get("scope", [])
        if isinstance(scopes, str):
            scopes = scopes.split()

        user = OAuth2User(
            user_id=token_data.get("sub") or token_data.get("client_id", "unknown"),
            client_id=token_data.get("client_id", "unknown"),
            scopes=list(scopes),
        )
        return (user, token)

    def _validate_via_introspection(self, token: str) -> dict[str, Any]:
        """Validate token via the auth service introspection endpoint.

        Results are cached for OAUTH2_TOKEN_CACHE_TTL seconds.

        Raises:
            AuthenticationFailed: If token is invalid or the endpoint is down
        """
        cache_key = f"{settings.OAUTH2_TOKEN_CACHE_PREFIX}{token[:16]}"
        cached_data = cache.get(cache_key)
        if cached_data:
            return cast("dict[str, Any]", cached_data)

        try:
            response = requests.post(
                settings.OAUTH2_INTROSPECT_URL,
                data={
                    "token": token,
                    "token_type_hint": "access_token",
                },
                auth=(settings.OAUTH2_CLIENT_ID, settings.OAUTH2_CLIENT_SECRET),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=5,
            )
        except requests.RequestException as e:
            logger.error("token_introspection_unavailable", error=str(e))
            raise exceptions.AuthenticationFailed(
                "Token validation service unavailable"
            ) from e

        if response.status_code != 200:
            logger.warning(
                "token_introspection_failed", status_code=response.status_code
            )
            raise exceptions.AuthenticationFailed("Token introspection failed")

        data = response.json()
        if not data.get("active", False):
            raise exceptions.AuthenticationFailed("Token is not active")

        cache.set(cache_key, data, timeout=settings.OAUTH2_TOKEN_CACHE_TTL)
        return cast("dict[str, Any]", data)

    def _validate_via_jwt(self, token: str) -> dict[str, Any]:
        """Validate token locally by verifying its JWT signature.

        Raises:
            AuthenticationFailed: If token is invalid
        """
        if not settings.JWT_SECRET:
            logger.error("jwt_secret_missing")
            raise exceptions.AuthenticationFailed("JWT validation not configured")

        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=["HS256", "HS384", "HS512"],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_iat": True,
                    "verify_nbf": True,
                },
            )
        except jwt.ExpiredSignatureError as e:
            raise exceptions.AuthenticationFailed("Token has expired") from e
        except jwt.InvalidTokenError as e:
            logger.warning("jwt_invalid", error=str(e))
            raise exceptions.AuthenticationFailed("Invalid token") from e

        token_type = payload.get("type")
        if token_type != "access_token":
            logger.warning("jwt_wrong_type", token_type=token_type)
            raise exceptions.AuthenticationFailed(f"Invalid token type: {token_type}")

        return {
            "active": True,
            "sub": payload.get("sub"),
            "client_id": payload.get("client_id"),
            "scopes": payload.get("scopes", []),
        }

    def authenticate_header(self, _request):
        return "Bearer"
