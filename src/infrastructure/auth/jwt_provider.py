"""JWT authentication provider implementation.

Accepts Supabase-issued JWTs (ES256 via JWKS) and locally-created tokens
(HS256, used by tests and local tooling).

Supabase JWT payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "app_metadata": { "role": "admin" },
        "user_metadata": { "username": "jane" },
        "exp": 1234567890
    }

The top-level ``role`` claim is the database role, not the account type.
The account type (creator/admin) is read from ``app_metadata.role`` first,
then ``user_metadata.role``, and defaults to creator.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from domain.entities.profile import UserRole
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# kid -> JWK, fetched once and refreshed on an unknown kid
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache JWKS keys from Supabase."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            keys = response.json().get("keys", [])
    except (httpx.HTTPError, ValueError):
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {key["kid"]: key for key in keys if key.get("kid")}
    logger.info("Fetched %d JWKS keys from Supabase", len(_jwks_cache))
    return _jwks_cache


def _parse_role(payload: dict[str, Any]) -> UserRole:
    """Account type from the token metadata; unknown values mean creator."""
    for source in ("app_metadata", "user_metadata"):
        value = (payload.get(source) or {}).get("role")
        if value in list(UserRole):
            return UserRole(value)
    return UserRole.CREATOR


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the principal.

        The signing algorithm is taken from the token header:
        - ES256 (Supabase): verified against the JWKS public key
        - anything else: verified with the shared secret

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None
        try:
            principal_id = UUID(user_id)
        except ValueError:
            return None

        user_metadata = payload.get("user_metadata") or {}
        username = (
            user_metadata.get("username")
            or user_metadata.get("display_name")
            or user_metadata.get("name")
        )

        return TokenUser(
            id=principal_id,
            email=payload.get("email") or "",
            username=username,
            role=_parse_role(payload),
        )

    async def _validate_es256(self, token: str, header: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Validate an ES256-signed JWT using JWKS public keys."""
        global _jwks_cache

        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            # Unknown kid: the keys may have rotated
            _jwks_cache = None
            key_data = (await _get_jwks_keys()).get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        ec_key = ECKey(key_data, algorithm="ES256")
        return jwt.decode(  # type: ignore[no-any-return]
            token,
            ec_key,
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 token for a principal (tests and local tooling)."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": "authenticated",
            "exp": expire,
            "app_metadata": {"role": user.role.value},
            "user_metadata": {"username": user.username},
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
