"""
Supabase JWT authentication

Resolves the bearer token of a request to the authenticated user id. Tokens
are verified against the project's JWKS (public keys), which are cached.
"""
import time
import logging
from typing import Optional
from fastapi import HTTPException, Header
from jose import jwt, jwk
import httpx

from app import config

logger = logging.getLogger(__name__)

_jwks_cache: Optional[dict] = None
_jwks_cache_time: float = 0


def _supabase_url() -> str:
    if not config.SUPABASE_URL:
        raise ValueError("SUPABASE_URL must be set")
    return config.SUPABASE_URL.rstrip("/")


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


async def get_jwks() -> dict:
    """
    Fetch the JWKS, reusing the cached copy for ``JWKS_CACHE_SECONDS``.
    A stale copy is used if refreshing fails.
    """
    global _jwks_cache, _jwks_cache_time

    now = time.time()
    if _jwks_cache and (now - _jwks_cache_time) < config.JWKS_CACHE_SECONDS:
        return _jwks_cache

    jwks_url = f"{_supabase_url()}/auth/v1/.well-known/jwks.json"
    logger.info(f"Fetching JWKS from {jwks_url}")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            _jwks_cache = response.json()
            _jwks_cache_time = now
            return _jwks_cache
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch JWKS: {e}")
        if _jwks_cache:
            logger.warning("Using expired JWKS cache due to fetch failure")
            return _jwks_cache
        raise HTTPException(status_code=500, detail="Failed to fetch authentication keys")


async def verify_token(token: str) -> dict:
    """
    Verify a Supabase access token (ES256 or RS256) and return its claims.

    Raises:
        HTTPException(401): Token is malformed, expired or not signed by the project
    """
    jwks = await get_jwks()

    try:
        header = jwt.get_unverified_header(token)
    except jwt.JWTError:
        raise _unauthenticated("Invalid token")

    kid = header.get("kid")
    if not kid:
        raise _unauthenticated("Token missing key ID (kid)")

    key_data = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
    if not key_data:
        raise _unauthenticated(f"Key with ID '{kid}' not found in JWKS")

    try:
        return jwt.decode(
            token,
            jwk.construct(key_data),
            algorithms=["ES256", "RS256"],
            audience=config.SUPABASE_JWT_AUDIENCE,
            issuer=f"{_supabase_url()}/auth/v1",
        )
    except jwt.ExpiredSignatureError:
        raise _unauthenticated("Token has expired")
    except jwt.JWTClaimsError as e:
        raise _unauthenticated(f"Token validation failed: {str(e)}")
    except jwt.JWTError as e:
        raise _unauthenticated(f"Invalid token: {str(e)}")


async def get_current_user_id(
    authorization: Optional[str] = Header(None)
) -> str:
    """
    FastAPI dependency returning the authenticated user id (``sub`` claim).

    Raises:
        HTTPException(401): Missing, malformed or invalid bearer credential
    """
    if not authorization:
        raise _unauthenticated("Authorization header missing")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise _unauthenticated("Invalid authorization header format. Expected 'Bearer <token>'")

    payload = await verify_token(token.strip())
    user_id = payload.get("sub")
    if not user_id:
        raise _unauthenticated("Invalid token: no user ID")

    return user_id
