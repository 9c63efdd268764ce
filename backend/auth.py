"""
Authentication module for session JWT and API key validation.
Provides FastAPI dependencies for securing endpoints.

Session tokens are HS256 JWTs signed with the configured session secret
(iss: "vitality", aud: "vitality-web"). The user id is the `sub` claim.
"""
import jwt
from fastapi import HTTPException, Header
from typing import Optional
import logging

from backend.settings import get_settings
from domain.services.record_validation import is_uuid

logger = logging.getLogger(__name__)

SESSION_JWT_ALGORITHM = "HS256"
SESSION_JWT_ISSUER = "vitality"
SESSION_JWT_AUDIENCE = "vitality-web"


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> str:
    """
    Authenticate via API key OR session JWT.
    Returns user_id string.

    Usage:
        @app.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    # Option 1: API Key authentication
    if x_api_key:
        return validate_api_key(x_api_key)

    # Option 2: Session JWT authentication
    if authorization:
        return validate_jwt(authorization)

    raise HTTPException(
        status_code=401,
        detail="Missing authentication. Provide Authorization header or X-API-Key."
    )


def validate_api_key(api_key: str) -> str:
    """
    Validate API key and return user_id.

    API key format: "sk_test_abc123:<user uuid>" -> returns the user uuid.
    Workouts are owned by user uuids, so a key without one is rejected.
    """
    valid_keys = get_settings().api_keys_list

    if not valid_keys:
        logger.warning("No API keys configured (API_KEYS env var empty)")
        raise HTTPException(status_code=401, detail="API key authentication not configured")

    key_part = api_key.split(":")[0]

    if key_part not in valid_keys:
        raise HTTPException(status_code=401, detail="Invalid API key")

    user_id = api_key.split(":", 1)[1] if ":" in api_key else ""
    if not is_uuid(user_id):
        raise HTTPException(status_code=401, detail="API key must include a user UUID (format: key:user_id)")

    return user_id


def validate_jwt(authorization: str) -> str:
    """Validate a `Bearer` session JWT (HS256) and return user_id."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = authorization.split(" ", 1)[1]

    try:
        payload = jwt.decode(
            token,
            get_settings().session_secret,
            algorithms=[SESSION_JWT_ALGORITHM],
            issuer=SESSION_JWT_ISSUER,
            audience=SESSION_JWT_AUDIENCE,
        )
        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(status_code=401, detail="Token missing user ID")
        if not is_uuid(user_id):
            raise HTTPException(status_code=401, detail="Token subject must be a user UUID")
        logger.debug(f"Session JWT validated for user: {user_id}")
        return user_id
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid session JWT: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")
