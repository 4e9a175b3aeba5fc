# foodorder/services/token_service.py
from datetime import datetime, timedelta, timezone

import jwt

from foodorder.domain.errors import TokenInvalid
from foodorder.utils.settings import JWT_SECRET, TOKEN_TTL_SECONDS

ALGORITHM = "HS256"


def create_access_token(user_id: str, ttl_seconds: int = TOKEN_TTL_SECONDS, secret: str | None = None) -> str:
    """Sign a token for ``user_id``. Real logins live in the auth service; this is used for seeding and tests."""
    payload = {
        "id": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret or JWT_SECRET, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str | None = None) -> str:
    """Return the user id bound to ``token`` or raise TokenInvalid."""
    try:
        payload = jwt.decode(
            token,
            secret or JWT_SECRET,
            algorithms=[ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError as e:
        raise TokenInvalid(str(e)) from e

    user_id = payload.get("id")
    if not user_id:
        raise TokenInvalid("Token carries no user id")
    return str(user_id)
