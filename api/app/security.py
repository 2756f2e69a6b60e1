"""Bearer token handling (HS256 JWT)."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.exceptions import AuthError

JWT_ALGORITHM = "HS256"


def get_bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an Authorization header value.

    Raises:
        AuthError: If the header is missing or not a bearer credential
    """
    if not authorization:
        raise AuthError("Couldn't find JWT")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Malformed authorization header")
    return token.strip()


def create_access_token(
    user_id: uuid.UUID, secret: str, issuer: str, expires_in: timedelta
) -> str:
    """Mint an access token whose subject is the user's ID."""
    now = datetime.now(timezone.utc)
    claims = {
        "iss": issuer,
        "iat": now,
        "exp": now + expires_in,
        "sub": str(user_id),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def validate_access_token(token: str, secret: str, issuer: str) -> uuid.UUID:
    """Verify a token and return the user ID it was issued to.

    Raises:
        AuthError: If the signature, expiry, issuer or subject is invalid
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM], issuer=issuer)
    except JWTError as e:
        raise AuthError(f"Couldn't validate JWT: {e}") from e

    try:
        return uuid.UUID(str(claims.get("sub")))
    except ValueError as e:
        raise AuthError("Invalid token subject") from e
