"""
Credential handling: salted password hashes and signed bearer tokens.

The token issuer is built once from settings at startup and stored on
`app.state`; request handlers receive it through `get_token_issuer` instead of
reading the signing secret themselves.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from productos_api.config.settings import Settings
from productos_api.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# =====================================================================================================================
# Passwords
# =====================================================================================================================

def hash_password(password: str) -> str:
    """
    Return a salted bcrypt hash of `password`.

    Raises:
        ValueError: if the password is longer than bcrypt's 72-byte input limit.
    """
    raw = password.encode("utf-8")
    if len(raw) > 72:
        raise ValueError("Password must be at most 72 bytes long")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long candidate: not a match.
        return False


# =====================================================================================================================
# Bearer tokens
# =====================================================================================================================

@dataclass(frozen=True)
class TokenIssuer:
    """
    Issues and verifies HS-signed JWTs.

    Claims: `sub` (user id), `email`, `jti` (unique token id), `iat`, `exp`,
    `iss` and `aud`. `decode` checks signature, expiry, issuer and audience.
    """

    secret: str
    issuer: str
    audience: str
    expire_minutes: int
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret=settings.JWT_SECRET_KEY.get_secret_value(),
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
            algorithm=settings.JWT_ALGORITHM,
        )

    def issue(self, user) -> str:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
            "iss": self.issuer,
            "aud": self.audience,
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        logger.debug("auth.token.issued", extra={"user_id": user.id, "jti": payload["jti"]})
        return token

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub", "iss", "aud"]},
            )
        except jwt.ExpiredSignatureError as exc:
            logger.info("auth.token.expired")
            raise UnauthorizedError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            logger.info("auth.token.invalid", extra={"reason": type(exc).__name__})
            raise UnauthorizedError("Invalid token") from exc


# =====================================================================================================================
# FastAPI dependencies
# =====================================================================================================================

def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> dict[str, Any]:
    """Return the verified claims of the request's bearer token, or fail with 401."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    return issuer.decode(credentials.credentials)
