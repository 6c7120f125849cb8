"""
Credential hashing, signed bearer tokens and the request guards built on them.

Guards compose as FastAPI dependencies:

    get_current_user          -> resolves the bearer token to a ``User``
    require_roles(*roles)     -> runs after ``get_current_user`` and checks the role
    get_optional_user         -> like ``get_current_user`` but allows anonymous callers
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.core.config import get_settings
from venue_booking.core.errors import (
    AuthenticationFailed,
    Forbidden,
    InvalidToken,
    TokenExpired,
    Unauthenticated,
)
from venue_booking.core.logging import get_logger
from venue_booking.core.metrics import record_auth_rejection
from venue_booking.db.session import get_db
from venue_booking.models.user import User, UserRole

logger = get_logger(__name__)

# auto_error=False: a missing header or a non-Bearer scheme yields None
bearer_scheme = HTTPBearer(auto_error=False)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def _encode_password(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(_encode_password(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_encode_password(password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class TokenVerifier:
    """
    Issues and verifies HMAC-signed JWTs.

    The signing secret is handed in at construction time and never read
    from the environment afterwards. An empty secret or the ``none``
    algorithm is refused so that unsigned tokens can never be accepted.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24 * 7):
        if not secret_key:
            raise ValueError("SECRET_KEY must be a non-empty string")
        if not algorithm or algorithm.lower() == "none":
            raise ValueError("Unsigned tokens are not supported")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def create_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode["exp"] = expire
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """Verify signature and expiry. Raises InvalidToken or TokenExpired."""
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError:
            raise InvalidToken()

    def subject(self, token: str) -> str:
        payload = self.decode(token)
        subject = payload.get("sub")
        if not subject:
            raise InvalidToken("Token has no subject")
        return subject


@lru_cache()
def get_token_verifier() -> TokenVerifier:
    settings = get_settings()
    return TokenVerifier(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    return get_token_verifier().create_token(data, expires_delta)


def create_user_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


async def _resolve_user(token: str, verifier: TokenVerifier, db: AsyncSession) -> User:
    if not token:
        raise Unauthenticated()

    subject = verifier.subject(token)

    try:
        user = await db.get(User, int(subject))
    except Exception:
        logger.exception("auth_lookup_failed")
        raise AuthenticationFailed()

    if user is None:
        raise Unauthenticated("User not found")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user. Raises 401 on any token problem."""
    try:
        if credentials is None:
            raise Unauthenticated()
        return await _resolve_user(credentials.credentials, verifier, db)
    except (Unauthenticated, InvalidToken, TokenExpired, AuthenticationFailed) as exc:
        record_auth_rejection(exc.code.value)
        logger.warning("auth_rejected", reason=exc.code.value)
        raise


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Anonymous callers get None; a presented token must still be valid."""
    if credentials is None:
        return None
    return await get_current_user(credentials, verifier, db)


def require_roles(*roles: UserRole):
    """Build a guard that admits only users holding one of ``roles``."""
    allowed = frozenset(UserRole(role).value for role in roles)

    async def role_gate(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning("role_rejected", user_id=user.id, role=user.role, allowed=sorted(allowed))
            record_auth_rejection("forbidden")
            raise Forbidden()
        return user

    return role_gate
