"""Credential hashing and bearer-token issuance/verification."""
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import jwt, JWTError

from cafe_api.config import Settings
from cafe_api.exceptions import InvalidArgumentError, UnauthorizedError
from cafe_api.utils.logger import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise InvalidArgumentError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class Authenticator:
    """
    Issues and verifies signed, time-limited identity tokens.

    Built once at application start from ``Settings`` and kept on
    ``app.state``; request handlers reach it through the ``get_authenticator``
    dependency.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 7 * 24 * 60):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "Authenticator":
        return cls(settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.JWT_EXPIRES_MINUTES)

    def issue_token(self, user_id: int, name: str, email: str) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "name": name,
            "email": email,
            "iat": now,
            "exp": now + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> int:
        """Return the user ID carried by a valid token."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info(f"Token verification failed: {e}")
            raise UnauthorizedError("Invalid token") from e

        sub = payload.get("sub")
        try:
            return int(sub)
        except (TypeError, ValueError):
            raise UnauthorizedError("Token missing user id")
