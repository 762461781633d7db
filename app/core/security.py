"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.exceptions import MalformedHashError, PasswordHashError, TokenSigningError
from app.models.user import Role

# Bcrypt cost (rounds) when no explicit value is configured.
BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of the input; longer passwords are refused, never cut.
BCRYPT_MAX_BYTES = 72

TOKEN_LIFETIME = timedelta(hours=24)
# Claims carried by every access token.
TOKEN_CLAIMS = ("ID", "role", "exp")


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a plain-text password for storage. A fresh salt is generated on every call.

    Raises PasswordHashError when the password is longer than 72 UTF-8 bytes.
    """
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > BCRYPT_MAX_BYTES:
        raise PasswordHashError(f"password exceeds {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash in constant time.

    A mismatch returns False, as does a password too long to have been hashed.
    Raises MalformedHashError when the stored hash is not a valid bcrypt hash.
    """
    pw_bytes = plain_password.encode("utf-8")
    if len(pw_bytes) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as e:
        raise MalformedHashError("stored password hash is malformed", cause=e) from e


class TokenIssuer:
    """Builds and signs bounded-lifetime access tokens carrying account id and role."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = TOKEN_LIFETIME,
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Any) -> "TokenIssuer":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            lifetime=timedelta(hours=settings.JWT_EXPIRE_HOURS),
        )

    def build_claims(self, account_id: int, is_admin: bool, now: datetime | None = None) -> dict[str, Any]:
        issued_at = now or datetime.now(UTC)
        return {
            "ID": str(account_id),
            "role": Role.from_admin_flag(is_admin).value,
            "exp": int((issued_at + self.lifetime).timestamp()),
        }

    def issue_token(self, account_id: int, is_admin: bool) -> str:
        """Return a signed bearer token. Raises TokenSigningError if the key is missing or unusable."""
        if not self.secret or not self.secret.strip():
            raise TokenSigningError("token signing key is not configured")
        claims = self.build_claims(account_id, is_admin)
        try:
            return jwt.encode(claims, self.secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            raise TokenSigningError(f"failed to sign access token: {e}", cause=e) from e

    def decode_token(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token; return its claims (ID, role, exp).
        Raises jwt.PyJWTError on a bad signature, expired token or missing claim.
        """
        return jwt.decode(
            token,
            self.secret,
            algorithms=[self.algorithm],
            options={"require": list(TOKEN_CLAIMS)},
        )
