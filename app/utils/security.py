import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.utils.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

# ─── Password Hashing ─────────────────────────────────────────────────────────
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password using bcrypt."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str | None, hashed_password: str | None) -> bool:
    """
    Verify a plain-text password against a bcrypt hash.
    A missing or malformed hash never matches, and neither does a
    comparison that fails inside the hashing backend.
    """
    if plain_password is None or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False
    except Exception as e:
        logger.warning(f"Password verification failed: {e!r}")
        return False


def dummy_verify() -> None:
    """Spend one hash verification so unknown accounts take as long as real ones."""
    pwd_context.dummy_verify()


# ─── JWT ──────────────────────────────────────────────────────────────────────
def create_access_token(user_id: int, role: str) -> str:
    """
    Create a JWT access token.
    Payload: sub (user_id), role, type, exp
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.
    Raises 401 if invalid, expired or not an access token.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthorizedException()
    if payload.get("type") != "access":
        raise UnauthorizedException()
    return payload
