"""Password hashing and bearer token issuance."""
from datetime import datetime, timedelta, timezone
import bcrypt
import jwt
from app.config import Settings, get_settings
from app.services.errors import ForbiddenError, UnauthorizedError


def _pwd_bytes(password: str, max_len: int = 72) -> bytes:
    return password.encode("utf-8")[:max_len]


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def create_access_token(account_id: int, settings: Settings | None = None) -> str:
    """Signed token whose only identity claim is the account id (as "sub")."""
    settings = settings or get_settings()
    # PyJWT expects "sub" to be a string
    payload = {"sub": str(account_id)}
    if settings.jwt_access_token_expire_minutes > 0:
        payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_token_expire_minutes)
    raw = jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return raw if isinstance(raw, str) else raw.decode("utf-8")


def decode_token_with_error(token: str, settings: Settings | None = None) -> tuple[dict | None, str | None]:
    """Decode JWT; returns (payload, error_message)."""
    settings = settings or get_settings()
    if not token or not isinstance(token, str):
        return None, "empty token"
    token = token.strip()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload, None
    except jwt.ExpiredSignatureError as e:
        return None, str(e)
    except jwt.PyJWTError as e:
        return None, str(e)


def account_id_from_token(token: str | None, settings: Settings | None = None) -> int:
    """Return the account id carried by a presented token.

    Raises UnauthorizedError when no token was presented and ForbiddenError when
    the signature does not check out, the token expired, or the claim is unusable.
    """
    if not token or not token.strip():
        raise UnauthorizedError("Access denied. No token provided.")
    payload, _ = decode_token_with_error(token, settings)
    if not payload:
        raise ForbiddenError("Invalid or expired token.")
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise ForbiddenError("Invalid or expired token.")
