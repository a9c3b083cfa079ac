from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
import secrets
import hashlib
from coachdesk.core.config import settings
from coachdesk.core.constants import TokenError, TokenType

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=settings.PASSWORD_HASH_TIME_COST,
    argon2__memory_cost=settings.PASSWORD_HASH_MEMORY_COST,
)
def hash_password(password: str) -> str:
    if not password or not isinstance(password, str):
        raise ValueError("Password must be a non-empty string")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    if not isinstance(plain_password, str):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unrecognised or corrupt hash
        return False

def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _signing_key(token_type: TokenType) -> str:
    if token_type is TokenType.REFRESH:
        return settings.JWT_REFRESH_SECRET
    return settings.JWT_ACCESS_SECRET


def _create_jwt(
    payload: Dict[str, Any],
    token_type: TokenType,
    expires_delta: timedelta,
) -> tuple[str, str]:
    now = datetime.now(timezone.utc)
    jti = secrets.token_urlsafe(32)

    payload.update({
        "type": token_type.value,
        "iat": now,
        "exp": now + expires_delta,
        "jti": jti,
    })

    token = jwt.encode(
        payload,
        _signing_key(token_type),
        algorithm=settings.ALGORITHM,
    )
    return token, jti


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, str]:
    return _create_jwt(
        payload={
            "sub": str(user_id),
            "email": email,
            "role": str(getattr(role, "value", role)),
        },
        token_type=TokenType.ACCESS,
        expires_delta=expires_delta
        or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    user_id: str,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, str]:
    return _create_jwt(
        payload={
            "sub": str(user_id),
            "email": email,
            "role": str(getattr(role, "value", role)),
        },
        token_type=TokenType.REFRESH,
        expires_delta=expires_delta
        or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_token(
    token: str,
    token_type: TokenType,
) -> tuple[Optional[Dict[str, Any]], Optional[TokenError]]:
    """Verify signature, expiry and token class.

    Returns ``(payload, None)`` on success and ``(None, reason)`` otherwise.
    Nothing is looked up in the session store here.
    """
    if not token or not isinstance(token, str):
        return None, TokenError.INVALID
    try:
        payload = jwt.decode(
            token,
            _signing_key(token_type),
            algorithms=[settings.ALGORITHM],
        )
    except ExpiredSignatureError:
        return None, TokenError.EXPIRED
    except JWTError:
        return None, TokenError.INVALID

    if payload.get("type") != token_type.value or not payload.get("sub"):
        return None, TokenError.INVALID
    return payload, None


def decode_access_token(token: str) -> tuple[Optional[Dict[str, Any]], Optional[TokenError]]:
    return decode_token(token, TokenType.ACCESS)


def decode_refresh_token(token: str) -> tuple[Optional[Dict[str, Any]], Optional[TokenError]]:
    return decode_token(token, TokenType.REFRESH)
