# server/core/security.py

from datetime import datetime, timedelta, timezone
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext


ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=11)


class TokenError(Exception):
    """Token could not be verified."""

    reason = "invalid token"


class TokenExpired(TokenError):
    reason = "expired token"


class TokenInvalid(TokenError):
    reason = "invalid token"


# -------------------------------
# Passwords
# -------------------------------

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# -------------------------------
# Tokens
# -------------------------------

def create_access_token(
    user_id: int,
    secret: str,
    lifetime_seconds: int = 86400,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(seconds=lifetime_seconds))
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_access_token(token: str, secret: str) -> int:
    """
    Returns the user id carried by the token.
    Raises TokenExpired when the expiry has passed, TokenInvalid for
    anything else (bad signature, garbage, missing subject).
    """
    if not token:
        raise TokenInvalid("missing token")
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except JWTError as e:
        raise TokenInvalid(str(e)) from e

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as e:
        raise TokenInvalid("token subject is not a user id") from e
