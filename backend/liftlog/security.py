from datetime import datetime, timedelta, timezone
from typing import Any
from passlib.context import CryptContext
from jose import jwt
from jose.exceptions import JWTError
from liftlog.settings import get_settings

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(plain: str) -> str:
    return pwd_ctx.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        # accounts without a password can never log in
        return False
    return pwd_ctx.verify(plain, hashed)

def create_access_token(user_id: int | str, *, expires_minutes: int | None = None) -> str:
    s = get_settings()
    issued = datetime.now(timezone.utc)
    ttl = timedelta(minutes=s.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(issued.timestamp()),
        "exp": int((issued + ttl).timestamp()),
    }
    return jwt.encode(claims, s.SECRET_KEY, algorithm=s.ALGORITHM)

def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry of a bearer token and return its claims.
    Raises ExpiredSignatureError or JWTError.
    """
    s = get_settings()
    claims = jwt.decode(
        token,
        s.SECRET_KEY,
        algorithms=[s.ALGORITHM],
        options={"verify_signature": True, "verify_exp": True},
    )
    if "exp" not in claims:
        raise JWTError("Missing exp")
    return claims
