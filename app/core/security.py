# app/core/security.py
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
import hashlib
import secrets
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel

from app.core.errors import ExpiredToken, MalformedToken, ServerMisconfigured

# PBKDF2-SHA256 keeps us off the bcrypt backend
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # unrecognised hash format
        return False


class TokenData(BaseModel):
    user_id: str
    expires_at: datetime


class TokenIssuer:
    """Issues and verifies the signed bearer tokens handed out on login/register."""

    def __init__(self, secret: Optional[str], expires: timedelta, algorithm: str = "HS256"):
        if not secret:
            raise ServerMisconfigured(error="Auth system misconfigured")
        self._secret = secret
        self._algorithm = algorithm
        self.expires = expires

    def issue(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        exp = now + (expires_delta if expires_delta is not None else self.expires)
        payload = {"sub": str(user_id), "iat": now, "exp": exp}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenData:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise ExpiredToken(str(exc)) from exc
        except JWTError as exc:
            raise MalformedToken(str(exc)) from exc
        sub = payload.get("sub")
        exp = payload.get("exp")
        if not sub or exp is None:
            raise MalformedToken("Token is missing required claims")
        return TokenData(user_id=sub, expires_at=datetime.fromtimestamp(exp, tz=timezone.utc))


def new_reset_token() -> Tuple[str, str]:
    """Return (raw token for the user, sha256 digest to store)."""
    raw = secrets.token_hex(20)
    return raw, hash_reset_token(raw)

def hash_reset_token(raw: str) -> str:
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
