# app/api/deps.py
"""
Identity resolution for the routers.

Two dependency flavours share the same token extraction and verification:

* ``get_current_user`` rejects the request (401) when no valid identity is
  presented;
* ``get_optional_user`` never blocks and yields ``None`` instead.

``resolve_actor`` layers the guest flow on top: when no token identity is
available, a client-supplied ``userId`` may stand in, but only after it has
been looked up in the user store.
"""
import logging
from datetime import timedelta
from typing import Optional, Dict, Any

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.core.errors import (
    ExpiredToken, MalformedToken, NotFound, ServerMisconfigured, TokenError,
    Unauthenticated, ValidationFailed,
)
from app.core.security import TokenIssuer
from app.db.mongo import to_object_id
from app.repositories import users as users_repo

logger = logging.getLogger(__name__)

User = Dict[str, Any]


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is missing; auth system misconfigured")
    # raises ServerMisconfigured when the key is absent
    return TokenIssuer(
        settings.JWT_SECRET,
        expires=timedelta(days=settings.JWT_EXPIRE_DAYS),
        algorithm=settings.JWT_ALGORITHM,
    )


def extract_token(request: Request, cookie_names) -> Optional[str]:
    for name in cookie_names:
        token = request.cookies.get(name)
        if token:
            return token
    header = request.headers.get("Authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def _user_from_token(token: str, issuer: TokenIssuer) -> User:
    try:
        data = issuer.verify(token)
    except ExpiredToken:
        logger.warning("Rejected expired token")
        raise Unauthenticated("Authentication expired", error="Token has expired")
    except MalformedToken as exc:
        logger.warning("Rejected invalid token: %s", exc)
        raise Unauthenticated("Invalid authentication", error=str(exc))
    except TokenError:
        raise Unauthenticated("Authentication failed", error="Token verification failed")

    oid = to_object_id(data.user_id)
    user = await users_repo.get_user(oid) if oid else None
    if not user:
        logger.warning("User not found for id %s from valid token", data.user_id)
        raise Unauthenticated("User not found", error="Account may have been deleted")
    return user


async def get_current_user(request: Request, settings: Settings = Depends(get_settings)) -> User:
    token = extract_token(request, settings.AUTH_COOKIE_NAMES)
    if not token:
        raise Unauthenticated("Authentication required", error="No token provided")
    issuer = get_token_issuer(settings)
    return await _user_from_token(token, issuer)


async def get_optional_user(request: Request, settings: Settings = Depends(get_settings)) -> Optional[User]:
    token = extract_token(request, settings.AUTH_COOKIE_NAMES)
    if not token:
        return None
    try:
        issuer = get_token_issuer(settings)
        return await _user_from_token(token, issuer)
    except (Unauthenticated, ServerMisconfigured):
        return None


async def resolve_actor(user: Optional[User], claimed_user_id: Optional[str], strict: bool = True) -> Optional[User]:
    """
    Pick the identity driving a request: token user first, then a claimed id
    that exists in the store, else None (anonymous).

    With ``strict`` a malformed claimed id is a 400 and an unknown one a 404;
    otherwise both silently degrade to anonymous.
    """
    if user is not None:
        return user
    if not claimed_user_id:
        return None
    oid = to_object_id(claimed_user_id)
    if oid is None:
        if strict:
            raise ValidationFailed("Invalid user ID format in request", error={"provided_id": claimed_user_id})
        return None
    found = await users_repo.get_user(oid)
    if found is None and strict:
        raise NotFound("User not found")
    if found is not None:
        logger.info("Acting as client-supplied user %s", claimed_user_id)
    return found
