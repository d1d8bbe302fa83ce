# app/services/auth.py
import logging
from datetime import timedelta
from typing import Dict, Any, Tuple

from app.core.errors import DuplicateResource, NotFound, Unauthenticated, ValidationFailed
from app.core.security import (
    TokenIssuer, hash_password, verify_password, new_reset_token, hash_reset_token,
)
from app.db.mongo import clean
from app.models.user import RegisterIn, LoginIn
from app.repositories import users as users_repo
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

ME_FIELDS = (
    "name", "email", "profileImage", "bio", "skills", "location",
    "joinedCommunities", "notifiedCommunities", "savedJobs", "appliedJobs",
)


def session_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "profileImage": user.get("profileImage", ""),
    }

def me_view(user: Dict[str, Any]) -> Dict[str, Any]:
    out = {"id": str(user["_id"])}
    for field in ME_FIELDS:
        out[field] = clean(user.get(field))
    return out


async def register(payload: RegisterIn, issuer: TokenIssuer) -> Tuple[Dict[str, Any], str]:
    if await users_repo.get_user_by_email(payload.email):
        raise DuplicateResource("User already exists")
    user = await users_repo.create_user(payload.name, payload.email, hash_password(payload.password))
    logger.info("Registered user %s", user["_id"])
    return session_user(user), issuer.issue(str(user["_id"]))

async def login(payload: LoginIn, issuer: TokenIssuer) -> Tuple[Dict[str, Any], str]:
    user = await users_repo.get_user_with_password(payload.email)
    # same answer for unknown email and wrong password
    if not user or not verify_password(payload.password, user.get("password")):
        logger.warning("Failed login attempt")
        raise Unauthenticated(INVALID_CREDENTIALS)
    return session_user(user), issuer.issue(str(user["_id"]))

async def forgot_password(email: str, expire_minutes: int) -> str:
    user = await users_repo.get_user_by_email(email)
    if not user:
        raise NotFound("User not found")
    raw, digest = new_reset_token()
    await users_repo.set_reset_token(user["_id"], digest, utcnow() + timedelta(minutes=expire_minutes))
    logger.info("Issued password reset token for user %s", user["_id"])
    return raw

async def reset_password(raw_token: str, password: str, issuer: TokenIssuer) -> str:
    user = await users_repo.find_by_reset_token(hash_reset_token(raw_token), utcnow())
    if not user:
        raise ValidationFailed("Invalid or expired token")
    await users_repo.set_password(user["_id"], hash_password(password))
    logger.info("Password reset for user %s", user["_id"])
    return issuer.issue(str(user["_id"]))
