# app/api/auth.py
from fastapi import APIRouter, Depends, Response

from app.api.deps import get_current_user, get_token_issuer
from app.core.config import Settings, get_settings
from app.core.security import TokenIssuer
from app.models.user import RegisterIn, LoginIn, ForgotPasswordIn, ResetPasswordIn
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _set_auth_cookies(response: Response, token: str, settings: Settings) -> None:
    # same token under every accepted cookie name
    for name in settings.AUTH_COOKIE_NAMES:
        response.set_cookie(
            name,
            token,
            httponly=True,
            secure=settings.is_production,
            max_age=settings.JWT_EXPIRE_DAYS * 24 * 60 * 60,
            samesite="lax",
        )


@router.post("/register", status_code=201)
async def register(
    payload: RegisterIn,
    response: Response,
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
):
    user, token = await auth_service.register(payload, issuer)
    _set_auth_cookies(response, token, settings)
    return {"success": True, "user": user, "token": token}

@router.post("/login")
async def login(
    payload: LoginIn,
    response: Response,
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
):
    user, token = await auth_service.login(payload, issuer)
    _set_auth_cookies(response, token, settings)
    return {"success": True, "user": user, "token": token}

@router.get("/logout")
async def logout(response: Response, user=Depends(get_current_user), settings: Settings = Depends(get_settings)):
    for name in settings.AUTH_COOKIE_NAMES:
        response.delete_cookie(name, httponly=True)
    return {"success": True, "message": "Logged out successfully"}

@router.get("/me")
async def get_me(user=Depends(get_current_user)):
    return {"success": True, "user": auth_service.me_view(user)}

@router.post("/forgotpassword")
async def forgot_password(payload: ForgotPasswordIn, settings: Settings = Depends(get_settings)):
    """
    Generate a short-lived reset token. Delivery (email) is out of scope, so
    the token is handed back in the response.
    """
    raw = await auth_service.forgot_password(payload.email, settings.RESET_TOKEN_EXPIRE_MINUTES)
    return {"success": True, "message": "Password reset token generated", "resetToken": raw}

@router.post("/resetpassword/{resettoken}")
async def reset_password(
    resettoken: str,
    payload: ResetPasswordIn,
    response: Response,
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
):
    token = await auth_service.reset_password(resettoken, payload.password, issuer)
    _set_auth_cookies(response, token, settings)
    return {"success": True, "message": "Password reset successful", "token": token}
