# app/api/deps.py
from fastapi import Cookie, HTTPException, Response

from app.services.admin_service import is_admin_token
from app.utils import settings


def set_cart_cookie(response: Response, session_id: str) -> None:
    # przesuwane 30 dni przy kazdej odpowiedzi dotykajacej koszyka
    response.set_cookie(
        key=settings.CART_COOKIE_NAME,
        value=session_id,
        max_age=settings.CART_TTL_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def set_admin_cookie(response: Response) -> None:
    response.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=settings.ADMIN_SESSION_TOKEN,
        max_age=settings.ADMIN_SESSION_TTL_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def is_admin(
    admin_session: str | None = Cookie(None, alias=settings.ADMIN_COOKIE_NAME),
) -> bool:
    return is_admin_token(admin_session)


def require_admin(
    admin_session: str | None = Cookie(None, alias=settings.ADMIN_COOKIE_NAME),
) -> None:
    if not is_admin_token(admin_session):
        raise HTTPException(status_code=401, detail="Unauthorized")
