"""Access token (JWT) сессии пользователя."""
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import Settings

ACCESS_TOKEN_TYPE = "access"


def create_access_token(user_id: str, email: str, settings: Settings) -> str:
    """
    Подписанный токен с id и e-mail пользователя.
    Роли в токене нет: она читается из БД на каждом запросе, смена роли действует сразу.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> str:
    """
    Проверить подпись, срок и тип токена, вернуть id пользователя.
    Raises jwt.InvalidTokenError, если токен не годится.
    """
    payload = jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not an access token")
    return str(payload["sub"])
