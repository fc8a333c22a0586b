"""Verification of access tokens issued by the blog."""

from jose import JWTError, jwt

from blog_notifications.config import get_settings


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
