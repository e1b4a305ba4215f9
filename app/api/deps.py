"""
Bearer-token checks for admin and reminder endpoints
"""
import logging
import secrets

from fastapi import Header, HTTPException

from app.config import settings

logger = logging.getLogger(__name__)


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        return ""
    return authorization.removeprefix("Bearer ").strip()


def require_admin(authorization: str | None = Header(default=None)):
    """Admin endpoints are open only when no ADMIN_API_KEY is configured"""
    if not settings.admin_api_key:
        return
    provided = _bearer_token(authorization)
    if not provided or not secrets.compare_digest(provided.encode(), settings.admin_api_key.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")


def require_reminder_key(authorization: str | None = Header(default=None)):
    """Reminder processing needs REMINDER_API_KEY, except in development with SKIP_REMINDER_AUTH"""
    if settings.environment.lower() == "development" and settings.skip_reminder_auth:
        logger.debug("Skipping reminder auth in development")
        return
    provided = _bearer_token(authorization)
    if (
        not settings.reminder_api_key
        or not provided
        or not secrets.compare_digest(provided.encode(), settings.reminder_api_key.encode())
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")
