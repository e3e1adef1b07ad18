"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header

from watertrack.auth import AuthService
from watertrack.catalog import seed_lessons
from watertrack.config import get_settings
from watertrack.db import DbClient, InMemoryDbClient, SqlDbClient, UserRecord
from watertrack.errors import UnauthorizedError
from watertrack.lessons import LessonService
from watertrack.notifications import NotificationService
from watertrack.usage import WaterUsageService
from watertrack.users import UserService

_db_client: DbClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
        if settings.seed_lessons_on_startup:
            seed_lessons(LessonService(_db_client))
    else:
        _db_client = SqlDbClient(settings.database_url)
    return _db_client


def set_db_client(db: DbClient | None) -> None:
    """Swap the process-wide client (tests and scripts)."""
    global _db_client
    _db_client = db


def get_notification_service(
    db: DbClient = Depends(get_db_client),
) -> NotificationService:
    return NotificationService(db)


def get_auth_service(db: DbClient = Depends(get_db_client)) -> AuthService:
    return AuthService(db, get_settings())


def get_user_service(db: DbClient = Depends(get_db_client)) -> UserService:
    return UserService(db)


def get_usage_service(
    db: DbClient = Depends(get_db_client),
    notifications: NotificationService = Depends(get_notification_service),
) -> WaterUsageService:
    return WaterUsageService(db, get_settings(), notifications)


def get_lesson_service(
    db: DbClient = Depends(get_db_client),
    notifications: NotificationService = Depends(get_notification_service),
) -> LessonService:
    return LessonService(db, notifications)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service),
) -> UserRecord:
    """
    Resolve the caller from ``Authorization: Bearer <token>``.

    Raises ``UnauthorizedError`` before any route logic runs when the header is
    missing or the token does not verify.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise UnauthorizedError("Authentication token missing")
    return auth.authenticate_token(token)
