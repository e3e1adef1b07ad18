"""
User-scoped notifications.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from watertrack.db import DbClient, NotificationRecord, new_id
from watertrack.enums import NotificationPriority, NotificationType
from watertrack.errors import FieldError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _to_timestamp(value: Union[datetime, float, None]) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            # Naive datetimes are UTC.
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    return float(value)


class NotificationService:
    def __init__(self, db: DbClient):
        self.db = db

    def list_notifications(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        notification_type: Optional[Union[NotificationType, str]] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[NotificationRecord]:
        errors: list[FieldError] = []
        if limit < 1 or limit > MAX_LIMIT:
            errors.append(FieldError("limit", f"must be between 1 and {MAX_LIMIT}"))
        if notification_type is not None:
            try:
                notification_type = NotificationType(notification_type)
            except ValueError:
                errors.append(FieldError("type", "unknown notification type"))
        if errors:
            raise ValidationError(errors)
        return self.db.list_notifications(
            user_id,
            unread_only=unread_only,
            notification_type=notification_type,
            limit=limit,
        )

    def create(
        self,
        user_id: str,
        notification_type: Optional[Union[NotificationType, str]],
        title: Optional[str],
        message: Optional[str],
        priority: Optional[Union[NotificationPriority, str]] = None,
        action_url: Optional[str] = None,
        expires_at: Union[datetime, float, None] = None,
    ) -> NotificationRecord:
        errors: list[FieldError] = []
        resolved_type = None
        if not notification_type:
            errors.append(FieldError("type", "is required"))
        else:
            try:
                resolved_type = NotificationType(notification_type)
            except ValueError:
                errors.append(FieldError("type", "unknown notification type"))
        if not title or not title.strip():
            errors.append(FieldError("title", "is required"))
        if not message or not message.strip():
            errors.append(FieldError("message", "is required"))
        resolved_priority = NotificationPriority.MEDIUM
        if priority:
            try:
                resolved_priority = NotificationPriority(priority)
            except ValueError:
                errors.append(FieldError("priority", "must be one of: low, medium, high"))
        if errors:
            raise ValidationError(errors)

        notification = self.db.save_notification(
            NotificationRecord(
                notification_id=new_id(),
                user_id=user_id,
                type=resolved_type,
                title=title.strip(),
                message=message.strip(),
                priority=resolved_priority,
                action_url=action_url,
                expires_at=_to_timestamp(expires_at),
            )
        )
        logger.info(
            "Created %s notification %s for user %s",
            notification.type.value,
            notification.notification_id,
            user_id,
        )
        return notification

    def _owned(self, user_id: str, notification_id: str) -> NotificationRecord:
        notification = self.db.get_notification(notification_id)
        if not notification or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        return notification

    def mark_read(self, user_id: str, notification_id: str) -> NotificationRecord:
        notification = self._owned(user_id, notification_id)
        if notification.is_read:
            return notification
        updated = self.db.mark_notification_read(notification_id)
        if not updated:
            raise NotFoundError("Notification not found")
        return updated

    def mark_all_read(self, user_id: str) -> int:
        return self.db.mark_all_notifications_read(user_id)

    def delete(self, user_id: str, notification_id: str) -> None:
        self._owned(user_id, notification_id)
        if not self.db.delete_notification(notification_id):
            raise NotFoundError("Notification not found")

    def unread_count(self, user_id: str) -> int:
        return self.db.count_unread_notifications(user_id)
