"""
User profile operations: household set-up and notification preferences.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from watertrack.db import DbClient, UserRecord
from watertrack.enums import WaterSource
from watertrack.errors import FieldError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_HOUSEHOLD = {
    "size": 1,
    "waterSource": WaterSource.MAINS.value,
    "hasGarden": False,
    "gardenSize": 0,
    "hasPool": False,
    "poolSize": 0,
}

DEFAULT_PREFERENCES = {"notifications": True}

_BOOL_FIELDS = ("hasGarden", "hasPool")
_SIZE_FIELDS = ("gardenSize", "poolSize")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def merge_household(
    current: Optional[Mapping[str, Any]], updates: Optional[Mapping[str, Any]]
) -> dict:
    """Validate ``updates`` and merge them over ``current`` (or the defaults)."""
    merged = dict(DEFAULT_HOUSEHOLD)
    merged.update(current or {})
    updates = dict(updates or {})
    errors: list[FieldError] = []

    for key in updates:
        if key not in DEFAULT_HOUSEHOLD:
            errors.append(FieldError(f"household.{key}", "unknown field"))

    if "size" in updates:
        size = updates["size"]
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            errors.append(FieldError("household.size", "must be an integer >= 1"))
    if "waterSource" in updates:
        try:
            updates["waterSource"] = WaterSource(updates["waterSource"]).value
        except ValueError:
            allowed = ", ".join(s.value for s in WaterSource)
            errors.append(
                FieldError("household.waterSource", f"must be one of: {allowed}")
            )
    for key in _BOOL_FIELDS:
        if key in updates and not isinstance(updates[key], bool):
            errors.append(FieldError(f"household.{key}", "must be a boolean"))
    for key in _SIZE_FIELDS:
        if key in updates and (not _is_number(updates[key]) or updates[key] < 0):
            errors.append(FieldError(f"household.{key}", "must be a number >= 0"))

    if errors:
        raise ValidationError(errors)

    merged.update({k: v for k, v in updates.items() if k in DEFAULT_HOUSEHOLD})
    if not merged["hasGarden"]:
        merged["gardenSize"] = 0
    if not merged["hasPool"]:
        merged["poolSize"] = 0
    return merged


def merge_preferences(
    current: Optional[Mapping[str, Any]], updates: Optional[Mapping[str, Any]]
) -> dict:
    merged = dict(DEFAULT_PREFERENCES)
    merged.update(current or {})
    updates = dict(updates or {})
    if "notifications" in updates and not isinstance(updates["notifications"], bool):
        raise ValidationError(
            [FieldError("preferences.notifications", "must be a boolean")]
        )
    merged.update({k: v for k, v in updates.items() if k in DEFAULT_PREFERENCES})
    return merged


class UserService:
    def __init__(self, db: DbClient):
        self.db = db

    def get_profile(self, user_id: str) -> UserRecord:
        user = self.db.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_household(self, user_id: str, household: Mapping[str, Any]) -> UserRecord:
        user = self.get_profile(user_id)
        merged = merge_household(user.household, household)
        updated = self.db.update_user(user_id, household=merged)
        if not updated:
            raise NotFoundError("User not found")
        logger.info("Updated household set-up for user %s", user_id)
        return updated

    def update_preferences(
        self, user_id: str, preferences: Mapping[str, Any]
    ) -> UserRecord:
        user = self.get_profile(user_id)
        merged = merge_preferences(user.preferences, preferences)
        updated = self.db.update_user(user_id, preferences=merged)
        if not updated:
            raise NotFoundError("User not found")
        return updated

    def notifications_enabled(self, user_id: str) -> bool:
        user = self.db.get_user(user_id)
        if not user:
            return False
        return bool(user.preferences.get("notifications", True))
