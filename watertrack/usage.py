"""
Water-usage logging and the statistics derived from it.

Derived values (entry totals, target flags, windowed sums) are computed here
as plain functions over entries.
"""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

from watertrack.config import Settings
from watertrack.db import DbClient, WaterUsageRecord, new_id
from watertrack.enums import NotificationPriority, NotificationType, UsageCategory
from watertrack.errors import FieldError, ValidationError
from watertrack.notifications import NotificationService

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = tuple(c.value for c in UsageCategory)
WEEK_DAYS = 7
MONTH_DAYS = 30
MAX_NOTES_LENGTH = 500


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def validate_category_amounts(amounts: Optional[Mapping[str, Any]]) -> dict[str, float]:
    """
    Check every usage category and return the amounts as floats.

    All problems are collected before raising so the caller sees the full list.
    """
    amounts = amounts or {}
    errors: list[FieldError] = []
    cleaned: dict[str, float] = {}
    for category in CATEGORIES:
        value = amounts.get(category)
        if value is None:
            errors.append(FieldError(category, "is required"))
        elif not _is_number(value):
            errors.append(FieldError(category, "must be a number"))
        elif value < 0:
            errors.append(FieldError(category, "must be greater than or equal to 0"))
        else:
            cleaned[category] = float(value)
    if errors:
        raise ValidationError(errors)
    return cleaned


def compute_total_litres(amounts: Mapping[str, float]) -> float:
    return math.fsum(amounts.get(category, 0.0) for category in CATEGORIES)


def is_target_achieved(total_litres: float, daily_target: float) -> bool:
    return total_litres <= daily_target


def daily_totals(entries: Iterable[WaterUsageRecord]) -> "OrderedDict[date, float]":
    """Sum entry totals per calendar day, ordered by day ascending."""
    totals: dict[date, float] = {}
    for entry in entries:
        totals[entry.date] = totals.get(entry.date, 0.0) + entry.total_litres
    return OrderedDict(sorted(totals.items()))


def target_achievement_percent(
    totals: Mapping[date, float], daily_target: float
) -> float:
    if not totals:
        return 0.0
    met = sum(1 for total in totals.values() if is_target_achieved(total, daily_target))
    return round(met / len(totals) * 100, 2)


class WaterUsageService:
    def __init__(
        self,
        db: DbClient,
        settings: Settings,
        notifications: Optional[NotificationService] = None,
    ):
        self.db = db
        self.settings = settings
        self.notifications = notifications

    @property
    def daily_target(self) -> float:
        return self.settings.daily_target_litres

    def log_usage(
        self,
        user_id: str,
        category_amounts: Optional[Mapping[str, Any]],
        day: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> WaterUsageRecord:
        try:
            amounts = validate_category_amounts(category_amounts)
            errors: list[FieldError] = []
        except ValidationError as exc:
            amounts = {}
            errors = list(exc.errors)
        if notes is not None and (
            not isinstance(notes, str) or len(notes) > MAX_NOTES_LENGTH
        ):
            errors.append(
                FieldError("notes", f"must be text of at most {MAX_NOTES_LENGTH} characters")
            )
        if day is not None and day > today_utc():
            errors.append(FieldError("date", "must not be in the future"))
        if errors:
            raise ValidationError(errors)

        total = compute_total_litres(amounts)
        entry = WaterUsageRecord(
            entry_id=new_id(),
            user_id=user_id,
            date=day or today_utc(),
            amounts=amounts,
            total_litres=total,
            target_achieved=is_target_achieved(total, self.daily_target),
            notes=notes,
        )
        self.db.save_usage_entry(entry)
        logger.info(
            "Logged %.1f L for user %s on %s", total, user_id, entry.date.isoformat()
        )
        if not entry.target_achieved:
            self._notify_target_missed(entry)
        return entry

    def _notify_target_missed(self, entry: WaterUsageRecord) -> None:
        if not self.notifications:
            return
        user = self.db.get_user(entry.user_id)
        if not user or not user.preferences.get("notifications", True):
            return
        self.notifications.create(
            entry.user_id,
            NotificationType.WATER_USAGE,
            "Daily target exceeded",
            f"You used {entry.total_litres:g} L on {entry.date.isoformat()}, "
            f"above your daily target of {self.daily_target:g} L.",
            priority=NotificationPriority.MEDIUM,
        )

    def get_recent_logs(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[WaterUsageRecord]:
        limit = limit or self.settings.recent_logs_limit
        return self.db.list_usage_entries(user_id, limit=limit)

    def get_daily_usage(
        self, user_id: str, day: Optional[date] = None
    ) -> list[WaterUsageRecord]:
        if day is None:
            return self.db.list_usage_entries(user_id)
        return self.db.list_usage_entries(user_id, start=day, end=day)

    def get_stats(self, user_id: str, today: Optional[date] = None) -> dict:
        today = today or today_utc()
        latest = self.db.list_usage_entries(user_id, end=today, limit=1)
        if not latest:
            return {
                "daily_usage": 0.0,
                "weekly_usage": 0.0,
                "monthly_usage": 0.0,
                "target_achievement": 0.0,
                "last_log_date": None,
            }

        last_log_date = latest[0].date
        last_day_entries = self.db.list_usage_entries(
            user_id, start=last_log_date, end=last_log_date
        )
        week_start = today - timedelta(days=WEEK_DAYS - 1)
        month_entries = self.db.list_usage_entries(
            user_id, start=today - timedelta(days=MONTH_DAYS - 1), end=today
        )
        week_entries = [e for e in month_entries if e.date >= week_start]

        return {
            "daily_usage": math.fsum(e.total_litres for e in last_day_entries),
            "weekly_usage": math.fsum(e.total_litres for e in week_entries),
            "monthly_usage": math.fsum(e.total_litres for e in month_entries),
            "target_achievement": target_achievement_percent(
                daily_totals(week_entries), self.daily_target
            ),
            "last_log_date": last_log_date,
        }

    def get_activity_breakdown(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> dict[str, float]:
        if start and end and start > end:
            raise ValidationError(
                [FieldError("startDate", "must not be after endDate")]
            )
        breakdown = {category: 0.0 for category in CATEGORIES}
        for entry in self.db.list_usage_entries(user_id, start=start, end=end):
            for category in CATEGORIES:
                breakdown[category] += entry.amounts.get(category, 0.0)
        return breakdown

    def get_weekly_report(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> dict:
        """
        Summarise the 7-day window ``[start_date, start_date + 7)``.

        Defaults to the trailing week ending today. Averages are per logged
        day, and 0 when nothing was logged.
        """
        if start_date is None:
            start_date = (today or today_utc()) - timedelta(days=WEEK_DAYS - 1)
        end_date = start_date + timedelta(days=WEEK_DAYS - 1)
        entries = self.db.list_usage_entries(user_id, start=start_date, end=end_date)
        totals = daily_totals(entries)
        total_usage = math.fsum(totals.values())
        return {
            "start_date": start_date,
            "end_date": end_date,
            "total_usage": total_usage,
            "average_daily_usage": round(total_usage / len(totals), 2) if totals else 0.0,
            "days_under_target": sum(
                1 for t in totals.values() if is_target_achieved(t, self.daily_target)
            ),
            "daily_breakdown": [
                {
                    "date": day,
                    "total_litres": total,
                    "target_achieved": is_target_achieved(total, self.daily_target),
                }
                for day, total in totals.items()
            ],
        }
