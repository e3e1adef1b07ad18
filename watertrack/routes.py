"""
HTTP routes for the WaterTrack API.

Routes only translate between HTTP and the services; business rules and
validation live in the service modules.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from watertrack.auth import AuthService
from watertrack.db import DbClient, UserRecord
from watertrack.dependencies import (
    get_auth_service,
    get_current_user,
    get_db_client,
    get_lesson_service,
    get_notification_service,
    get_usage_service,
    get_user_service,
)
from watertrack.enums import NotificationType
from watertrack.lessons import LessonService, ProgressSummary
from watertrack.notifications import DEFAULT_LIMIT, MAX_LIMIT, NotificationService
from watertrack.schemas import (
    AuthResponse,
    CompleteLessonRequest,
    CompleteLessonResponse,
    CreateNotificationRequest,
    HealthResponse,
    HouseholdPayload,
    LessonResponse,
    LoginRequest,
    LogUsageRequest,
    MarkAllReadResponse,
    MessageResponse,
    NotificationResponse,
    PreferencesPayload,
    ProgressResponse,
    RegisterRequest,
    UnreadCountResponse,
    UsageEntryResponse,
    UsageStatsResponse,
    UserResponse,
    WeeklyReportResponse,
)
from watertrack.usage import WaterUsageService
from watertrack.users import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(user: UserRecord, token: str) -> AuthResponse:
    return AuthResponse(token=token, user=UserResponse.model_validate(user.as_dict()))


def _progress_response(summary: ProgressSummary) -> ProgressResponse:
    return ProgressResponse.model_validate(summary.as_dict())


@router.get("/health", response_model=HealthResponse)
def health(db: DbClient = Depends(get_db_client)):
    return HealthResponse(status="ok", database=db.__class__.__name__)


# Auth


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    user, token = auth.register(
        payload.name,
        payload.email,
        payload.password,
        household=payload.household.to_document() if payload.household else None,
        preferences=payload.preferences.to_document() if payload.preferences else None,
    )
    return _auth_response(user, token)


@router.post("/auth/login", response_model=AuthResponse)
def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    user, token = auth.login(payload.email, payload.password)
    return _auth_response(user, token)


# Users


@router.get("/users/me", response_model=UserResponse)
def get_me(user: UserRecord = Depends(get_current_user)):
    return UserResponse.model_validate(user.as_dict())


@router.put("/users/household", response_model=UserResponse)
def update_household(
    payload: HouseholdPayload,
    user: UserRecord = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    updated = users.update_household(user.user_id, payload.to_document())
    return UserResponse.model_validate(updated.as_dict())


@router.patch("/users/preferences", response_model=UserResponse)
def update_preferences(
    payload: PreferencesPayload,
    user: UserRecord = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    updated = users.update_preferences(user.user_id, payload.to_document())
    return UserResponse.model_validate(updated.as_dict())


# Water usage


@router.post("/water-usage", response_model=UsageEntryResponse, status_code=201)
def log_water_usage(
    payload: LogUsageRequest,
    user: UserRecord = Depends(get_current_user),
    usage: WaterUsageService = Depends(get_usage_service),
):
    entry = usage.log_usage(
        user.user_id, payload.category_amounts(), payload.date, payload.notes
    )
    return UsageEntryResponse.model_validate(entry.as_dict())


@router.get("/water-usage/stats", response_model=UsageStatsResponse)
def water_usage_stats(
    user: UserRecord = Depends(get_current_user),
    usage: WaterUsageService = Depends(get_usage_service),
):
    return UsageStatsResponse.model_validate(usage.get_stats(user.user_id))


@router.get("/water-usage/recent", response_model=list[UsageEntryResponse])
def recent_water_usage(
    limit: Optional[int] = Query(None, ge=1, le=100),
    user: UserRecord = Depends(get_current_user),
    usage: WaterUsageService = Depends(get_usage_service),
):
    entries = usage.get_recent_logs(user.user_id, limit=limit)
    return [UsageEntryResponse.model_validate(e.as_dict()) for e in entries]


@router.get("/water-usage/daily", response_model=list[UsageEntryResponse])
def daily_water_usage(
    day: Optional[date] = Query(None, alias="date"),
    user: UserRecord = Depends(get_current_user),
    usage: WaterUsageService = Depends(get_usage_service),
):
    entries = usage.get_daily_usage(user.user_id, day)
    return [UsageEntryResponse.model_validate(e.as_dict()) for e in entries]


@router.get("/water-usage/activities", response_model=dict[str, float])
def activity_breakdown(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user: UserRecord = Depends(get_current_user),
    usage: WaterUsageService = Depends(get_usage_service),
):
    return usage.get_activity_breakdown(user.user_id, start_date, end_date)


@router.get("/water-usage/weekly", response_model=WeeklyReportResponse)
def weekly_report(
    start_date: Optional[date] = Query(None, alias="startDate"),
    user: UserRecord = Depends(get_current_user),
    usage: WaterUsageService = Depends(get_usage_service),
):
    return WeeklyReportResponse.model_validate(
        usage.get_weekly_report(user.user_id, start_date)
    )


# Lessons / progress


@router.get("/lessons", response_model=list[LessonResponse])
def list_lessons(
    user: UserRecord = Depends(get_current_user),
    lessons: LessonService = Depends(get_lesson_service),
):
    return [
        LessonResponse.model_validate(lesson.as_dict())
        for lesson in lessons.list_lessons()
    ]


@router.get("/lessons/next", response_model=LessonResponse)
def next_lesson(
    user: UserRecord = Depends(get_current_user),
    lessons: LessonService = Depends(get_lesson_service),
):
    return LessonResponse.model_validate(lessons.get_next_lesson(user.user_id).as_dict())


@router.get("/lessons/{lesson_id}", response_model=LessonResponse)
def get_lesson(
    lesson_id: str,
    user: UserRecord = Depends(get_current_user),
    lessons: LessonService = Depends(get_lesson_service),
):
    return LessonResponse.model_validate(lessons.get_lesson(lesson_id).as_dict())


@router.post("/lessons/{lesson_id}/complete", response_model=CompleteLessonResponse)
def complete_lesson(
    lesson_id: str,
    payload: Optional[CompleteLessonRequest] = None,
    user: UserRecord = Depends(get_current_user),
    lessons: LessonService = Depends(get_lesson_service),
):
    summary = lessons.complete_lesson(
        user.user_id, lesson_id, payload.quiz_score if payload else None
    )
    return CompleteLessonResponse.model_validate(
        {
            **summary.as_dict(),
            "lesson_id": lesson_id,
            "completed": lesson_id in summary.record.completed_lesson_ids,
        }
    )


@router.get("/progress", response_model=ProgressResponse)
def get_progress(
    user: UserRecord = Depends(get_current_user),
    lessons: LessonService = Depends(get_lesson_service),
):
    return _progress_response(lessons.get_progress(user.user_id))


# Notifications


@router.get("/notifications", response_model=list[NotificationResponse])
def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    notification_type: Optional[NotificationType] = Query(None, alias="type"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    user: UserRecord = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    items = notifications.list_notifications(
        user.user_id,
        unread_only=unread_only,
        notification_type=notification_type,
        limit=limit,
    )
    return [NotificationResponse.model_validate(n.as_dict()) for n in items]


@router.post("/notifications", response_model=NotificationResponse, status_code=201)
def create_notification(
    payload: CreateNotificationRequest,
    user: UserRecord = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    notification = notifications.create(
        user.user_id,
        payload.type,
        payload.title,
        payload.message,
        priority=payload.priority,
        action_url=payload.action_url,
        expires_at=payload.expires_at,
    )
    return NotificationResponse.model_validate(notification.as_dict())


@router.get("/notifications/unread-count", response_model=UnreadCountResponse)
def unread_count(
    user: UserRecord = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(count=notifications.unread_count(user.user_id))


@router.patch("/notifications/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    user: UserRecord = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    updated = notifications.mark_all_read(user.user_id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.patch("/notifications/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    user: UserRecord = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    notification = notifications.mark_read(user.user_id, notification_id)
    return NotificationResponse.model_validate(notification.as_dict())


@router.delete("/notifications/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: str,
    user: UserRecord = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    notifications.delete(user.user_id, notification_id)
    return MessageResponse(message="Notification deleted")
