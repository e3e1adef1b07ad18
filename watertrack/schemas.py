"""
Pydantic schemas for the WaterTrack API.

JSON bodies use camelCase keys; snake_case field names are accepted as well.
"""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from watertrack.enums import (
    LessonCategory,
    LessonType,
    NotificationPriority,
    NotificationType,
    WaterSource,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Users / auth


class HouseholdPayload(ApiModel):
    size: Optional[int] = Field(default=None, ge=1, le=50)
    water_source: Optional[WaterSource] = None
    has_garden: Optional[bool] = None
    garden_size: Optional[float] = Field(default=None, ge=0)
    has_pool: Optional[bool] = None
    pool_size: Optional[float] = Field(default=None, ge=0)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PreferencesPayload(ApiModel):
    notifications: Optional[bool] = None

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RegisterRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=80)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    household: Optional[HouseholdPayload] = None
    preferences: Optional[PreferencesPayload] = None


class LoginRequest(ApiModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class UserResponse(ApiModel):
    id: str
    name: str
    email: str
    household: dict
    preferences: dict
    created_at: dt.datetime


class AuthResponse(ApiModel):
    token: str
    token_type: Literal["bearer"] = "bearer"
    user: UserResponse


# Water usage

Litres = Annotated[float, Field(ge=0, strict=True, allow_inf_nan=False)]


class LogUsageRequest(ApiModel):
    shower: Litres
    toilet: Litres
    washing_machine: Litres
    dishwasher: Litres
    garden: Litres
    other: Litres
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=500)

    def category_amounts(self) -> dict[str, float]:
        return self.model_dump(by_alias=True, exclude={"date", "notes"})


class UsageEntryResponse(ApiModel):
    id: str
    user_id: str
    date: dt.date
    shower: float
    toilet: float
    washing_machine: float
    dishwasher: float
    garden: float
    other: float
    total_litres: float
    target_achieved: bool
    notes: Optional[str] = None
    created_at: dt.datetime


class UsageStatsResponse(ApiModel):
    daily_usage: float
    weekly_usage: float
    monthly_usage: float
    target_achievement: float
    last_log_date: Optional[dt.date] = None


class DailyBreakdownItem(ApiModel):
    date: dt.date
    total_litres: float
    target_achieved: bool


class WeeklyReportResponse(ApiModel):
    start_date: dt.date
    end_date: dt.date
    total_usage: float
    average_daily_usage: float
    days_under_target: int
    daily_breakdown: list[DailyBreakdownItem]


# Lessons / progress


class QuizQuestion(ApiModel):
    question: str
    options: list[str]
    correct_answer_index: int


class LessonResponse(ApiModel):
    id: str
    title: str
    content: str
    type: LessonType
    duration_minutes: int
    order: int
    category: LessonCategory
    quiz_questions: list[QuizQuestion] = Field(default_factory=list)


class CompleteLessonRequest(ApiModel):
    quiz_score: Optional[float] = Field(default=None, ge=0, le=100)


class CompletedLessonResponse(ApiModel):
    lesson_id: str
    completed_at: dt.datetime
    quiz_score: Optional[float] = None


class ProgressResponse(ApiModel):
    user_id: str
    completed_lessons: list[CompletedLessonResponse]
    total_lessons: int
    progress: float
    current_lesson_id: Optional[str] = None


class CompleteLessonResponse(ProgressResponse):
    lesson_id: str
    completed: bool


# Notifications


class CreateNotificationRequest(ApiModel):
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    action_url: Optional[str] = Field(default=None, max_length=500)
    expires_at: Optional[dt.datetime] = None


class NotificationResponse(ApiModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    is_read: bool
    priority: NotificationPriority
    action_url: Optional[str] = None
    expires_at: Optional[dt.datetime] = None
    created_at: dt.datetime


class UnreadCountResponse(ApiModel):
    count: int


class MarkAllReadResponse(ApiModel):
    message: str
    updated: int


class MessageResponse(ApiModel):
    message: str


class HealthResponse(ApiModel):
    status: Literal["ok"]
    database: str
