"""
Enumerations shared by the store, services and API schemas.
"""

from __future__ import annotations

from enum import StrEnum


class UsageCategory(StrEnum):
    SHOWER = "shower"
    TOILET = "toilet"
    WASHING_MACHINE = "washingMachine"
    DISHWASHER = "dishwasher"
    GARDEN = "garden"
    OTHER = "other"


class LessonType(StrEnum):
    INFO = "info"
    VIDEO = "video"
    QUIZ = "quiz"


class LessonCategory(StrEnum):
    WATER_CONSERVATION = "water_conservation"
    WATER_SCARCITY = "water_scarcity"
    SUSTAINABLE_PRACTICES = "sustainable_practices"
    SDG_GOALS = "sdg_goals"


class NotificationType(StrEnum):
    WATER_USAGE = "water_usage"
    LESSON_REMINDER = "lesson_reminder"
    ACHIEVEMENT = "achievement"
    TIP = "tip"
    SYSTEM = "system"


class NotificationPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WaterSource(StrEnum):
    MAINS = "mains"
    WELL = "well"
    RAINWATER = "rainwater"
    OTHER = "other"
