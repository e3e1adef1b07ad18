"""
Lesson catalogue and per-user completion tracking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from watertrack.db import (
    CompletedLesson,
    DbClient,
    LessonRecord,
    ProgressRecord,
    new_id,
)
from watertrack.enums import (
    LessonCategory,
    LessonType,
    NotificationPriority,
    NotificationType,
)
from watertrack.errors import FieldError, NotFoundError, ValidationError
from watertrack.notifications import NotificationService

logger = logging.getLogger(__name__)


def progress_percent(completed_count: int, total_lessons: int) -> float:
    """Completed share of the catalogue as 0-100; 0 when there are no lessons."""
    if total_lessons <= 0:
        return 0.0
    percent = completed_count / total_lessons * 100
    return round(min(100.0, max(0.0, percent)), 2)


def first_uncompleted(
    lessons: Iterable[LessonRecord], completed_ids: set[str]
) -> Optional[LessonRecord]:
    for lesson in sorted(lessons, key=lambda lesson: lesson.order):
        if lesson.lesson_id not in completed_ids:
            return lesson
    return None


def validate_quiz_questions(questions: Optional[Sequence[Mapping[str, Any]]]) -> list[dict]:
    cleaned: list[dict] = []
    errors: list[FieldError] = []
    for i, question in enumerate(questions or []):
        prefix = f"quizQuestions[{i}]"
        text = question.get("question")
        options = question.get("options")
        answer = question.get("correctAnswerIndex")
        if not isinstance(text, str) or not text.strip():
            errors.append(FieldError(f"{prefix}.question", "is required"))
        if (
            not isinstance(options, (list, tuple))
            or len(options) < 2
            or not all(isinstance(o, str) for o in options)
        ):
            errors.append(FieldError(f"{prefix}.options", "needs at least two text options"))
            options = []
        if (
            not isinstance(answer, int)
            or isinstance(answer, bool)
            or not 0 <= answer < max(len(options), 1)
        ):
            errors.append(
                FieldError(f"{prefix}.correctAnswerIndex", "must index one of the options")
            )
        cleaned.append(
            {"question": text, "options": list(options), "correctAnswerIndex": answer}
        )
    if errors:
        raise ValidationError(errors)
    return cleaned


@dataclass
class ProgressSummary:
    record: ProgressRecord
    total_lessons: int

    @property
    def percent(self) -> float:
        return self.record.total_progress_percent

    def as_dict(self) -> dict:
        return {
            "user_id": self.record.user_id,
            "completed_lessons": [c.as_dict() for c in self.record.completed_lessons],
            "total_lessons": self.total_lessons,
            "progress": self.record.total_progress_percent,
            "current_lesson_id": self.record.current_lesson_id,
        }


class LessonService:
    def __init__(self, db: DbClient, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications

    def list_lessons(self) -> list[LessonRecord]:
        return self.db.list_lessons()

    def get_lesson(self, lesson_id: str) -> LessonRecord:
        lesson = self.db.get_lesson(lesson_id)
        if not lesson:
            raise NotFoundError("Lesson not found")
        return lesson

    def create_lesson(
        self,
        title: str,
        content: str,
        lesson_type: LessonType | str,
        duration_minutes: int,
        order: int,
        category: LessonCategory | str,
        quiz_questions: Optional[Sequence[Mapping[str, Any]]] = None,
        lesson_id: Optional[str] = None,
    ) -> LessonRecord:
        errors: list[FieldError] = []
        if not title or not title.strip():
            errors.append(FieldError("title", "is required"))
        if not content or not content.strip():
            errors.append(FieldError("content", "is required"))
        try:
            lesson_type = LessonType(lesson_type)
        except ValueError:
            errors.append(FieldError("type", "must be one of: info, video, quiz"))
        try:
            category = LessonCategory(category)
        except ValueError:
            errors.append(FieldError("category", "unknown lesson category"))
        if not isinstance(duration_minutes, int) or duration_minutes <= 0:
            errors.append(FieldError("durationMinutes", "must be a positive integer"))
        if not isinstance(order, int) or isinstance(order, bool):
            errors.append(FieldError("order", "must be an integer"))
        try:
            questions = validate_quiz_questions(quiz_questions)
        except ValidationError as exc:
            errors.extend(exc.errors)
            questions = []
        if errors:
            raise ValidationError(errors)

        lesson = LessonRecord(
            lesson_id=lesson_id or new_id(),
            title=title.strip(),
            content=content,
            type=lesson_type,
            duration_minutes=duration_minutes,
            order=order,
            category=category,
            quiz_questions=questions,
        )
        return self.db.save_lesson(lesson)

    def get_progress(self, user_id: str) -> ProgressSummary:
        progress = self.db.get_or_create_progress(user_id)
        total = self.db.count_lessons()
        progress = self.db.update_progress(
            user_id,
            current_lesson_id=progress.current_lesson_id,
            total_progress_percent=progress_percent(len(progress.completed_lessons), total),
        )
        return ProgressSummary(record=progress, total_lessons=total)

    def complete_lesson(
        self, user_id: str, lesson_id: str, quiz_score: Optional[float] = None
    ) -> ProgressSummary:
        """
        Record a completion; completing the same lesson again is a no-op.
        """
        lesson = self.get_lesson(lesson_id)
        if quiz_score is not None and (
            isinstance(quiz_score, bool)
            or not isinstance(quiz_score, (int, float))
            or not 0 <= quiz_score <= 100
        ):
            raise ValidationError([FieldError("quizScore", "must be between 0 and 100")])

        added = self.db.add_completed_lesson(
            user_id,
            CompletedLesson(
                lesson_id=lesson.lesson_id,
                quiz_score=float(quiz_score) if quiz_score is not None else None,
            ),
        )
        progress = self.db.get_or_create_progress(user_id)
        lessons = self.db.list_lessons()
        next_lesson = first_uncompleted(lessons, progress.completed_lesson_ids)
        progress = self.db.update_progress(
            user_id,
            current_lesson_id=next_lesson.lesson_id if next_lesson else None,
            total_progress_percent=progress_percent(
                len(progress.completed_lessons), len(lessons)
            ),
        )
        if added:
            logger.info("User %s completed lesson %s", user_id, lesson.lesson_id)
            if next_lesson is None and lessons:
                self._notify_all_complete(user_id, len(lessons))
        return ProgressSummary(record=progress, total_lessons=len(lessons))

    def _notify_all_complete(self, user_id: str, total: int) -> None:
        if not self.notifications:
            return
        user = self.db.get_user(user_id)
        if not user or not user.preferences.get("notifications", True):
            return
        self.notifications.create(
            user_id,
            NotificationType.ACHIEVEMENT,
            "All lessons completed",
            f"You have completed all {total} water conservation lessons.",
            priority=NotificationPriority.HIGH,
            action_url="/lessons",
        )

    def get_next_lesson(self, user_id: str) -> LessonRecord:
        progress = self.db.get_progress(user_id)
        if progress and progress.current_lesson_id:
            lesson = self.db.get_lesson(progress.current_lesson_id)
            if lesson:
                return lesson
        lessons = self.db.list_lessons()
        if not lessons:
            raise NotFoundError("No lessons available")
        return lessons[0]
