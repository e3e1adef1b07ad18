"""
Database abstraction for SQL stores and an in-memory test implementation.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Optional, Protocol

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    func,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from watertrack.enums import (
    LessonCategory,
    LessonType,
    NotificationPriority,
    NotificationType,
)
from watertrack.errors import ConflictError


def new_id() -> str:
    return uuid.uuid4().hex


class DbClient(Protocol):
    """Interface for database access."""

    def create_user(self, user: "UserRecord") -> "UserRecord":
        ...

    def get_user(self, user_id: str) -> Optional["UserRecord"]:
        ...

    def get_user_by_email(self, email: str) -> Optional["UserRecord"]:
        ...

    def update_user(
        self,
        user_id: str,
        *,
        household: Optional[dict] = None,
        preferences: Optional[dict] = None,
    ) -> Optional["UserRecord"]:
        ...

    def save_usage_entry(self, entry: "WaterUsageRecord") -> "WaterUsageRecord":
        ...

    def list_usage_entries(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list["WaterUsageRecord"]:
        ...

    def save_lesson(self, lesson: "LessonRecord") -> "LessonRecord":
        ...

    def get_lesson(self, lesson_id: str) -> Optional["LessonRecord"]:
        ...

    def list_lessons(self) -> list["LessonRecord"]:
        ...

    def count_lessons(self) -> int:
        ...

    def get_progress(self, user_id: str) -> Optional["ProgressRecord"]:
        ...

    def get_or_create_progress(self, user_id: str) -> "ProgressRecord":
        ...

    def add_completed_lesson(
        self, user_id: str, completion: "CompletedLesson"
    ) -> bool:
        ...

    def update_progress(
        self,
        user_id: str,
        *,
        current_lesson_id: Optional[str],
        total_progress_percent: float,
    ) -> "ProgressRecord":
        ...

    def save_notification(
        self, notification: "NotificationRecord"
    ) -> "NotificationRecord":
        ...

    def get_notification(self, notification_id: str) -> Optional["NotificationRecord"]:
        ...

    def list_notifications(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
        limit: int = 20,
        now: Optional[float] = None,
    ) -> list["NotificationRecord"]:
        ...

    def mark_notification_read(
        self, notification_id: str
    ) -> Optional["NotificationRecord"]:
        ...

    def mark_all_notifications_read(self, user_id: str) -> int:
        ...

    def delete_notification(self, notification_id: str) -> bool:
        ...

    def count_unread_notifications(
        self, user_id: str, now: Optional[float] = None
    ) -> int:
        ...


@dataclass
class UserRecord:
    user_id: str
    name: str
    email: str
    password_hash: str
    household: dict = field(default_factory=dict)
    preferences: dict = field(default_factory=lambda: {"notifications": True})
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        """Public view of the user; the password hash never leaves the store layer."""
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "household": dict(self.household),
            "preferences": dict(self.preferences),
            "created_at": self.created_at,
        }


@dataclass
class WaterUsageRecord:
    entry_id: str
    user_id: str
    date: date
    amounts: Dict[str, float]
    total_litres: float
    target_achieved: bool
    notes: Optional[str] = None
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        payload = {
            "id": self.entry_id,
            "user_id": self.user_id,
            "date": self.date,
            "total_litres": self.total_litres,
            "target_achieved": self.target_achieved,
            "notes": self.notes,
            "created_at": self.created_at,
        }
        payload.update(self.amounts)
        return payload


@dataclass
class LessonRecord:
    lesson_id: str
    title: str
    content: str
    type: LessonType
    duration_minutes: int
    order: int
    category: LessonCategory
    quiz_questions: list[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "id": self.lesson_id,
            "title": self.title,
            "content": self.content,
            "type": self.type,
            "duration_minutes": self.duration_minutes,
            "order": self.order,
            "category": self.category,
            "quiz_questions": [dict(q) for q in self.quiz_questions],
        }


@dataclass
class CompletedLesson:
    lesson_id: str
    completed_at: float = field(default_factory=lambda: time.time())
    quiz_score: Optional[float] = None

    def as_dict(self) -> dict:
        return {
            "lesson_id": self.lesson_id,
            "completed_at": self.completed_at,
            "quiz_score": self.quiz_score,
        }


@dataclass
class ProgressRecord:
    progress_id: str
    user_id: str
    completed_lessons: list[CompletedLesson] = field(default_factory=list)
    current_lesson_id: Optional[str] = None
    total_progress_percent: float = 0.0
    updated_at: float = field(default_factory=lambda: time.time())

    @property
    def completed_lesson_ids(self) -> set[str]:
        return {c.lesson_id for c in self.completed_lessons}


@dataclass
class NotificationRecord:
    notification_id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    is_read: bool = False
    priority: NotificationPriority = NotificationPriority.MEDIUM
    action_url: Optional[str] = None
    expires_at: Optional[float] = None
    created_at: float = field(default_factory=lambda: time.time())

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def as_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "user_id": self.user_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "is_read": self.is_read,
            "priority": self.priority,
            "action_url": self.action_url,
            "expires_at": self.expires_at,
            "created_at": self.created_at,
        }


def _entry_sort_key(entry: WaterUsageRecord) -> tuple[date, float]:
    return (entry.date, entry.created_at)


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.users: Dict[str, UserRecord] = {}
        self.usage: Dict[str, WaterUsageRecord] = {}
        self.lessons: Dict[str, LessonRecord] = {}
        self.progress: Dict[str, ProgressRecord] = {}
        self.notifications: Dict[str, NotificationRecord] = {}
        self._lock = threading.Lock()

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.users.clear()
            self.usage.clear()
            self.lessons.clear()
            self.progress.clear()
            self.notifications.clear()

    # Users

    def create_user(self, user: UserRecord) -> UserRecord:
        with self._lock:
            if any(u.email == user.email for u in self.users.values()):
                raise ConflictError("Email already exists")
            self.users[user.user_id] = user
        return replace(user)

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        user = self.users.get(user_id)
        return replace(user) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            users = list(self.users.values())
        for user in users:
            if user.email == email:
                return replace(user)
        return None

    def update_user(
        self,
        user_id: str,
        *,
        household: Optional[dict] = None,
        preferences: Optional[dict] = None,
    ) -> Optional[UserRecord]:
        with self._lock:
            user = self.users.get(user_id)
            if not user:
                return None
            if household is not None:
                user.household = dict(household)
            if preferences is not None:
                user.preferences = dict(preferences)
            return replace(user)

    # Water usage

    def save_usage_entry(self, entry: WaterUsageRecord) -> WaterUsageRecord:
        with self._lock:
            self.usage[entry.entry_id] = entry
        return entry

    def list_usage_entries(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[WaterUsageRecord]:
        with self._lock:
            entries = list(self.usage.values())
        items = [
            e
            for e in entries
            if e.user_id == user_id
            and (start is None or e.date >= start)
            and (end is None or e.date <= end)
        ]
        items.sort(key=_entry_sort_key, reverse=True)
        if limit is not None:
            items = items[:limit]
        return items

    # Lessons

    def save_lesson(self, lesson: LessonRecord) -> LessonRecord:
        with self._lock:
            self.lessons[lesson.lesson_id] = lesson
        return lesson

    def get_lesson(self, lesson_id: str) -> Optional[LessonRecord]:
        return self.lessons.get(lesson_id)

    def list_lessons(self) -> list[LessonRecord]:
        with self._lock:
            lessons = list(self.lessons.values())
        return sorted(lessons, key=lambda lesson: lesson.order)

    def count_lessons(self) -> int:
        return len(self.lessons)

    # Progress

    def _copy_progress(self, progress: ProgressRecord) -> ProgressRecord:
        return replace(
            progress,
            completed_lessons=[replace(c) for c in progress.completed_lessons],
        )

    def get_progress(self, user_id: str) -> Optional[ProgressRecord]:
        progress = self.progress.get(user_id)
        return self._copy_progress(progress) if progress else None

    def get_or_create_progress(self, user_id: str) -> ProgressRecord:
        with self._lock:
            progress = self.progress.get(user_id)
            if not progress:
                progress = ProgressRecord(progress_id=new_id(), user_id=user_id)
                self.progress[user_id] = progress
            return self._copy_progress(progress)

    def add_completed_lesson(self, user_id: str, completion: CompletedLesson) -> bool:
        with self._lock:
            progress = self.progress.setdefault(
                user_id, ProgressRecord(progress_id=new_id(), user_id=user_id)
            )
            if completion.lesson_id in progress.completed_lesson_ids:
                return False
            progress.completed_lessons.append(replace(completion))
            progress.updated_at = time.time()
            return True

    def update_progress(
        self,
        user_id: str,
        *,
        current_lesson_id: Optional[str],
        total_progress_percent: float,
    ) -> ProgressRecord:
        with self._lock:
            progress = self.progress.setdefault(
                user_id, ProgressRecord(progress_id=new_id(), user_id=user_id)
            )
            progress.current_lesson_id = current_lesson_id
            progress.total_progress_percent = total_progress_percent
            progress.updated_at = time.time()
            return self._copy_progress(progress)

    # Notifications

    def save_notification(self, notification: NotificationRecord) -> NotificationRecord:
        with self._lock:
            self.notifications[notification.notification_id] = notification
        return replace(notification)

    def get_notification(self, notification_id: str) -> Optional[NotificationRecord]:
        notification = self.notifications.get(notification_id)
        return replace(notification) if notification else None

    def _visible_notifications(
        self, user_id: str, now: Optional[float]
    ) -> list[NotificationRecord]:
        now = time.time() if now is None else now
        with self._lock:
            notifications = list(self.notifications.values())
        # Newest insertions first so the stable sort breaks timestamp ties by recency.
        return [
            n
            for n in reversed(notifications)
            if n.user_id == user_id and not n.is_expired(now)
        ]

    def list_notifications(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
        limit: int = 20,
        now: Optional[float] = None,
    ) -> list[NotificationRecord]:
        items = [
            n
            for n in self._visible_notifications(user_id, now)
            if (not unread_only or not n.is_read)
            and (notification_type is None or n.type == notification_type)
        ]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return [replace(n) for n in items[:limit]]

    def mark_notification_read(
        self, notification_id: str
    ) -> Optional[NotificationRecord]:
        with self._lock:
            notification = self.notifications.get(notification_id)
            if not notification:
                return None
            notification.is_read = True
            return replace(notification)

    def mark_all_notifications_read(self, user_id: str) -> int:
        updated = 0
        with self._lock:
            for notification in self.notifications.values():
                if notification.user_id == user_id and not notification.is_read:
                    notification.is_read = True
                    updated += 1
        return updated

    def delete_notification(self, notification_id: str) -> bool:
        with self._lock:
            return self.notifications.pop(notification_id, None) is not None

    def count_unread_notifications(
        self, user_id: str, now: Optional[float] = None
    ) -> int:
        return sum(
            1 for n in self._visible_notifications(user_id, now) if not n.is_read
        )


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        engine_kwargs: dict = {
            "future": True,
            "pool_pre_ping": True,
            "pool_recycle": 1800,
        }
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # One shared connection, otherwise each thread sees its own empty database.
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    # Row conversion

    def _to_user_record(self, row: "UserRow") -> UserRecord:
        return UserRecord(
            user_id=row.id,
            name=row.name,
            email=row.email,
            password_hash=row.password_hash,
            household=dict(row.household or {}),
            preferences=dict(row.preferences or {}),
            created_at=row.created_at,
        )

    def _to_usage_record(self, row: "WaterUsageRow") -> WaterUsageRecord:
        return WaterUsageRecord(
            entry_id=row.id,
            user_id=row.user_id,
            date=row.date,
            amounts=dict(row.amounts or {}),
            total_litres=row.total_litres,
            target_achieved=row.target_achieved,
            notes=row.notes,
            created_at=row.created_at,
        )

    def _to_lesson_record(self, row: "LessonRow") -> LessonRecord:
        return LessonRecord(
            lesson_id=row.id,
            title=row.title,
            content=row.content,
            type=LessonType(row.type),
            duration_minutes=row.duration_minutes,
            order=row.order,
            category=LessonCategory(row.category),
            quiz_questions=list(row.quiz_questions or []),
        )

    def _to_progress_record(
        self, session: Session, row: "ProgressRow"
    ) -> ProgressRecord:
        stmt = (
            select(CompletedLessonRow)
            .where(CompletedLessonRow.user_id == row.user_id)
            .order_by(CompletedLessonRow.completed_at.asc(), CompletedLessonRow.id.asc())
        )
        completions = [
            CompletedLesson(
                lesson_id=c.lesson_id,
                completed_at=c.completed_at,
                quiz_score=c.quiz_score,
            )
            for c in session.execute(stmt).scalars()
        ]
        return ProgressRecord(
            progress_id=row.id,
            user_id=row.user_id,
            completed_lessons=completions,
            current_lesson_id=row.current_lesson_id,
            total_progress_percent=row.total_progress_percent,
            updated_at=row.updated_at,
        )

    def _to_notification_record(self, row: "NotificationRow") -> NotificationRecord:
        return NotificationRecord(
            notification_id=row.id,
            user_id=row.user_id,
            type=NotificationType(row.type),
            title=row.title,
            message=row.message,
            is_read=row.is_read,
            priority=NotificationPriority(row.priority),
            action_url=row.action_url,
            expires_at=row.expires_at,
            created_at=row.created_at,
        )

    # Users

    def create_user(self, user: UserRecord) -> UserRecord:
        with self.Session() as session:
            session.add(
                UserRow(
                    id=user.user_id,
                    name=user.name,
                    email=user.email,
                    password_hash=user.password_hash,
                    household=user.household,
                    preferences=user.preferences,
                    created_at=user.created_at,
                )
            )
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError("Email already exists") from exc
        return user

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.get(UserRow, user_id)
            return self._to_user_record(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.email == email)
            ).scalar_one_or_none()
            return self._to_user_record(row) if row else None

    def update_user(
        self,
        user_id: str,
        *,
        household: Optional[dict] = None,
        preferences: Optional[dict] = None,
    ) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.get(UserRow, user_id)
            if not row:
                return None
            if household is not None:
                row.household = dict(household)
            if preferences is not None:
                row.preferences = dict(preferences)
            session.commit()
            session.refresh(row)
            return self._to_user_record(row)

    # Water usage

    def save_usage_entry(self, entry: WaterUsageRecord) -> WaterUsageRecord:
        with self.Session() as session:
            session.add(
                WaterUsageRow(
                    id=entry.entry_id,
                    user_id=entry.user_id,
                    date=entry.date,
                    amounts=entry.amounts,
                    total_litres=entry.total_litres,
                    target_achieved=entry.target_achieved,
                    notes=entry.notes,
                    created_at=entry.created_at,
                )
            )
            session.commit()
        return entry

    def list_usage_entries(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[WaterUsageRecord]:
        with self.Session() as session:
            stmt = select(WaterUsageRow).where(WaterUsageRow.user_id == user_id)
            if start is not None:
                stmt = stmt.where(WaterUsageRow.date >= start)
            if end is not None:
                stmt = stmt.where(WaterUsageRow.date <= end)
            stmt = stmt.order_by(
                WaterUsageRow.date.desc(), WaterUsageRow.created_at.desc()
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            return [self._to_usage_record(r) for r in session.execute(stmt).scalars()]

    # Lessons

    def save_lesson(self, lesson: LessonRecord) -> LessonRecord:
        with self.Session() as session:
            row = session.get(LessonRow, lesson.lesson_id)
            if not row:
                row = LessonRow(id=lesson.lesson_id)
                session.add(row)
            row.title = lesson.title
            row.content = lesson.content
            row.type = lesson.type.value
            row.duration_minutes = lesson.duration_minutes
            row.order = lesson.order
            row.category = lesson.category.value
            row.quiz_questions = lesson.quiz_questions
            session.commit()
        return lesson

    def get_lesson(self, lesson_id: str) -> Optional[LessonRecord]:
        with self.Session() as session:
            row = session.get(LessonRow, lesson_id)
            return self._to_lesson_record(row) if row else None

    def list_lessons(self) -> list[LessonRecord]:
        with self.Session() as session:
            stmt = select(LessonRow).order_by(LessonRow.order.asc())
            return [self._to_lesson_record(r) for r in session.execute(stmt).scalars()]

    def count_lessons(self) -> int:
        with self.Session() as session:
            return session.execute(select(func.count(LessonRow.id))).scalar_one()

    # Progress

    def _progress_row(self, session: Session, user_id: str) -> Optional["ProgressRow"]:
        return session.execute(
            select(ProgressRow).where(ProgressRow.user_id == user_id)
        ).scalar_one_or_none()

    def _ensure_progress_row(self, session: Session, user_id: str) -> "ProgressRow":
        row = self._progress_row(session, user_id)
        if row:
            return row
        session.add(
            ProgressRow(
                id=new_id(),
                user_id=user_id,
                current_lesson_id=None,
                total_progress_percent=0.0,
                updated_at=time.time(),
            )
        )
        try:
            session.commit()
        except IntegrityError:
            # Another request created it first.
            session.rollback()
        return self._progress_row(session, user_id)

    def get_progress(self, user_id: str) -> Optional[ProgressRecord]:
        with self.Session() as session:
            row = self._progress_row(session, user_id)
            return self._to_progress_record(session, row) if row else None

    def get_or_create_progress(self, user_id: str) -> ProgressRecord:
        with self.Session() as session:
            row = self._ensure_progress_row(session, user_id)
            return self._to_progress_record(session, row)

    def add_completed_lesson(self, user_id: str, completion: CompletedLesson) -> bool:
        with self.Session() as session:
            self._ensure_progress_row(session, user_id)
            session.add(
                CompletedLessonRow(
                    user_id=user_id,
                    lesson_id=completion.lesson_id,
                    completed_at=completion.completed_at,
                    quiz_score=completion.quiz_score,
                )
            )
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                return False
            return True

    def update_progress(
        self,
        user_id: str,
        *,
        current_lesson_id: Optional[str],
        total_progress_percent: float,
    ) -> ProgressRecord:
        with self.Session() as session:
            row = self._ensure_progress_row(session, user_id)
            row.current_lesson_id = current_lesson_id
            row.total_progress_percent = total_progress_percent
            row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            return self._to_progress_record(session, row)

    # Notifications

    def save_notification(self, notification: NotificationRecord) -> NotificationRecord:
        with self.Session() as session:
            session.add(
                NotificationRow(
                    id=notification.notification_id,
                    user_id=notification.user_id,
                    type=notification.type.value,
                    title=notification.title,
                    message=notification.message,
                    is_read=notification.is_read,
                    priority=notification.priority.value,
                    action_url=notification.action_url,
                    expires_at=notification.expires_at,
                    created_at=notification.created_at,
                )
            )
            session.commit()
        return notification

    def get_notification(self, notification_id: str) -> Optional[NotificationRecord]:
        with self.Session() as session:
            row = session.get(NotificationRow, notification_id)
            return self._to_notification_record(row) if row else None

    def _visible(self, user_id: str, now: Optional[float]):
        now = time.time() if now is None else now
        return select(NotificationRow).where(
            NotificationRow.user_id == user_id,
            (NotificationRow.expires_at == None) | (NotificationRow.expires_at > now),
        )

    def list_notifications(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
        limit: int = 20,
        now: Optional[float] = None,
    ) -> list[NotificationRecord]:
        with self.Session() as session:
            stmt = self._visible(user_id, now)
            if unread_only:
                stmt = stmt.where(NotificationRow.is_read == False)
            if notification_type is not None:
                stmt = stmt.where(NotificationRow.type == notification_type.value)
            stmt = stmt.order_by(NotificationRow.created_at.desc()).limit(limit)
            return [
                self._to_notification_record(r) for r in session.execute(stmt).scalars()
            ]

    def mark_notification_read(
        self, notification_id: str
    ) -> Optional[NotificationRecord]:
        with self.Session() as session:
            row = session.get(NotificationRow, notification_id)
            if not row:
                return None
            row.is_read = True
            session.commit()
            session.refresh(row)
            return self._to_notification_record(row)

    def mark_all_notifications_read(self, user_id: str) -> int:
        with self.Session() as session:
            updated = (
                session.query(NotificationRow)
                .filter(
                    NotificationRow.user_id == user_id,
                    NotificationRow.is_read == False,
                )
                .update({NotificationRow.is_read: True}, synchronize_session=False)
            )
            session.commit()
            return updated or 0

    def delete_notification(self, notification_id: str) -> bool:
        with self.Session() as session:
            row = session.get(NotificationRow, notification_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    def count_unread_notifications(
        self, user_id: str, now: Optional[float] = None
    ) -> int:
        with self.Session() as session:
            stmt = (
                self._visible(user_id, now)
                .where(NotificationRow.is_read == False)
                .with_only_columns(func.count(NotificationRow.id))
            )
            return session.execute(stmt).scalar_one()


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    household = Column(JSON, nullable=False, default=dict)
    preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(Float, nullable=False)


class WaterUsageRow(Base):
    __tablename__ = "water_usage"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    amounts = Column(JSON, nullable=False)
    total_litres = Column(Float, nullable=False)
    target_achieved = Column(Boolean, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)


class LessonRow(Base):
    __tablename__ = "lessons"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    type = Column(String, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    order = Column(Integer, nullable=False, index=True)
    category = Column(String, nullable=False)
    quiz_questions = Column(JSON, nullable=False, default=list)


class ProgressRow(Base):
    __tablename__ = "user_progress"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, unique=True)
    current_lesson_id = Column(String, nullable=True)
    total_progress_percent = Column(Float, nullable=False, default=0.0)
    updated_at = Column(Float, nullable=False)


class CompletedLessonRow(Base):
    __tablename__ = "completed_lessons"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_user_lesson"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    lesson_id = Column(String, nullable=False)
    completed_at = Column(Float, nullable=False)
    quiz_score = Column(Float, nullable=True)


class NotificationRow(Base):
    __tablename__ = "notifications"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    priority = Column(String, nullable=False, default="medium")
    action_url = Column(String, nullable=True)
    expires_at = Column(Float, nullable=True)
    created_at = Column(Float, nullable=False, index=True)
