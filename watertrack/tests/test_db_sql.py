import time
import unittest
from datetime import date, timedelta

from watertrack.db import (
    CompletedLesson,
    LessonRecord,
    NotificationRecord,
    SqlDbClient,
    UserRecord,
    WaterUsageRecord,
    new_id,
)
from watertrack.enums import LessonCategory, LessonType, NotificationType
from watertrack.errors import ConflictError

TODAY = date(2024, 6, 15)


class SqlDbClientTests(unittest.TestCase):
    """
    Runs the SQL client against an in-memory SQLite database.
    """

    def setUp(self):
        self.db = SqlDbClient("sqlite+pysqlite:///:memory:")

    def tearDown(self):
        self.db.engine.dispose()

    def add_user(self, email="ada@example.com"):
        return self.db.create_user(
            UserRecord(
                user_id=new_id(),
                name="Ada",
                email=email,
                password_hash="hash",
                household={"size": 2},
            )
        )

    def add_entry(self, user_id, day, total, created_at=None):
        entry = WaterUsageRecord(
            entry_id=new_id(),
            user_id=user_id,
            date=day,
            amounts={"shower": total},
            total_litres=total,
            target_achieved=total <= 50,
        )
        if created_at is not None:
            entry.created_at = created_at
        return self.db.save_usage_entry(entry)

    def add_lesson(self, order):
        return self.db.save_lesson(
            LessonRecord(
                lesson_id=f"lesson-{order}",
                title=f"Lesson {order}",
                content="Body",
                type=LessonType.INFO,
                duration_minutes=5,
                order=order,
                category=LessonCategory.WATER_CONSERVATION,
            )
        )

    def test_users(self):
        user = self.add_user()
        fetched = self.db.get_user(user.user_id)
        self.assertEqual(fetched.email, "ada@example.com")
        self.assertEqual(fetched.household, {"size": 2})
        self.assertEqual(self.db.get_user_by_email("ada@example.com").user_id, user.user_id)
        self.assertIsNone(self.db.get_user_by_email("nobody@example.com"))

        updated = self.db.update_user(user.user_id, preferences={"notifications": False})
        self.assertFalse(updated.preferences["notifications"])
        self.assertEqual(updated.household, {"size": 2})
        self.assertIsNone(self.db.update_user("missing", household={}))

    def test_duplicate_email_conflicts(self):
        self.add_user()
        with self.assertRaises(ConflictError):
            self.add_user()

    def test_usage_entries_order_and_range(self):
        user = self.add_user()
        now = time.time()
        self.add_entry(user.user_id, TODAY - timedelta(days=1), 10, created_at=now)
        early = self.add_entry(user.user_id, TODAY, 20, created_at=now)
        late = self.add_entry(user.user_id, TODAY, 30, created_at=now + 1)
        self.add_entry("someone-else", TODAY, 99)

        entries = self.db.list_usage_entries(user.user_id)
        self.assertEqual(
            [e.entry_id for e in entries[:2]], [late.entry_id, early.entry_id]
        )
        self.assertEqual(entries[2].date, TODAY - timedelta(days=1))

        today_only = self.db.list_usage_entries(user.user_id, start=TODAY, end=TODAY)
        self.assertEqual(len(today_only), 2)
        self.assertEqual(len(self.db.list_usage_entries(user.user_id, limit=1)), 1)
        self.assertEqual(today_only[0].amounts, {"shower": 30})

    def test_lessons(self):
        self.add_lesson(2)
        self.add_lesson(1)
        self.assertEqual([lesson.order for lesson in self.db.list_lessons()], [1, 2])
        self.assertEqual(self.db.count_lessons(), 2)
        self.assertEqual(self.db.get_lesson("lesson-1").type, LessonType.INFO)
        self.assertIsNone(self.db.get_lesson("missing"))

    def test_completion_is_recorded_once(self):
        self.add_lesson(1)
        self.assertIsNone(self.db.get_progress("u1"))
        self.assertTrue(
            self.db.add_completed_lesson("u1", CompletedLesson("lesson-1", quiz_score=75))
        )
        self.assertFalse(self.db.add_completed_lesson("u1", CompletedLesson("lesson-1")))

        progress = self.db.update_progress(
            "u1", current_lesson_id=None, total_progress_percent=100.0
        )
        self.assertEqual(progress.completed_lesson_ids, {"lesson-1"})
        self.assertEqual(progress.completed_lessons[0].quiz_score, 75)
        self.assertEqual(progress.total_progress_percent, 100.0)
        self.assertEqual(self.db.get_or_create_progress("u1").progress_id, progress.progress_id)

    def test_notifications(self):
        now = time.time()
        ids = []
        for offset, kind in enumerate(
            [NotificationType.TIP, NotificationType.SYSTEM, NotificationType.TIP]
        ):
            notification = self.db.save_notification(
                NotificationRecord(
                    notification_id=new_id(),
                    user_id="u1",
                    type=kind,
                    title=f"n{offset}",
                    message="Body",
                    created_at=now + offset,
                )
            )
            ids.append(notification.notification_id)
        self.db.save_notification(
            NotificationRecord(
                notification_id=new_id(),
                user_id="u1",
                type=NotificationType.TIP,
                title="expired",
                message="Body",
                expires_at=now - 1,
                created_at=now + 10,
            )
        )

        listed = self.db.list_notifications("u1", now=now)
        self.assertEqual([n.title for n in listed], ["n2", "n1", "n0"])
        tips = self.db.list_notifications(
            "u1", notification_type=NotificationType.TIP, now=now
        )
        self.assertEqual([n.title for n in tips], ["n2", "n0"])
        self.assertEqual(self.db.count_unread_notifications("u1", now=now), 3)

        self.assertTrue(self.db.mark_notification_read(ids[0]).is_read)
        unread = self.db.list_notifications("u1", unread_only=True, now=now)
        self.assertEqual([n.title for n in unread], ["n2", "n1"])

        self.assertEqual(self.db.mark_all_notifications_read("u1"), 3)
        self.assertEqual(self.db.count_unread_notifications("u1", now=now), 0)

        self.assertTrue(self.db.delete_notification(ids[1]))
        self.assertFalse(self.db.delete_notification(ids[1]))
        self.assertIsNone(self.db.get_notification(ids[1]))


if __name__ == "__main__":
    unittest.main()
