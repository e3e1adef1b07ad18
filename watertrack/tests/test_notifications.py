import time
import unittest
from datetime import datetime, timedelta, timezone

from watertrack.db import InMemoryDbClient
from watertrack.enums import NotificationPriority, NotificationType
from watertrack.errors import NotFoundError, ValidationError
from watertrack.notifications import NotificationService


class NotificationServiceTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.service = NotificationService(self.db)

    def create(self, user_id="u1", notification_type="tip", **kwargs):
        return self.service.create(
            user_id, notification_type, kwargs.pop("title", "Title"), "Body", **kwargs
        )

    def test_create_defaults(self):
        notification = self.create()
        self.assertFalse(notification.is_read)
        self.assertEqual(notification.priority, NotificationPriority.MEDIUM)
        self.assertEqual(notification.type, NotificationType.TIP)

    def test_create_reports_every_missing_field(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create("u1", None, "", "  ", priority="urgent")
        self.assertEqual(
            {e.field for e in ctx.exception.errors},
            {"type", "title", "message", "priority"},
        )

    def test_list_newest_first_with_filters(self):
        self.create(title="first")
        self.create(notification_type="system", title="second")
        read = self.create(title="third")
        self.service.mark_read("u1", read.notification_id)
        self.create(user_id="u2", title="other user")

        titles = [n.title for n in self.service.list_notifications("u1")]
        self.assertEqual(titles, ["third", "second", "first"])

        unread = self.service.list_notifications("u1", unread_only=True)
        self.assertEqual([n.title for n in unread], ["second", "first"])

        tips = self.service.list_notifications("u1", notification_type="tip")
        self.assertEqual([n.title for n in tips], ["third", "first"])

        self.assertEqual(len(self.service.list_notifications("u1", limit=1)), 1)

    def test_list_validates_arguments(self):
        with self.assertRaises(ValidationError):
            self.service.list_notifications("u1", limit=0)
        with self.assertRaises(ValidationError):
            self.service.list_notifications("u1", limit=101)
        with self.assertRaises(ValidationError):
            self.service.list_notifications("u1", notification_type="spam")

    def test_expired_notifications_are_hidden(self):
        self.create(title="stale", expires_at=time.time() - 10)
        self.create(
            title="fresh", expires_at=datetime.now(timezone.utc) + timedelta(hours=1)
        )
        self.assertEqual(
            [n.title for n in self.service.list_notifications("u1")], ["fresh"]
        )
        self.assertEqual(self.service.unread_count("u1"), 1)

    def test_naive_expiry_is_utc(self):
        notification = self.create(expires_at=datetime(2030, 1, 1))
        self.assertEqual(
            notification.expires_at,
            datetime(2030, 1, 1, tzinfo=timezone.utc).timestamp(),
        )
        past = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=1)
        self.create(title="stale", expires_at=past)
        self.assertEqual(
            [n.expires_at for n in self.service.list_notifications("u1")],
            [notification.expires_at],
        )

    def test_mark_read_idempotent_and_scoped(self):
        notification = self.create()
        self.assertTrue(self.service.mark_read("u1", notification.notification_id).is_read)
        self.assertTrue(self.service.mark_read("u1", notification.notification_id).is_read)
        with self.assertRaises(NotFoundError):
            self.service.mark_read("u2", notification.notification_id)
        with self.assertRaises(NotFoundError):
            self.service.mark_read("u1", "missing")

    def test_mark_all_read_counts_changes(self):
        self.create()
        self.create()
        self.create(user_id="u2")
        self.assertEqual(self.service.unread_count("u1"), 2)
        self.assertEqual(self.service.mark_all_read("u1"), 2)
        self.assertEqual(self.service.mark_all_read("u1"), 0)
        self.assertEqual(self.service.unread_count("u1"), 0)
        self.assertEqual(self.service.unread_count("u2"), 1)

    def test_delete(self):
        notification = self.create()
        with self.assertRaises(NotFoundError):
            self.service.delete("u2", notification.notification_id)
        self.service.delete("u1", notification.notification_id)
        self.assertEqual(self.service.list_notifications("u1"), [])
        with self.assertRaises(NotFoundError):
            self.service.delete("u1", notification.notification_id)


if __name__ == "__main__":
    unittest.main()
