import threading
import unittest
from datetime import datetime, timedelta, timezone

import jwt

from watertrack.auth import INVALID_CREDENTIALS, AuthService
from watertrack.config import Settings
from watertrack.db import InMemoryDbClient
from watertrack.errors import ConflictError, UnauthorizedError, ValidationError
from watertrack.security import decode_access_token, hash_password, verify_password
from watertrack.users import UserService


class SecurityTests(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(jwt_secret="test-secret")

    def test_hash_round_trip(self):
        hashed = hash_password("password123", self.settings)
        self.assertNotEqual(hashed, "password123")
        self.assertTrue(verify_password("password123", hashed, self.settings))
        self.assertFalse(verify_password("password124", hashed, self.settings))

    def test_malformed_hash_does_not_verify(self):
        self.assertFalse(verify_password("password123", "", self.settings))
        self.assertFalse(verify_password("password123", "not-a-hash", self.settings))

    def test_token_signed_with_other_secret_is_rejected(self):
        token = jwt.encode(
            {"sub": "u1", "exp": datetime.now(timezone.utc) + timedelta(minutes=5), "type": "access"},
            "other-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.InvalidTokenError):
            decode_access_token(token, self.settings)


class AuthServiceTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.settings = Settings(jwt_secret="test-secret", access_token_expire_minutes=60)
        self.auth = AuthService(self.db, self.settings)

    def test_register_returns_token_for_user(self):
        user, token = self.auth.register("Ada", "Ada@Example.com", "password123")
        self.assertEqual(user.email, "ada@example.com")
        self.assertNotEqual(user.password_hash, "password123")
        self.assertEqual(decode_access_token(token, self.settings), user.user_id)
        self.assertEqual(user.household["size"], 1)
        self.assertTrue(user.preferences["notifications"])

    def test_token_expires_after_configured_minutes(self):
        _, token = self.auth.register("Ada", "ada@example.com", "password123")
        payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
        self.assertEqual(payload["exp"] - payload["iat"], 60 * 60)

    def test_register_reports_every_bad_field(self):
        with self.assertRaises(ValidationError) as ctx:
            self.auth.register("  ", "not-an-email", "123")
        self.assertEqual(
            {e.field for e in ctx.exception.errors}, {"name", "email", "password"}
        )
        self.assertIsNone(self.db.get_user_by_email("not-an-email"))

    def test_register_rejects_bad_household(self):
        with self.assertRaises(ValidationError) as ctx:
            self.auth.register(
                "Ada", "ada@example.com", "password123", household={"size": 0}
            )
        self.assertEqual([e.field for e in ctx.exception.errors], ["household.size"])

    def test_duplicate_email_is_case_insensitive(self):
        self.auth.register("Ada", "ada@example.com", "password123")
        with self.assertRaises(ConflictError) as ctx:
            self.auth.register("Other", "ADA@example.com", "password456")
        self.assertEqual(ctx.exception.message, "Email already exists")

    def test_concurrent_registration_creates_one_user(self):
        barrier = threading.Barrier(5)
        outcomes = []

        def register():
            barrier.wait()
            try:
                self.auth.register("Ada", "ada@example.com", "password123")
                outcomes.append("created")
            except ConflictError:
                outcomes.append("conflict")

        threads = [threading.Thread(target=register) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(sorted(outcomes), ["conflict"] * 4 + ["created"])
        self.assertEqual(len(self.db.users), 1)

    def test_login(self):
        registered, _ = self.auth.register("Ada", "ada@example.com", "password123")
        user, token = self.auth.login(" ADA@example.com ", "password123")
        self.assertEqual(user.user_id, registered.user_id)
        self.assertEqual(self.auth.authenticate_token(token).user_id, registered.user_id)

    def test_login_failures_share_one_message(self):
        self.auth.register("Ada", "ada@example.com", "password123")
        messages = []
        for email, password in (
            ("ada@example.com", "wrong-password"),
            ("nobody@example.com", "password123"),
            ("", ""),
        ):
            with self.assertRaises(UnauthorizedError) as ctx:
                self.auth.login(email, password)
            messages.append(ctx.exception.message)
        self.assertEqual(set(messages), {INVALID_CREDENTIALS})

    def test_authenticate_token_failures(self):
        with self.assertRaises(UnauthorizedError) as ctx:
            self.auth.authenticate_token(None)
        self.assertEqual(ctx.exception.message, "Authentication token missing")

        with self.assertRaises(UnauthorizedError) as ctx:
            self.auth.authenticate_token("garbage")
        self.assertEqual(ctx.exception.message, "Invalid token")

        past = datetime.now(timezone.utc) - timedelta(minutes=5)
        expired = jwt.encode(
            {"sub": "u1", "exp": past, "type": "access"}, "test-secret", algorithm="HS256"
        )
        with self.assertRaises(UnauthorizedError) as ctx:
            self.auth.authenticate_token(expired)
        self.assertEqual(ctx.exception.message, "Token expired")

    def test_token_for_deleted_user_is_rejected(self):
        user, token = self.auth.register("Ada", "ada@example.com", "password123")
        del self.db.users[user.user_id]
        with self.assertRaises(UnauthorizedError):
            self.auth.authenticate_token(token)


class UserServiceTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.auth = AuthService(self.db, Settings(jwt_secret="test-secret"))
        self.users = UserService(self.db)
        self.user, _ = self.auth.register("Ada", "ada@example.com", "password123")

    def test_update_household_merges(self):
        updated = self.users.update_household(
            self.user.user_id, {"size": 4, "hasGarden": True, "gardenSize": 30}
        )
        self.assertEqual(updated.household["size"], 4)
        self.assertEqual(updated.household["gardenSize"], 30)
        self.assertEqual(updated.household["waterSource"], "mains")

        updated = self.users.update_household(self.user.user_id, {"hasGarden": False})
        self.assertEqual(updated.household["gardenSize"], 0)
        self.assertEqual(updated.household["size"], 4)

    def test_update_household_validation(self):
        with self.assertRaises(ValidationError) as ctx:
            self.users.update_household(
                self.user.user_id, {"size": "big", "waterSource": "river", "poolSize": -2}
            )
        self.assertEqual(
            {e.field for e in ctx.exception.errors},
            {"household.size", "household.waterSource", "household.poolSize"},
        )

    def test_update_preferences(self):
        updated = self.users.update_preferences(self.user.user_id, {"notifications": False})
        self.assertFalse(updated.preferences["notifications"])
        self.assertFalse(self.users.notifications_enabled(self.user.user_id))
        with self.assertRaises(ValidationError):
            self.users.update_preferences(self.user.user_id, {"notifications": "no"})


if __name__ == "__main__":
    unittest.main()
