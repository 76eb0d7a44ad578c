import hashlib
import os
import tempfile
import unittest
from datetime import date, timedelta


class TestSessionStore(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from soshi import create_app
        from soshi.clock import utcnow
        from soshi.db import db
        from soshi.models.session_model import Session
        from soshi.repositories import session_repository, user_repository
        from soshi.services import auth_service

        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "TESTING": True,
        })
        cls.db = db
        cls.utcnow = staticmethod(utcnow)
        cls.Session = Session
        cls.session_repository = session_repository
        cls.user_repository = user_repository
        cls.auth_service = auth_service

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        self.ctx = self.app.app_context()
        self.ctx.push()
        self.db.drop_all()
        self.db.create_all()

    def tearDown(self):
        self.db.session.remove()
        self.ctx.pop()

    def _create_user(self, email="grace@example.com"):
        return self.user_repository.create_user(
            email=email,
            password_hash="not-a-real-hash",
            first_name="Grace",
            last_name="Hopper",
            date_of_birth=date(1906, 12, 9),
        )

    def test_created_session_resolves_to_user(self):
        user = self._create_user()

        token = self.auth_service.create_session(user)

        resolved = self.auth_service.resolve_session(token)
        self.assertIsNotNone(resolved)
        self.assertEqual(resolved.id, user.id)

    def test_only_token_hash_is_stored(self):
        user = self._create_user()

        token = self.auth_service.create_session(user)

        row = self.Session.query.one()
        self.assertNotEqual(row.token_hash, token)
        self.assertEqual(row.token_hash, hashlib.sha256(token.encode()).hexdigest())

    def test_session_expires_after_ttl(self):
        user = self._create_user()

        token = self.auth_service.create_session(user)

        row = self.Session.query.one()
        remaining = row.expires_at - self.utcnow()
        self.assertGreater(remaining, timedelta(days=6, hours=23))
        self.assertLessEqual(remaining, timedelta(days=7))
        self.assertIsNotNone(self.auth_service.resolve_session(token))

    def test_expired_session_is_deleted_on_lookup(self):
        user = self._create_user()
        token = self.auth_service.create_session(user, ttl=timedelta(seconds=-1))

        self.assertIsNone(self.auth_service.resolve_session(token))
        self.assertEqual(self.Session.query.count(), 0)

    def test_missing_and_unknown_tokens_are_anonymous(self):
        self.assertIsNone(self.auth_service.resolve_session(None))
        self.assertIsNone(self.auth_service.resolve_session(""))
        self.assertIsNone(self.auth_service.resolve_session("does-not-exist"))

    def test_revoke_session_is_idempotent(self):
        user = self._create_user()
        token = self.auth_service.create_session(user)

        self.assertTrue(self.auth_service.revoke_session(token))
        self.assertFalse(self.auth_service.revoke_session(token))
        self.assertFalse(self.auth_service.revoke_session("never-issued"))
        self.assertIsNone(self.auth_service.resolve_session(token))

    def test_user_may_hold_many_sessions(self):
        user = self._create_user()
        other = self._create_user("other@example.com")

        first = self.auth_service.create_session(user)
        second = self.auth_service.create_session(user)
        kept = self.auth_service.create_session(other)

        self.assertNotEqual(first, second)
        self.assertEqual(self.session_repository.count_user_sessions(user.id), 2)

        self.assertEqual(self.auth_service.revoke_user_sessions(user.id), 2)
        self.assertIsNone(self.auth_service.resolve_session(first))
        self.assertIsNone(self.auth_service.resolve_session(second))
        self.assertEqual(self.auth_service.resolve_session(kept).id, other.id)

    def test_purge_removes_only_expired_sessions(self):
        user = self._create_user()
        live = self.auth_service.create_session(user)
        self.auth_service.create_session(user, ttl=timedelta(seconds=-5))
        self.auth_service.create_session(user, ttl=timedelta(days=-1))

        self.assertEqual(self.auth_service.purge_expired_sessions(), 2)
        self.assertEqual(self.Session.query.count(), 1)
        self.assertIsNotNone(self.auth_service.resolve_session(live))

    def test_purge_sessions_cli_command(self):
        user = self._create_user()
        self.auth_service.create_session(user, ttl=timedelta(seconds=-5))

        result = self.app.test_cli_runner().invoke(args=["purge-sessions"])

        self.assertEqual(result.exit_code, 0)
        self.assertIn("Purged 1 expired sessions", result.output)
        self.db.session.expire_all()
        self.assertEqual(self.Session.query.count(), 0)


if __name__ == "__main__":
    unittest.main()
