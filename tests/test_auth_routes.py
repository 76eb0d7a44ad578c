import os
import tempfile
import unittest
from datetime import timedelta


class TestAuthRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from soshi import create_app
        from soshi.clock import utcnow
        from soshi.db import db
        from soshi.models.session_model import Session
        from soshi.models.user_model import User

        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "TESTING": True,
        })
        cls.db = db
        cls.utcnow = staticmethod(utcnow)
        cls.Session = Session
        cls.User = User

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()
        self.client = self.app.test_client()

    def _register_payload(self, email="ada@example.com", password="pass1234", **extra):
        payload = {
            "email": email,
            "password": password,
            "first_name": "Ada",
            "last_name": "Lovelace",
            "date_of_birth": "1990-12-10",
        }
        payload.update(extra)
        return payload

    def _set_cookie_headers(self, response):
        return [
            value for value in response.headers.getlist("Set-Cookie")
            if value.startswith("session_token=")
        ]

    def test_register_sets_session_cookie(self):
        response = self.client.post("/api/auth/register", json=self._register_payload())

        self.assertEqual(response.status_code, 201)
        body = response.get_json()
        self.assertEqual(body["user"]["email"], "ada@example.com")
        self.assertNotIn("password_hash", body["user"])

        cookies = self._set_cookie_headers(response)
        self.assertEqual(len(cookies), 1)
        self.assertIn("HttpOnly", cookies[0])
        self.assertIn("SameSite=Lax", cookies[0])
        self.assertIn(f"Max-Age={7 * 24 * 60 * 60}", cookies[0])

        session_response = self.client.get("/api/auth/session")
        self.assertEqual(session_response.get_json()["user"]["id"], body["user"]["id"])

    def test_register_duplicate_email_returns_conflict(self):
        first = self.client.post("/api/auth/register", json=self._register_payload())
        self.assertEqual(first.status_code, 201)

        second = self.app.test_client().post(
            "/api/auth/register",
            json=self._register_payload(email="  ADA@example.com "),
        )
        self.assertEqual(second.status_code, 409)
        self.assertEqual(self._set_cookie_headers(second), [])

        with self.app.app_context():
            self.assertEqual(self.User.query.count(), 1)

    def test_register_rejects_missing_fields(self):
        payload = self._register_payload()
        payload.pop("first_name")

        response = self.client.post("/api/auth/register", json=payload)

        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body["error"], "Invalid request")
        self.assertIn("first_name", body["details"])

    def test_register_rejects_non_json_body(self):
        response = self.client.post("/api/auth/register", data="not json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Invalid JSON body")

    def test_login_with_bad_password_sets_no_cookie(self):
        self.client.post("/api/auth/register", json=self._register_payload())
        fresh = self.app.test_client()

        response = fresh.post(
            "/api/auth/login",
            json={"email": "ada@example.com", "password": "wrong-password"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Invalid email or password")
        self.assertEqual(self._set_cookie_headers(response), [])
        self.assertIsNone(fresh.get_cookie("session_token"))

    def test_login_with_unknown_email_uses_same_message(self):
        response = self.client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "pass1234"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Invalid email or password")

    def test_login_creates_additional_session(self):
        self.client.post("/api/auth/register", json=self._register_payload())
        other = self.app.test_client()

        response = other.post(
            "/api/auth/login",
            json={"email": "Ada@Example.com", "password": "pass1234"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(other.get_cookie("session_token"))
        with self.app.app_context():
            self.assertEqual(self.Session.query.count(), 2)

    def test_session_is_null_when_anonymous(self):
        response = self.client.get("/api/auth/session")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"user": None})

    def test_logout_deletes_session_and_is_idempotent(self):
        self.client.post("/api/auth/register", json=self._register_payload())

        response = self.client.post("/api/auth/logout")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"success": True})
        cookies = self._set_cookie_headers(response)
        self.assertTrue(cookies)
        self.assertIn("Max-Age=0", cookies[-1])

        with self.app.app_context():
            self.assertEqual(self.Session.query.count(), 0)

        again = self.client.post("/api/auth/logout")
        self.assertEqual(again.status_code, 200)
        self.assertEqual(self.client.get("/api/auth/session").get_json(), {"user": None})

    def test_expired_cookie_is_cleared_and_row_removed(self):
        self.client.post("/api/auth/register", json=self._register_payload())
        with self.app.app_context():
            session = self.Session.query.first()
            session.expires_at = self.utcnow() - timedelta(seconds=1)
            self.db.session.commit()

        response = self.client.get("/api/auth/session")

        self.assertEqual(response.get_json(), {"user": None})
        cookies = self._set_cookie_headers(response)
        self.assertTrue(cookies)
        self.assertIn("Max-Age=0", cookies[-1])
        with self.app.app_context():
            self.assertEqual(self.Session.query.count(), 0)

    def test_unknown_cookie_is_anonymous_and_cleared(self):
        self.client.set_cookie("session_token", "forged-token")

        response = self.client.get("/api/auth/session")

        self.assertEqual(response.get_json(), {"user": None})
        self.assertIn("Max-Age=0", self._set_cookie_headers(response)[-1])

    def test_protected_api_requires_session(self):
        response = self.client.post("/api/posts", json={"content": "hello"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Unauthorized")

    def test_change_password_revokes_other_sessions(self):
        self.client.post("/api/auth/register", json=self._register_payload())
        other = self.app.test_client()
        other.post(
            "/api/auth/login",
            json={"email": "ada@example.com", "password": "pass1234"},
        )

        response = self.client.put(
            "/api/auth/password",
            json={"current_password": "pass1234", "new_password": "newpass5678"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"success": True})
        self.assertIsNotNone(self.client.get("/api/auth/session").get_json()["user"])
        self.assertIsNone(other.get("/api/auth/session").get_json()["user"])

        with self.app.app_context():
            self.assertEqual(self.Session.query.count(), 1)

        relogin = self.app.test_client().post(
            "/api/auth/login",
            json={"email": "ada@example.com", "password": "newpass5678"},
        )
        self.assertEqual(relogin.status_code, 200)

    def test_change_password_rejects_wrong_current_password(self):
        self.client.post("/api/auth/register", json=self._register_payload())

        response = self.client.put(
            "/api/auth/password",
            json={"current_password": "nope", "new_password": "newpass5678"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertIsNotNone(self.client.get("/api/auth/session").get_json()["user"])


if __name__ == "__main__":
    unittest.main()
