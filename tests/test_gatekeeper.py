import os
import tempfile
import unittest
from datetime import timedelta
from unittest.mock import patch

from soshi.middleware import gatekeeper
from soshi.middleware.gatekeeper import (
    AUTH_ONLY,
    PASSTHROUGH,
    PROTECTED,
    PUBLIC,
    classify_path,
    decide,
)


class TestGatekeeperDecisions(unittest.TestCase):
    def test_classify_path(self):
        cases = {
            "/api/posts": PASSTHROUGH,
            "/api": PASSTHROUGH,
            "/static/app.js": PASSTHROUGH,
            "/media/uploads/posts/a.png": PASSTHROUGH,
            "/favicon.ico": PASSTHROUGH,
            "/login": AUTH_ONLY,
            "/register": AUTH_ONLY,
            "/": PUBLIC,
            "/feed": PROTECTED,
            "/profile/3": PROTECTED,
            "/apiary": PROTECTED,
            "/login-help": PROTECTED,
        }
        for path, expected in cases.items():
            with self.subTest(path=path):
                self.assertEqual(classify_path(path), expected)

    def test_decide(self):
        user = object()
        cases = [
            (PASSTHROUGH, "/api/posts", True, None, None),
            (PROTECTED, "/feed", True, None, "/login"),
            (PUBLIC, "/", True, None, "/login"),
            (AUTH_ONLY, "/login", True, None, None),
            (PUBLIC, "/", False, None, "/login"),
            (PUBLIC, "/", True, user, "/feed"),
            (AUTH_ONLY, "/register", True, user, "/feed"),
            (AUTH_ONLY, "/login", False, None, None),
            (PROTECTED, "/settings", False, None, "/login"),
            (PROTECTED, "/settings", True, user, None),
        ]
        for kind, path, had_cookie, requester, expected in cases:
            with self.subTest(kind=kind, path=path, cookie=had_cookie, user=requester):
                self.assertEqual(decide(kind, path, had_cookie, requester), expected)


class TestGatekeeperMiddleware(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from soshi import create_app
        from soshi.clock import utcnow
        from soshi.db import db
        from soshi.models.session_model import Session

        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "TESTING": True,
        })
        cls.db = db
        cls.utcnow = staticmethod(utcnow)
        cls.Session = Session

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()
        self.client = self.app.test_client()

    def _login(self):
        response = self.client.post(
            "/api/auth/register",
            json={
                "email": "linus@example.com",
                "password": "pass1234",
                "first_name": "Linus",
                "last_name": "T",
                "date_of_birth": "1969-12-28",
            },
        )
        self.assertEqual(response.status_code, 201)

    def _location(self, response):
        return response.headers["Location"].replace("http://localhost", "")

    def test_root_redirects_anonymous_to_login(self):
        response = self.client.get("/")

        self.assertEqual(response.status_code, 302)
        self.assertEqual(self._location(response), "/login")

    def test_root_redirects_authenticated_to_feed(self):
        self._login()

        response = self.client.get("/")

        self.assertEqual(response.status_code, 302)
        self.assertEqual(self._location(response), "/feed")

    def test_protected_page_requires_login(self):
        response = self.client.get("/groups/4")

        self.assertEqual(response.status_code, 302)
        self.assertEqual(self._location(response), "/login")

    def test_protected_page_renders_for_user(self):
        self._login()

        response = self.client.get("/feed")

        self.assertEqual(response.status_code, 200)
        self.assertIn(b'data-page="feed"', response.data)

    def test_auth_pages_redirect_authenticated_user(self):
        self._login()

        for path in ("/login", "/register"):
            with self.subTest(path=path):
                response = self.client.get(path)
                self.assertEqual(response.status_code, 302)
                self.assertEqual(self._location(response), "/feed")

    def test_auth_pages_render_for_anonymous(self):
        response = self.client.get("/login")

        self.assertEqual(response.status_code, 200)
        self.assertIn(b'data-page="login"', response.data)

    def test_stale_cookie_redirects_and_clears(self):
        self._login()
        with self.app.app_context():
            session = self.Session.query.first()
            session.expires_at = self.utcnow() - timedelta(minutes=1)
            self.db.session.commit()

        response = self.client.get("/feed")

        self.assertEqual(response.status_code, 302)
        self.assertEqual(self._location(response), "/login")
        cleared = [
            value for value in response.headers.getlist("Set-Cookie")
            if value.startswith("session_token=")
        ]
        self.assertTrue(cleared)
        self.assertIn("Max-Age=0", cleared[-1])
        self.assertIsNone(self.client.get_cookie("session_token"))

    def test_stale_cookie_still_reaches_login_page(self):
        self.client.set_cookie("session_token", "stale")

        response = self.client.get("/login")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(any(
            value.startswith("session_token=") and "Max-Age=0" in value
            for value in response.headers.getlist("Set-Cookie")
        ))

    def test_api_paths_are_not_redirected(self):
        self.client.set_cookie("session_token", "stale")

        response = self.client.get("/api/posts")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["posts"], [])

    def test_identity_is_resolved_once_per_request(self):
        self._login()
        with patch.object(
            gatekeeper.auth_service,
            "resolve_session",
            wraps=gatekeeper.auth_service.resolve_session,
        ) as resolve:
            response = self.client.get("/api/auth/session")

        self.assertEqual(resolve.call_count, 1)
        self.assertIsNotNone(response.get_json()["user"])


if __name__ == "__main__":
    unittest.main()
