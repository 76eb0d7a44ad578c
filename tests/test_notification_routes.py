import os
import tempfile
import unittest


class TestNotificationRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from soshi import create_app
        from soshi.db import db
        from soshi.services import notification_service

        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "TESTING": True,
        })
        cls.db = db
        cls.notification_service = notification_service

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()

        self.alice, self.alice_id = self._signup("alice")
        self.bob, self.bob_id = self._signup("bob")

    def _signup(self, name):
        client = self.app.test_client()
        response = client.post(
            "/api/auth/register",
            json={
                "email": f"{name}@example.com",
                "password": "pass1234",
                "first_name": name.title(),
                "last_name": "Tester",
                "date_of_birth": "1999-09-09",
            },
        )
        self.assertEqual(response.status_code, 201)
        return client, response.get_json()["user"]["id"]

    def _notify(self, user_id, message):
        with self.app.app_context():
            return self.notification_service.notify(user_id, "test", message).id

    def test_requires_login(self):
        anonymous = self.app.test_client()

        self.assertEqual(anonymous.get("/api/notifications").status_code, 401)
        self.assertEqual(anonymous.get("/api/notifications/unread-count").status_code, 401)

    def test_list_newest_first(self):
        self._notify(self.alice_id, "first")
        self._notify(self.alice_id, "second")
        self._notify(self.bob_id, "not yours")

        response = self.alice.get("/api/notifications")

        self.assertEqual(response.status_code, 200)
        messages = [n["message"] for n in response.get_json()["notifications"]]
        self.assertEqual(messages, ["second", "first"])

    def test_mark_read_updates_unread_count(self):
        first = self._notify(self.alice_id, "first")
        self._notify(self.alice_id, "second")
        self.assertEqual(self.alice.get("/api/notifications/unread-count").get_json()["count"], 2)

        response = self.alice.put(f"/api/notifications/{first}/read")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()["notification"]["is_read"])
        self.assertEqual(self.alice.get("/api/notifications/unread-count").get_json()["count"], 1)

    def test_cannot_mark_someone_elses_notification(self):
        note = self._notify(self.alice_id, "private")

        self.assertEqual(self.bob.put(f"/api/notifications/{note}/read").status_code, 404)
        self.assertEqual(self.bob.put("/api/notifications/999/read").status_code, 404)
        self.assertEqual(self.alice.get("/api/notifications/unread-count").get_json()["count"], 1)

    def test_mark_all_read_only_touches_own(self):
        self._notify(self.alice_id, "a")
        self._notify(self.alice_id, "b")
        self._notify(self.bob_id, "c")

        response = self.alice.put("/api/notifications/read-all")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"success": True, "updated": 2})
        self.assertEqual(self.alice.get("/api/notifications/unread-count").get_json()["count"], 0)
        self.assertEqual(self.bob.get("/api/notifications/unread-count").get_json()["count"], 1)


if __name__ == "__main__":
    unittest.main()
