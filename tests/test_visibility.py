import os
import tempfile
import unittest
from datetime import date
from types import SimpleNamespace

from soshi.services import visibility_service


OWNER = 1
FOLLOWER = 2
MEMBER = 3
LISTED = 4
STRANGER = 5


class FakeFacts:
    def __init__(self, follows=(), members=(), allowed=()):
        self.follows = set(follows)
        self.members = set(members)
        self.allowed = set(allowed)

    def is_following(self, follower_id, owner_id):
        return (follower_id, owner_id) in self.follows

    def is_accepted_member(self, group_id, user_id):
        return (group_id, user_id) in self.members

    def is_allowed_viewer(self, post_id, user_id):
        return (post_id, user_id) in self.allowed


def make_post(privacy="public", group_id=None, deleted=False, post_id=10):
    return SimpleNamespace(
        id=post_id,
        user_id=OWNER,
        privacy=privacy,
        group_id=group_id,
        deleted_at="yesterday" if deleted else None,
    )


class TestVisibilityRules(unittest.TestCase):
    def setUp(self):
        self.facts = FakeFacts(
            follows={(FOLLOWER, OWNER)},
            members={(7, MEMBER)},
            allowed={(10, LISTED)},
        )

    def _viewers(self, post):
        requesters = [None, OWNER, FOLLOWER, MEMBER, LISTED, STRANGER]
        return {
            requester
            for requester in requesters
            if visibility_service.can_view(requester, post, self.facts)
        }

    def test_public_post_is_visible_to_everyone(self):
        self.assertEqual(
            self._viewers(make_post("public")),
            {None, OWNER, FOLLOWER, MEMBER, LISTED, STRANGER},
        )

    def test_followers_post_needs_accepted_follow(self):
        self.assertEqual(self._viewers(make_post("followers")), {OWNER, FOLLOWER})

    def test_private_list_post_needs_allow_list_entry(self):
        self.assertEqual(self._viewers(make_post("private_list")), {OWNER, LISTED})

    def test_group_membership_beats_privacy_field(self):
        for privacy in ("public", "followers", "private_list", "group"):
            with self.subTest(privacy=privacy):
                post = make_post(privacy, group_id=7)
                self.assertEqual(self._viewers(post), {OWNER, MEMBER})

    def test_unknown_privacy_is_hidden(self):
        self.assertEqual(self._viewers(make_post("friends_of_friends")), {OWNER})

    def test_deleted_post_is_never_visible(self):
        self.assertEqual(self._viewers(make_post("public", deleted=True)), set())

    def test_mutation_is_owner_only(self):
        post = make_post("public")

        self.assertTrue(visibility_service.can_mutate(OWNER, post))
        self.assertFalse(visibility_service.can_mutate(FOLLOWER, post))
        self.assertFalse(visibility_service.can_mutate(None, post))

    def test_group_creator_can_moderate_group_posts(self):
        group = SimpleNamespace(id=7, creator_id=MEMBER)

        self.assertTrue(visibility_service.can_moderate(MEMBER, make_post(group_id=7), group))
        self.assertTrue(visibility_service.can_moderate(OWNER, make_post(group_id=7), group))
        self.assertFalse(visibility_service.can_moderate(STRANGER, make_post(group_id=7), group))
        self.assertFalse(visibility_service.can_moderate(MEMBER, make_post(), None))


class TestVisibilityQuery(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from soshi import create_app
        from soshi.db import db
        from soshi.models.follow_model import FOLLOW_ACCEPTED, FOLLOW_PENDING
        from soshi.models.group_model import MEMBER_PENDING
        from soshi.models.post_model import Post
        from soshi.repositories import (
            follow_repository,
            group_repository,
            post_repository,
            user_repository,
        )

        cls.app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "TESTING": True,
        })
        cls.db = db
        cls.Post = Post
        cls.FOLLOW_ACCEPTED = FOLLOW_ACCEPTED
        cls.FOLLOW_PENDING = FOLLOW_PENDING
        cls.MEMBER_PENDING = MEMBER_PENDING
        cls.follow_repository = follow_repository
        cls.group_repository = group_repository
        cls.post_repository = post_repository
        cls.user_repository = user_repository

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

    def _user(self, name):
        return self.user_repository.create_user(
            email=f"{name}@example.com",
            password_hash="x",
            first_name=name.title(),
            last_name="Test",
            date_of_birth=date(1995, 1, 1),
        )

    def test_sql_filter_agrees_with_can_view(self):
        owner = self._user("owner")
        follower = self._user("follower")
        pending = self._user("pending")
        member = self._user("member")
        listed = self._user("listed")
        stranger = self._user("stranger")

        self.follow_repository.create_follow(follower.id, owner.id, self.FOLLOW_ACCEPTED)
        self.follow_repository.create_follow(pending.id, owner.id, self.FOLLOW_PENDING)

        group = self.group_repository.create_group("Chess", "", owner.id)
        self.group_repository.add_member(group.id, member.id, "accepted")
        self.group_repository.add_member(group.id, pending.id, self.MEMBER_PENDING)

        create = self.post_repository.create_post
        create(owner.id, "public", "public")
        create(owner.id, "followers", "followers")
        create(owner.id, "listed", "private_list", allowed_viewer_ids=[listed.id])
        create(owner.id, "group", "group", group_id=group.id)
        create(owner.id, "group public", "public", group_id=group.id)
        deleted = create(owner.id, "deleted", "public")
        self.post_repository.soft_delete(deleted)

        posts = self.Post.query.all()
        for requester in (None, owner, follower, pending, member, listed, stranger):
            requester_id = requester.id if requester else None
            with self.subTest(requester=requester_id):
                expected = {
                    post.id for post in posts
                    if visibility_service.can_view(requester, post)
                }
                _, visible = self.post_repository.paginate_posts(
                    visibility_service.visible_posts_filter(requester_id), 1, 50
                )
                self.assertEqual({post.id for post in visible}, expected)

        _, stranger_view = self.post_repository.paginate_posts(
            visibility_service.visible_posts_filter(stranger.id), 1, 50
        )
        self.assertEqual([post.content for post in stranger_view], ["public"])

        _, member_view = self.post_repository.paginate_posts(
            visibility_service.visible_posts_filter(member.id), 1, 50
        )
        self.assertEqual(
            sorted(post.content for post in member_view),
            ["group", "group public", "public"],
        )

    def test_database_facts_reads_current_state(self):
        owner = self._user("owner")
        follower = self._user("follower")
        post = self.post_repository.create_post(owner.id, "hi", "followers")
        facts = visibility_service.DatabaseFacts()

        self.assertFalse(visibility_service.can_view(follower, post, facts))

        self.follow_repository.create_follow(follower.id, owner.id, self.FOLLOW_ACCEPTED)
        self.assertTrue(visibility_service.can_view(follower, post, facts))

        self.follow_repository.delete_follow(
            self.follow_repository.get_follow(follower.id, owner.id)
        )
        self.assertFalse(visibility_service.can_view(follower, post, facts))


if __name__ == "__main__":
    unittest.main()
