"""Who may read, edit or moderate a post.

``can_view`` and ``visible_posts_filter`` express the same rule table, one
for a single loaded post and one as a SQL predicate for paged listings.
Keep them in step:

1. the owner always sees the post;
2. a group post is visible to accepted members of that group only,
   whatever its privacy field says;
3. ``public`` is visible to everyone, anonymous requesters included;
4. ``followers`` needs an accepted follow edge to the owner;
5. ``private_list`` needs the requester on the post's allow-list;
6. anything else is hidden.

Soft-deleted posts are never visible.
"""
from typing import Protocol

from sqlalchemy import and_, exists, or_, select

from soshi.models.follow_model import FOLLOW_ACCEPTED, Follow
from soshi.models.group_model import MEMBER_ACCEPTED, GroupMember
from soshi.models.post_model import Post, PostPrivacy, post_allowed_viewers
from soshi.repositories import follow_repository, group_repository, post_repository


class VisibilityFacts(Protocol):
    def is_following(self, follower_id: int, owner_id: int) -> bool: ...

    def is_accepted_member(self, group_id: int, user_id: int) -> bool: ...

    def is_allowed_viewer(self, post_id: int, user_id: int) -> bool: ...


class DatabaseFacts:
    """Answers every question with a fresh query."""

    def is_following(self, follower_id, owner_id):
        return follow_repository.is_following(follower_id, owner_id)

    def is_accepted_member(self, group_id, user_id):
        return group_repository.is_accepted_member(group_id, user_id)

    def is_allowed_viewer(self, post_id, user_id):
        return post_repository.is_allowed_viewer(post_id, user_id)


def _requester_id(requester):
    if requester is None:
        return None
    return getattr(requester, "id", requester)


def can_view(requester, post, facts: VisibilityFacts | None = None) -> bool:
    if post is None or post.deleted_at is not None:
        return False

    facts = facts or DatabaseFacts()
    requester_id = _requester_id(requester)

    if requester_id is not None and requester_id == post.user_id:
        return True

    if post.group_id is not None:
        if requester_id is None:
            return False
        return facts.is_accepted_member(post.group_id, requester_id)

    if post.privacy == PostPrivacy.PUBLIC.value:
        return True

    if requester_id is None:
        return False

    if post.privacy == PostPrivacy.FOLLOWERS.value:
        return facts.is_following(requester_id, post.user_id)

    if post.privacy == PostPrivacy.PRIVATE_LIST.value:
        return facts.is_allowed_viewer(post.id, requester_id)

    return False


def can_mutate(requester, post) -> bool:
    requester_id = _requester_id(requester)
    return requester_id is not None and post is not None and requester_id == post.user_id


def can_moderate(requester, post, group=None) -> bool:
    if can_mutate(requester, post):
        return True
    if post is None or post.group_id is None or group is None:
        return False
    return _requester_id(requester) == group.creator_id


def visible_posts_filter(requester_id):
    """SQL predicate over ``Post`` matching ``can_view`` row by row."""
    public_rule = and_(
        Post.group_id.is_(None),
        Post.privacy == PostPrivacy.PUBLIC.value,
    )
    if requester_id is None:
        return public_rule

    is_member = exists(
        select(GroupMember.id).where(
            GroupMember.group_id == Post.group_id,
            GroupMember.user_id == requester_id,
            GroupMember.status == MEMBER_ACCEPTED,
        )
    )
    follows_owner = exists(
        select(Follow.id).where(
            Follow.follower_id == requester_id,
            Follow.following_id == Post.user_id,
            Follow.status == FOLLOW_ACCEPTED,
        )
    )
    on_allow_list = exists(
        select(post_allowed_viewers.c.post_id).where(
            post_allowed_viewers.c.post_id == Post.id,
            post_allowed_viewers.c.user_id == requester_id,
        )
    )

    return or_(
        Post.user_id == requester_id,
        and_(Post.group_id.isnot(None), is_member),
        public_rule,
        and_(
            Post.group_id.is_(None),
            Post.privacy == PostPrivacy.FOLLOWERS.value,
            follows_owner,
        ),
        and_(
            Post.group_id.is_(None),
            Post.privacy == PostPrivacy.PRIVATE_LIST.value,
            on_allow_list,
        ),
    )


def can_view_comment(requester, comment, facts: VisibilityFacts | None = None) -> bool:
    if comment is None or comment.deleted_at is not None:
        return False
    return can_view(requester, comment.post, facts)


def can_delete_comment(requester, comment) -> bool:
    requester_id = _requester_id(requester)
    if requester_id is None or comment is None:
        return False
    return requester_id in (comment.user_id, comment.post.user_id)


def can_edit_comment(requester, comment) -> bool:
    requester_id = _requester_id(requester)
    return requester_id is not None and comment is not None and requester_id == comment.user_id

