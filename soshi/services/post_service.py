from flask import current_app

from soshi.errors import Forbidden, NotFound, ValidationError
from soshi.models.post_model import PostPrivacy
from soshi.repositories import (
    comment_repository,
    group_repository,
    post_repository,
    reaction_repository,
    user_repository,
)
from soshi.schemas.post_schema import PostCreateSchema, PostUpdateSchema
from soshi.services import activity_service, visibility_service


def _clamp_paging(page, limit):
    max_limit = int(current_app.config.get("POSTS_MAX_PAGE_SIZE", 50))
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or 10), 1), max_limit)
    return page, limit


def serialize_reactions(target_type, target_id, requester_id):
    counts = reaction_repository.count_by_type(target_type, target_id)
    mine = None
    if requester_id is not None:
        reaction = reaction_repository.get_reaction(requester_id, target_type, target_id)
        mine = reaction.type if reaction else None

    return {
        "likes": counts.get("like", 0),
        "dislikes": counts.get("dislike", 0),
        "mine": mine,
    }


def serialize_post(post, requester_id=None):
    payload = {
        "id": post.id,
        "content": post.content,
        "image_url": post.image_url,
        "privacy": post.privacy,
        "group_id": post.group_id,
        "author": post.author.to_public_dict(),
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat(),
        "comment_count": comment_repository.count_live_comments(post.id),
        "reactions": serialize_reactions("post", post.id, requester_id),
    }
    if requester_id == post.user_id and post.privacy == PostPrivacy.PRIVATE_LIST.value:
        payload["allowed_viewers"] = post_repository.get_allowed_viewer_ids(post.id)
    return payload


def _page_payload(requester_id, page, limit, total, posts):
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "posts": [serialize_post(post, requester_id) for post in posts],
    }


def _resolve_allowed_viewers(owner_id, viewer_ids):
    viewer_ids = {viewer_id for viewer_id in viewer_ids or [] if viewer_id != owner_id}
    known = {user.id for user in user_repository.get_many(viewer_ids)}
    missing = viewer_ids - known
    if missing:
        raise ValidationError(f"Unknown users in allowed_viewers: {sorted(missing)}")
    return sorted(known)


def get_visible_post(requester, post_id):
    """Load a post the requester may read; anything else is a 404."""
    post = post_repository.get_by_id(post_id)
    if not visibility_service.can_view(requester, post):
        raise NotFound("Post not found")
    return post


def create_post(user, payload):
    data = PostCreateSchema().load(payload or {})
    privacy = data["privacy"]
    group_id = data.get("group_id")
    allowed_viewer_ids = []

    if group_id is not None:
        group = group_repository.get_by_id(group_id)
        if not group:
            raise NotFound("Group not found")
        if not group_repository.is_accepted_member(group_id, user.id):
            raise Forbidden("Only group members can post in this group")
        privacy = PostPrivacy.GROUP.value
    elif privacy == PostPrivacy.GROUP.value:
        raise ValidationError("group_id is required for group posts")
    elif privacy == PostPrivacy.PRIVATE_LIST.value:
        allowed_viewer_ids = _resolve_allowed_viewers(user.id, data["allowed_viewers"])

    post = post_repository.create_post(
        user_id=user.id,
        content=data["content"].strip(),
        privacy=privacy,
        image_url=data.get("image_url") or None,
        group_id=group_id,
        allowed_viewer_ids=allowed_viewer_ids,
    )
    activity_service.record_post_created(post)
    return serialize_post(post, user.id)


def get_post(requester, post_id):
    post = get_visible_post(requester, post_id)
    return serialize_post(post, getattr(requester, "id", None))


def update_post(user, post_id, payload):
    post = get_visible_post(user, post_id)
    if not visibility_service.can_mutate(user, post):
        raise Forbidden("You can only edit your own posts")

    data = PostUpdateSchema().load(payload or {})
    privacy = data.get("privacy")
    allowed_viewer_ids = None

    if post.group_id is not None:
        if privacy not in (None, PostPrivacy.GROUP.value):
            raise ValidationError("Group posts keep group privacy")
        privacy = None
    elif privacy == PostPrivacy.GROUP.value:
        raise ValidationError("group_id is required for group posts")

    effective_privacy = privacy or post.privacy
    if effective_privacy == PostPrivacy.PRIVATE_LIST.value:
        if "allowed_viewers" in data:
            allowed_viewer_ids = _resolve_allowed_viewers(user.id, data["allowed_viewers"])
    elif privacy is not None and post.privacy == PostPrivacy.PRIVATE_LIST.value:
        allowed_viewer_ids = []

    content = data.get("content")
    post = post_repository.update_post(
        post,
        editor_id=user.id,
        content=content.strip() if content is not None else None,
        privacy=privacy,
        image_url=(data["image_url"] or "") if "image_url" in data else None,
        allowed_viewer_ids=allowed_viewer_ids,
    )
    return serialize_post(post, user.id)


def delete_post(user, post_id):
    post = get_visible_post(user, post_id)
    group = group_repository.get_by_id(post.group_id) if post.group_id else None
    if not visibility_service.can_moderate(user, post, group):
        raise Forbidden("You can only delete your own posts")

    post_repository.soft_delete(post)


def get_post_history(requester, post_id):
    post = get_visible_post(requester, post_id)
    return [
        {
            "id": entry.id,
            "content": entry.content,
            "editor_id": entry.editor_id,
            "edited_at": entry.edited_at.isoformat(),
        }
        for entry in post_repository.get_history(post.id)
    ]


def get_feed(requester, page, limit):
    page, limit = _clamp_paging(page, limit)
    requester_id = getattr(requester, "id", None)
    total, posts = post_repository.paginate_posts(
        visibility_service.visible_posts_filter(requester_id),
        page,
        limit,
    )
    return _page_payload(requester_id, page, limit, total, posts)


def get_user_posts(requester, user_id, page, limit):
    if not user_repository.get_by_id(user_id):
        raise NotFound("User not found")

    page, limit = _clamp_paging(page, limit)
    requester_id = getattr(requester, "id", None)
    total, posts = post_repository.paginate_posts(
        visibility_service.visible_posts_filter(requester_id),
        page,
        limit,
        user_id=user_id,
    )
    return _page_payload(requester_id, page, limit, total, posts)


def get_group_posts(requester, group_id, page, limit):
    page, limit = _clamp_paging(page, limit)
    total, posts = post_repository.paginate_posts(
        visibility_service.visible_posts_filter(requester.id),
        page,
        limit,
        group_id=group_id,
    )
    return _page_payload(requester.id, page, limit, total, posts)
