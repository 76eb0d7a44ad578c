from soshi.errors import Forbidden, NotFound, ValidationError
from soshi.repositories import comment_repository
from soshi.schemas.comment_schema import (
    CommentCreateSchema,
    CommentResponseSchema,
    CommentUpdateSchema,
)
from soshi.services import activity_service, visibility_service
from soshi.services.post_service import get_visible_post, serialize_reactions


def serialize_comment(comment, requester_id=None):
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "parent_id": comment.parent_id,
        "content": comment.content,
        "image_url": comment.image_url,
        "author": comment.author.to_public_dict(),
        "reactions": serialize_reactions("comment", comment.id, requester_id),
        "deleted": False,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
        "replies": [],
    }


def _deleted_placeholder(comment):
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "parent_id": comment.parent_id,
        "content": None,
        "image_url": None,
        "author": None,
        "reactions": None,
        "deleted": True,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
        "replies": [],
    }


def _prune_deleted(nodes):
    kept = []
    for node in nodes:
        node["replies"] = _prune_deleted(node["replies"])
        if not node["deleted"] or node["replies"]:
            kept.append(node)
    return kept


def build_comment_tree(comments):
    """Nest comments under their parents.

    Deleted comments stay in the tree as placeholders while they still have
    live replies, and are dropped once nothing hangs under them.
    """
    comment_map = {c["id"]: c for c in comments}
    roots = []

    for comment in comments:
        parent = comment_map.get(comment["parent_id"]) if comment["parent_id"] else None
        if parent:
            parent["replies"].append(comment)
        else:
            roots.append(comment)

    return _prune_deleted(roots)


def get_post_comments(requester, post_id):
    post = get_visible_post(requester, post_id)
    requester_id = getattr(requester, "id", None)

    comments = [
        _deleted_placeholder(c) if c.is_deleted else serialize_comment(c, requester_id)
        for c in comment_repository.get_comments_by_post(post.id, include_deleted=True)
    ]
    return CommentResponseSchema(many=True).dump(build_comment_tree(comments))


def add_comment(user, post_id, payload):
    post = get_visible_post(user, post_id)
    data = CommentCreateSchema().load(payload or {})

    parent_id = data.get("parent_id")
    if parent_id is not None:
        parent = comment_repository.get_by_id(parent_id)
        if not parent or parent.post_id != post.id:
            raise ValidationError("Parent comment must belong to the same post")

    comment = comment_repository.create_comment(
        user_id=user.id,
        post_id=post.id,
        content=data["content"].strip(),
        parent_id=parent_id,
        image_url=data.get("image_url") or None,
    )
    activity_service.record_comment_created(comment)
    return serialize_comment(comment, user.id)


def get_visible_comment(requester, comment_id):
    comment = comment_repository.get_by_id(comment_id)
    if not visibility_service.can_view_comment(requester, comment):
        raise NotFound("Comment not found")
    return comment


def get_comment(requester, comment_id):
    comment = get_visible_comment(requester, comment_id)
    return serialize_comment(comment, getattr(requester, "id", None))


def update_comment(user, comment_id, payload):
    comment = get_visible_comment(user, comment_id)
    if not visibility_service.can_edit_comment(user, comment):
        raise Forbidden("You can only edit your own comments")

    data = CommentUpdateSchema().load(payload or {})
    image_url = (data["image_url"] or "") if "image_url" in data else None
    comment = comment_repository.update_comment(comment, data["content"].strip(), image_url)
    return serialize_comment(comment, user.id)


def delete_comment(user, comment_id):
    comment = get_visible_comment(user, comment_id)
    if not visibility_service.can_delete_comment(user, comment):
        raise Forbidden("You can only delete your own comments")

    comment_repository.soft_delete(comment)
