"""Per-user activity log: posts written, comments left and reactions given.

Other people see a user's activity through two filters. The owner's
settings decide which kinds are shown and whether only followers may look,
and every entry is dropped when the requester cannot read its target.
"""
import logging

from soshi.errors import Forbidden, NotFound
from soshi.models.activity_model import COMMENT_CREATED, POST_CREATED
from soshi.repositories import (
    activity_repository,
    comment_repository,
    follow_repository,
    post_repository,
    user_repository,
)
from soshi.schemas.activity_schema import ActivityQuerySchema, ActivitySettingsSchema
from soshi.services import follow_service, visibility_service


logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100
MAX_PAGE_SIZE = 50


def _preview(content):
    if len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH] + "..."


def _other_user(actor_id, owner_id):
    return owner_id if owner_id != actor_id else None


def record_post_created(post):
    return activity_repository.create_activity(
        user_id=post.user_id,
        activity_type=POST_CREATED,
        target_type="post",
        target_id=post.id,
        details={"content_preview": _preview(post.content)},
    )


def record_comment_created(comment):
    return activity_repository.create_activity(
        user_id=comment.user_id,
        activity_type=COMMENT_CREATED,
        target_type="comment",
        target_id=comment.id,
        target_user_id=_other_user(comment.user_id, comment.post.user_id),
        details={"content_preview": _preview(comment.content), "post_id": comment.post_id},
    )


def record_reaction(user_id, target_type, target, reaction_type):
    """Keep one reaction entry per target; a removed reaction leaves none."""
    activity_repository.delete_reaction_activities(user_id, target_type, target.id)
    if reaction_type is None:
        return None
    return activity_repository.create_activity(
        user_id=user_id,
        activity_type=f"{target_type}_{reaction_type}",
        target_type=target_type,
        target_id=target.id,
        target_user_id=_other_user(user_id, target.user_id),
        details={"reaction": reaction_type},
    )


def _shown_by_settings(activity_type, settings) -> bool:
    if activity_type == POST_CREATED:
        return settings.show_posts
    if activity_type == COMMENT_CREATED:
        return settings.show_comments
    if activity_type.endswith(("_like", "_dislike")):
        return settings.show_likes
    return True


def _target_visible(requester, activity) -> bool:
    if activity.target_type == "post":
        return visibility_service.can_view(requester, post_repository.get_by_id(activity.target_id))
    if activity.target_type == "comment":
        return visibility_service.can_view_comment(
            requester, comment_repository.get_by_id(activity.target_id)
        )
    return False


def serialize_activity(activity):
    payload = activity.to_dict()
    target_user = None
    if activity.target_user_id is not None:
        user = user_repository.get_by_id(activity.target_user_id)
        target_user = user.to_public_dict() if user else None
    payload["target_user"] = target_user
    return payload


def list_activities(requester, user_id, args):
    target = user_repository.get_by_id(user_id)
    if not target:
        raise NotFound("User not found")

    own = requester.id == target.id
    if not own and not follow_service.can_see_connections(requester, target):
        raise Forbidden("This profile is private")

    query = ActivityQuerySchema().load(args)
    page = query["page"]
    limit = min(query["limit"], MAX_PAGE_SIZE)

    activities = activity_repository.list_for_user(
        target.id,
        types=query["types"],
        include_hidden=own and query["show_hidden"],
    )

    if not own:
        settings = activity_repository.get_settings(target.id)
        if settings.show_to_followers_only and not follow_repository.is_following(
            requester.id, target.id
        ):
            activities = []
        activities = [a for a in activities if _shown_by_settings(a.activity_type, settings)]

    activities = [a for a in activities if _target_visible(requester, a)]
    start = (page - 1) * limit
    return {
        "page": page,
        "limit": limit,
        "total": len(activities),
        "activities": [serialize_activity(a) for a in activities[start:start + limit]],
    }


def _get_own_activity(user, activity_id):
    activity = activity_repository.get_by_id(activity_id)
    if not activity or activity.user_id != user.id:
        raise NotFound("Activity not found")
    return activity


def hide_activity(user, activity_id):
    activity = _get_own_activity(user, activity_id)
    return serialize_activity(activity_repository.set_hidden(activity, True))


def unhide_activity(user, activity_id):
    activity = _get_own_activity(user, activity_id)
    return serialize_activity(activity_repository.set_hidden(activity, False))


def get_settings(user):
    return activity_repository.get_settings(user.id).to_dict()


def update_settings(user, payload):
    changes = ActivitySettingsSchema().load(payload or {})
    settings = activity_repository.update_settings(
        activity_repository.get_settings(user.id), **changes
    )
    logger.info("User %s updated activity settings: %s", user.id, sorted(changes))
    return settings.to_dict()
