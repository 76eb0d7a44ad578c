from soshi.repositories import reaction_repository
from soshi.schemas.comment_schema import ReactionSchema
from soshi.services import activity_service
from soshi.services.comment_service import get_visible_comment
from soshi.services.post_service import get_visible_post, serialize_reactions


def _resolve_target(requester, target_type, target_id):
    if target_type == "post":
        return get_visible_post(requester, target_id)
    return get_visible_comment(requester, target_id)


def get_reactions(requester, target_type, target_id):
    target = _resolve_target(requester, target_type, target_id)
    return serialize_reactions(target_type, target.id, getattr(requester, "id", None))


def react(user, target_type, target_id, payload):
    """Toggle a like/dislike; the same reaction twice removes it."""
    target = _resolve_target(user, target_type, target_id)
    data = ReactionSchema().load(payload or {})

    current = reaction_repository.toggle_reaction(user.id, target_type, target.id, data["type"])
    activity_service.record_reaction(user.id, target_type, target, current)
    return serialize_reactions(target_type, target.id, user.id)
