from soshi.errors import NotFound
from soshi.models.follow_model import FOLLOW_ACCEPTED
from soshi.repositories import follow_repository, post_repository, profile_repository, user_repository
from soshi.schemas.profile_schema import PrivacySchema, ProfileUpdateSchema
from soshi.services import visibility_service
from soshi.services.follow_service import can_see_connections


def _counts(user_id, requester_id=None):
    # Other viewers only count the posts they are allowed to read.
    visibility_filter = None
    if requester_id != user_id:
        visibility_filter = visibility_service.visible_posts_filter(requester_id)
    return {
        "followers": follow_repository.count_followers(user_id),
        "following": follow_repository.count_following(user_id),
        "posts": post_repository.count_posts_by_user(user_id, visibility_filter),
    }


def get_own_profile(user):
    payload = user.to_dict()
    payload["counts"] = _counts(user.id, user.id)
    payload["pending_follow_requests"] = [
        u.to_public_dict() for u in follow_repository.get_pending_requests(user.id)
    ]
    return payload


def get_profile(requester, user_id):
    """Public profiles show everything; private ones only to accepted followers."""
    user = user_repository.get_by_id(user_id)
    if not user:
        raise NotFound("User not found")

    requester_id = getattr(requester, "id", None)
    if requester_id == user.id:
        return get_own_profile(user)

    follow = follow_repository.get_follow(requester_id, user.id) if requester_id else None

    if can_see_connections(requester, user):
        payload = user.to_dict()
        payload.pop("email", None)
        payload["counts"] = _counts(user.id, requester_id)
        payload["restricted"] = False
    else:
        payload = user.to_public_dict()
        payload["is_public"] = False
        payload["restricted"] = True

    payload["follow_status"] = follow.status if follow else None
    payload["is_following"] = bool(follow and follow.status == FOLLOW_ACCEPTED)
    return payload


def update_profile(user, payload):
    data = ProfileUpdateSchema().load(payload or {})
    profile_repository.update_profile(user, **data)
    return get_own_profile(user)


def set_privacy(user, payload):
    data = PrivacySchema().load(payload or {})
    profile_repository.set_public(user, data["is_public"])
    return {"is_public": user.is_public}
