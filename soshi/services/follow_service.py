import logging

from soshi.errors import Forbidden, NotFound, ValidationError
from soshi.models.follow_model import FOLLOW_ACCEPTED, FOLLOW_PENDING
from soshi.repositories import follow_repository, user_repository
from soshi.schemas.profile_schema import FollowDecisionSchema
from soshi.services import notification_service


logger = logging.getLogger(__name__)


def _get_target(user_id):
    target = user_repository.get_by_id(user_id)
    if not target:
        raise NotFound("User not found")
    return target


def follow(follower, target_id):
    """Follow a public profile, or ask to follow a private one."""
    target = _get_target(target_id)
    if follower.id == target.id:
        raise ValidationError("You cannot follow yourself")

    existing = follow_repository.get_follow(follower.id, target.id)
    if existing:
        return existing.status

    status = FOLLOW_ACCEPTED if target.is_public else FOLLOW_PENDING
    follow_repository.create_follow(follower.id, target.id, status)

    if status == FOLLOW_PENDING:
        notification_service.notify(
            target.id,
            notification_service.FOLLOW_REQUEST,
            f"{follower.full_name} wants to follow you",
            follower.id,
        )
    else:
        notification_service.notify(
            target.id,
            notification_service.NEW_FOLLOWER,
            f"{follower.full_name} started following you",
            follower.id,
        )
    return status


def unfollow(follower, target_id) -> bool:
    """Remove a follow edge or withdraw a pending request."""
    target = _get_target(target_id)
    if follower.id == target.id:
        raise ValidationError("You cannot unfollow yourself")

    existing = follow_repository.get_follow(follower.id, target.id)
    if not existing:
        return False
    follow_repository.delete_follow(existing)
    return True


def respond_to_request(user, follower_id, payload):
    """The followed user accepts or declines a pending request."""
    data = FollowDecisionSchema().load(payload or {})

    request_row = follow_repository.get_follow(follower_id, user.id)
    if not request_row or request_row.status != FOLLOW_PENDING:
        raise NotFound("Follow request not found")

    logger.info("User %s %s follow request from %s", user.id, data["status"], follower_id)
    if data["status"] == "declined":
        follow_repository.delete_follow(request_row)
        return "declined"

    follow_repository.accept_follow(request_row)
    notification_service.notify(
        follower_id,
        notification_service.FOLLOW_ACCEPTED,
        f"{user.full_name} accepted your follow request",
        user.id,
    )
    return FOLLOW_ACCEPTED


def follow_status(requester, target_id):
    target = _get_target(target_id)
    outgoing = follow_repository.get_follow(requester.id, target.id)
    incoming = follow_repository.get_follow(target.id, requester.id)
    return {
        "user_id": target.id,
        "status": outgoing.status if outgoing else None,
        "is_following": bool(outgoing and outgoing.status == FOLLOW_ACCEPTED),
        "follows_you": bool(incoming and incoming.status == FOLLOW_ACCEPTED),
        "request_pending": bool(incoming and incoming.status == FOLLOW_PENDING),
    }


def can_see_connections(requester, target) -> bool:
    if target.is_public:
        return True
    if requester is None:
        return False
    return requester.id == target.id or follow_repository.is_following(requester.id, target.id)


def get_followers(requester, target_id):
    target = _get_target(target_id)
    if not can_see_connections(requester, target):
        raise Forbidden("This profile is private")
    return [user.to_public_dict() for user in follow_repository.get_followers(target.id)]


def get_following(requester, target_id):
    target = _get_target(target_id)
    if not can_see_connections(requester, target):
        raise Forbidden("This profile is private")
    return [user.to_public_dict() for user in follow_repository.get_following(target.id)]


def get_pending_requests(user):
    return [u.to_public_dict() for u in follow_repository.get_pending_requests(user.id)]


def get_suggested_users(user, limit=10):
    return [u.to_public_dict() for u in follow_repository.get_suggested_users(user.id, limit)]
