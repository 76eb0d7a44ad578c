import logging
from datetime import timezone

from soshi.errors import Conflict, Forbidden, NotFound, ValidationError
from soshi.models.group_model import MEMBER_ACCEPTED, MEMBER_PENDING
from soshi.repositories import group_repository, user_repository
from soshi.schemas.group_schema import (
    EventCreateSchema,
    EventResponseSchema,
    GroupCreateSchema,
    GroupUpdateSchema,
    InviteSchema,
    MemberDecisionSchema,
)
from soshi.services import notification_service, post_service


logger = logging.getLogger(__name__)


def _get_group(group_id):
    group = group_repository.get_by_id(group_id)
    if not group:
        raise NotFound("Group not found")
    return group


def _require_creator(user, group):
    if group.creator_id != user.id:
        raise Forbidden("Only the group creator can do this")


def _require_member(user, group):
    if not group_repository.is_accepted_member(group.id, user.id):
        raise Forbidden("Only group members can do this")


def _membership_status(group_id, user_id):
    member = group_repository.get_member(group_id, user_id)
    if not member:
        return None
    if member.status == MEMBER_PENDING and member.invited_by is not None:
        return "invited"
    return member.status


def serialize_group(group, requester_id=None):
    return {
        "id": group.id,
        "title": group.title,
        "description": group.description,
        "creator": group.creator.to_public_dict(),
        "member_count": group_repository.count_members(group.id),
        "membership": _membership_status(group.id, requester_id) if requester_id else None,
        "created_at": group.created_at.isoformat(),
    }


def serialize_member(member):
    payload = member.user.to_public_dict()
    payload.update({
        "status": member.status,
        "invited_by": member.invited_by,
        "joined_at": member.joined_at.isoformat(),
    })
    return payload


def serialize_event(event, requester_id=None):
    going = sum(1 for r in event.responses if r.response == "going")
    mine = next((r.response for r in event.responses if r.user_id == requester_id), None)
    return {
        "id": event.id,
        "group_id": event.group_id,
        "creator_id": event.creator_id,
        "title": event.title,
        "description": event.description,
        "event_date": event.event_date.replace(tzinfo=timezone.utc).isoformat(),
        "going": going,
        "not_going": len(event.responses) - going,
        "my_response": mine,
        "created_at": event.created_at.isoformat(),
    }


def list_groups(user):
    return [serialize_group(group, user.id) for group in group_repository.list_groups()]


def create_group(user, payload):
    data = GroupCreateSchema().load(payload or {})
    title = data["title"].strip()
    if not title:
        raise ValidationError("Title is required")

    group = group_repository.create_group(title, data["description"].strip(), user.id)
    logger.info("User %s created group %s", user.id, group.id)
    return serialize_group(group, user.id)


def get_group(user, group_id):
    group = _get_group(group_id)
    payload = serialize_group(group, user.id)

    if group_repository.is_accepted_member(group.id, user.id):
        payload["members"] = [
            serialize_member(m) for m in group_repository.get_members(group.id)
        ]
        if group.creator_id == user.id:
            payload["pending"] = [
                serialize_member(m)
                for m in group_repository.get_members(group.id, MEMBER_PENDING)
            ]
    return payload


def update_group(user, group_id, payload):
    group = _get_group(group_id)
    _require_creator(user, group)

    data = GroupUpdateSchema().load(payload or {})
    title = data.get("title")
    if title is not None and not title.strip():
        raise ValidationError("Title is required")

    group_repository.update_group(
        group,
        title=title.strip() if title is not None else None,
        description=data.get("description"),
    )
    return serialize_group(group, user.id)


def delete_group(user, group_id):
    group = _get_group(group_id)
    _require_creator(user, group)
    group_repository.delete_group(group)
    logger.info("User %s deleted group %s", user.id, group_id)


def request_join(user, group_id):
    group = _get_group(group_id)
    member = group_repository.get_member(group.id, user.id)
    if member:
        if member.status == MEMBER_ACCEPTED:
            raise Conflict("Already a member")
        raise Conflict("Membership is already pending")

    group_repository.add_member(group.id, user.id, MEMBER_PENDING)
    notification_service.notify(
        group.creator_id,
        notification_service.GROUP_JOIN_REQUEST,
        f"{user.full_name} wants to join {group.title}",
        group.id,
    )
    return MEMBER_PENDING


def leave_group(user, group_id):
    group = _get_group(group_id)
    if group.creator_id == user.id:
        raise ValidationError("Group creator cannot leave the group")

    member = group_repository.get_member(group.id, user.id)
    if not member:
        raise NotFound("Not a member of this group")
    group_repository.delete_member(member)


def invite(user, group_id, payload):
    group = _get_group(group_id)
    _require_member(user, group)

    data = InviteSchema().load(payload or {})
    invitee = user_repository.get_by_id(data["user_id"])
    if not invitee:
        raise NotFound("User not found")

    existing = group_repository.get_member(group.id, invitee.id)
    if existing:
        if existing.status == MEMBER_ACCEPTED:
            raise Conflict("User is already a member")
        raise Conflict("Membership is already pending")

    group_repository.add_member(group.id, invitee.id, MEMBER_PENDING, invited_by=user.id)
    notification_service.notify(
        invitee.id,
        notification_service.GROUP_INVITATION,
        f"{user.full_name} invited you to join {group.title}",
        group.id,
    )
    return "invited"


def respond_to_membership(user, group_id, member_user_id, payload):
    """Answer a pending membership.

    Join requests are answered by the group creator, invitations by the
    invitee.
    """
    group = _get_group(group_id)
    data = MemberDecisionSchema().load(payload or {})

    member = group_repository.get_member(group.id, member_user_id)
    if not member or member.status != MEMBER_PENDING:
        raise NotFound("No pending membership for this user")

    if member.invited_by is None:
        _require_creator(user, group)
    elif user.id != member_user_id:
        raise Forbidden("Only the invited user can answer an invitation")

    if data["status"] == "declined":
        group_repository.delete_member(member)
        return "declined"

    group_repository.accept_member(member)
    notify_id = member_user_id if member.invited_by is None else group.creator_id
    if notify_id != user.id:
        member_user = user_repository.get_by_id(member_user_id)
        notification_service.notify(
            notify_id,
            notification_service.GROUP_MEMBER_ACCEPTED,
            f"{member_user.full_name} is now a member of {group.title}",
            group.id,
        )
    return MEMBER_ACCEPTED


def remove_member(user, group_id, member_user_id):
    group = _get_group(group_id)
    _require_creator(user, group)
    if member_user_id == group.creator_id:
        raise ValidationError("Group creator cannot be removed")

    member = group_repository.get_member(group.id, member_user_id)
    if not member:
        raise NotFound("Member not found")
    group_repository.delete_member(member)


def get_group_posts(user, group_id, page, limit):
    group = _get_group(group_id)
    _require_member(user, group)
    return post_service.get_group_posts(user, group.id, page, limit)


def create_group_post(user, group_id, payload):
    group = _get_group(group_id)
    _require_member(user, group)
    payload = dict(payload or {})
    payload["group_id"] = group.id
    return post_service.create_post(user, payload)


def list_events(user, group_id):
    group = _get_group(group_id)
    _require_member(user, group)
    return [serialize_event(e, user.id) for e in group_repository.get_events(group.id)]


def create_event(user, group_id, payload):
    group = _get_group(group_id)
    _require_member(user, group)

    data = EventCreateSchema().load(payload or {})
    title = data["title"].strip()
    if not title:
        raise ValidationError("Title is required")
    event_date = data["event_date"].astimezone(timezone.utc).replace(tzinfo=None)

    event = group_repository.create_event(
        group.id,
        user.id,
        title,
        data["description"].strip(),
        event_date,
    )

    recipients = [
        m.user_id for m in group_repository.get_members(group.id) if m.user_id != user.id
    ]
    if recipients:
        notification_service.notify_many(
            recipients,
            notification_service.GROUP_EVENT,
            f"New event in {group.title}: {title}",
            event.id,
        )
    return serialize_event(event, user.id)


def respond_to_event(user, event_id, payload):
    event = group_repository.get_event(event_id)
    if not event:
        raise NotFound("Event not found")
    _require_member(user, _get_group(event.group_id))

    data = EventResponseSchema().load(payload or {})
    group_repository.upsert_event_response(event.id, user.id, data["response"])
    return serialize_event(event, user.id)
