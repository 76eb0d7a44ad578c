from soshi.clock import utcnow
from soshi.db import db
from soshi.models.group_model import (
    MEMBER_ACCEPTED,
    MEMBER_PENDING,
    EventResponse,
    Group,
    GroupEvent,
    GroupMember,
)
from soshi.models.post_model import Post


def create_group(title, description, creator_id):
    group = Group(title=title, description=description, creator_id=creator_id)
    db.session.add(group)
    db.session.flush()

    db.session.add(
        GroupMember(
            group_id=group.id,
            user_id=creator_id,
            status=MEMBER_ACCEPTED,
        )
    )
    db.session.commit()
    return group


def get_by_id(group_id: int):
    return db.session.get(Group, group_id)


def list_groups():
    return Group.query.order_by(Group.created_at.desc(), Group.id.desc()).all()


def update_group(group, title=None, description=None):
    if title is not None:
        group.title = title
    if description is not None:
        group.description = description
    db.session.commit()
    return group


def delete_group(group) -> None:
    for event in GroupEvent.query.filter_by(group_id=group.id).all():
        db.session.delete(event)
    Post.query.filter(
        Post.group_id == group.id,
        Post.deleted_at.is_(None),
    ).update({"deleted_at": utcnow()}, synchronize_session=False)
    db.session.delete(group)
    db.session.commit()


def get_member(group_id: int, user_id: int):
    return GroupMember.query.filter_by(group_id=group_id, user_id=user_id).first()


def is_accepted_member(group_id: int, user_id: int) -> bool:
    return (
        GroupMember.query.filter_by(
            group_id=group_id,
            user_id=user_id,
            status=MEMBER_ACCEPTED,
        ).first()
        is not None
    )


def add_member(group_id, user_id, status=MEMBER_PENDING, invited_by=None):
    member = GroupMember(
        group_id=group_id,
        user_id=user_id,
        status=status,
        invited_by=invited_by,
    )
    db.session.add(member)
    db.session.commit()
    return member


def accept_member(member):
    member.status = MEMBER_ACCEPTED
    db.session.commit()
    return member


def delete_member(member) -> None:
    db.session.delete(member)
    db.session.commit()


def get_members(group_id: int, status=MEMBER_ACCEPTED):
    return (
        GroupMember.query
        .filter_by(group_id=group_id, status=status)
        .order_by(GroupMember.joined_at.asc(), GroupMember.id.asc())
        .all()
    )


def count_members(group_id: int) -> int:
    return GroupMember.query.filter_by(
        group_id=group_id,
        status=MEMBER_ACCEPTED,
    ).count()


def create_event(group_id, creator_id, title, description, event_date):
    event = GroupEvent(
        group_id=group_id,
        creator_id=creator_id,
        title=title,
        description=description,
        event_date=event_date,
    )
    db.session.add(event)
    db.session.commit()
    return event


def get_event(event_id: int):
    return db.session.get(GroupEvent, event_id)


def get_events(group_id: int):
    return (
        GroupEvent.query
        .filter_by(group_id=group_id)
        .order_by(GroupEvent.event_date.asc(), GroupEvent.id.asc())
        .all()
    )


def upsert_event_response(event_id, user_id, response):
    existing = EventResponse.query.filter_by(
        event_id=event_id,
        user_id=user_id,
    ).first()

    if existing:
        existing.response = response
    else:
        existing = EventResponse(
            event_id=event_id,
            user_id=user_id,
            response=response,
        )
        db.session.add(existing)

    db.session.commit()
    return existing
