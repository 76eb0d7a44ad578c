from soshi.errors import NotFound
from soshi.repositories import notification_repository


FOLLOW_REQUEST = "follow_request"
NEW_FOLLOWER = "new_follower"
FOLLOW_ACCEPTED = "follow_accepted"
GROUP_JOIN_REQUEST = "group_join_request"
GROUP_INVITATION = "group_invitation"
GROUP_MEMBER_ACCEPTED = "group_member_accepted"
GROUP_EVENT = "group_event"


def notify(user_id, type, message, related_id=None):
    return notification_repository.create_notification(
        user_id=user_id,
        type=type,
        message=message,
        related_id=related_id,
    )


def notify_many(user_ids, type, message, related_id=None):
    return notification_repository.create_many(user_ids, type, message, related_id)


def list_notifications(user):
    return [n.to_dict() for n in notification_repository.list_for_user(user.id)]


def unread_count(user):
    return notification_repository.count_unread(user.id)


def mark_read(user, notification_id):
    notification = notification_repository.get_by_id(notification_id)
    # Someone else's notification looks the same as a missing one.
    if not notification or notification.user_id != user.id:
        raise NotFound("Notification not found")
    return notification_repository.mark_read(notification).to_dict()


def mark_all_read(user):
    return notification_repository.mark_all_read(user.id)
