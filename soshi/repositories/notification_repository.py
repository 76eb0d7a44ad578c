from soshi.db import db
from soshi.models.notification_model import Notification


def create_notification(user_id, type, message, related_id=None):
    notification = Notification(
        user_id=user_id,
        type=type,
        message=message,
        related_id=related_id,
    )
    db.session.add(notification)
    db.session.commit()
    return notification


def get_by_id(notification_id: int):
    return db.session.get(Notification, notification_id)


def list_for_user(user_id: int, limit: int = 50):
    return (
        Notification.query
        .filter_by(user_id=user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )


def count_unread(user_id: int) -> int:
    return Notification.query.filter_by(user_id=user_id, is_read=False).count()


def mark_read(notification):
    notification.is_read = True
    db.session.commit()
    return notification


def mark_all_read(user_id: int) -> int:
    updated = (
        Notification.query
        .filter_by(user_id=user_id, is_read=False)
        .update({"is_read": True}, synchronize_session=False)
    )
    db.session.commit()
    return updated


def create_many(user_ids, type, message, related_id=None):
    notifications = [
        Notification(user_id=user_id, type=type, message=message, related_id=related_id)
        for user_id in user_ids
    ]
    db.session.add_all(notifications)
    db.session.commit()
    return notifications
