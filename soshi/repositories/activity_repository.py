from soshi.db import db
from soshi.models.activity_model import Activity, ActivitySettings


def create_activity(user_id, activity_type, target_type, target_id,
                    target_user_id=None, details=None):
    activity = Activity(
        user_id=user_id,
        activity_type=activity_type,
        target_type=target_type,
        target_id=target_id,
        target_user_id=target_user_id,
        details=details or {},
    )
    db.session.add(activity)
    db.session.commit()
    return activity


def get_by_id(activity_id: int):
    return db.session.get(Activity, activity_id)


def list_for_user(user_id: int, types=None, include_hidden: bool = False):
    query = Activity.query.filter_by(user_id=user_id)
    if types:
        query = query.filter(Activity.activity_type.in_(types))
    if not include_hidden:
        query = query.filter(Activity.is_hidden.is_(False))
    return query.order_by(Activity.created_at.desc(), Activity.id.desc()).all()


def delete_reaction_activities(user_id, target_type, target_id) -> None:
    Activity.query.filter(
        Activity.user_id == user_id,
        Activity.target_type == target_type,
        Activity.target_id == target_id,
        Activity.activity_type.in_([f"{target_type}_like", f"{target_type}_dislike"]),
    ).delete(synchronize_session=False)
    db.session.commit()


def set_hidden(activity, hidden: bool):
    activity.is_hidden = hidden
    db.session.commit()
    return activity


def get_settings(user_id: int):
    """Return the user's settings row, creating the defaults on first use."""
    settings = db.session.get(ActivitySettings, user_id)
    if settings is None:
        settings = ActivitySettings(user_id=user_id)
        db.session.add(settings)
        db.session.commit()
    return settings


def update_settings(settings, **changes):
    for key, value in changes.items():
        setattr(settings, key, value)
    db.session.commit()
    return settings
