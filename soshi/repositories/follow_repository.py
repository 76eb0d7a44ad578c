from sqlalchemy import select

from soshi.db import db
from soshi.models.follow_model import FOLLOW_ACCEPTED, FOLLOW_PENDING, Follow
from soshi.models.user_model import User


def get_follow(follower_id: int, following_id: int):
    return Follow.query.filter_by(
        follower_id=follower_id,
        following_id=following_id,
    ).first()


def is_following(follower_id: int, following_id: int) -> bool:
    return (
        Follow.query.filter_by(
            follower_id=follower_id,
            following_id=following_id,
            status=FOLLOW_ACCEPTED,
        ).first()
        is not None
    )


def create_follow(follower_id: int, following_id: int, status: str):
    follow = Follow(
        follower_id=follower_id,
        following_id=following_id,
        status=status,
    )
    db.session.add(follow)
    db.session.commit()
    return follow


def accept_follow(follow):
    follow.status = FOLLOW_ACCEPTED
    db.session.commit()
    return follow


def delete_follow(follow) -> None:
    db.session.delete(follow)
    db.session.commit()


def count_followers(user_id: int) -> int:
    return Follow.query.filter_by(following_id=user_id, status=FOLLOW_ACCEPTED).count()


def count_following(user_id: int) -> int:
    return Follow.query.filter_by(follower_id=user_id, status=FOLLOW_ACCEPTED).count()


def get_followers(user_id: int):
    return (
        User.query
        .join(Follow, Follow.follower_id == User.id)
        .filter(Follow.following_id == user_id, Follow.status == FOLLOW_ACCEPTED)
        .order_by(User.first_name.asc(), User.last_name.asc())
        .all()
    )


def get_following(user_id: int):
    return (
        User.query
        .join(Follow, Follow.following_id == User.id)
        .filter(Follow.follower_id == user_id, Follow.status == FOLLOW_ACCEPTED)
        .order_by(User.first_name.asc(), User.last_name.asc())
        .all()
    )


def get_pending_requests(user_id: int):
    return (
        User.query
        .join(Follow, Follow.follower_id == User.id)
        .filter(Follow.following_id == user_id, Follow.status == FOLLOW_PENDING)
        .order_by(Follow.created_at.desc())
        .all()
    )


def get_suggested_users(user_id: int, limit: int = 10):
    """Newest users the given user neither follows nor has asked to follow."""
    already = select(Follow.following_id).where(Follow.follower_id == user_id)
    return (
        User.query
        .filter(User.id != user_id, User.id.not_in(already))
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
        .all()
    )
