from sqlalchemy import select

from soshi.clock import utcnow
from soshi.db import db
from soshi.models.post_model import Post, PostHistory, post_allowed_viewers
from soshi.models.user_model import User


def create_post(user_id, content, privacy, image_url=None, group_id=None,
                allowed_viewer_ids=None):
    post = Post(
        user_id=user_id,
        content=content,
        privacy=privacy,
        image_url=image_url,
        group_id=group_id,
    )
    if allowed_viewer_ids:
        post.allowed_viewers = User.query.filter(
            User.id.in_(set(allowed_viewer_ids))
        ).all()

    db.session.add(post)
    db.session.commit()
    return post


def get_by_id(post_id: int):
    """Return a live post, or None when it is missing or soft-deleted."""
    post = db.session.get(Post, post_id)
    if not post or post.is_deleted:
        return None
    return post


def is_allowed_viewer(post_id: int, user_id: int) -> bool:
    row = db.session.execute(
        select(post_allowed_viewers.c.post_id).where(
            post_allowed_viewers.c.post_id == post_id,
            post_allowed_viewers.c.user_id == user_id,
        )
    ).first()
    return row is not None


def get_allowed_viewer_ids(post_id: int):
    rows = db.session.execute(
        select(post_allowed_viewers.c.user_id).where(
            post_allowed_viewers.c.post_id == post_id
        )
    ).all()
    return sorted(row[0] for row in rows)


def update_post(post, editor_id, content=None, privacy=None,
                image_url=None, allowed_viewer_ids=None):
    db.session.add(
        PostHistory(
            post_id=post.id,
            content=post.content,
            editor_id=editor_id,
        )
    )

    if content is not None:
        post.content = content
    if privacy is not None:
        post.privacy = privacy
    if image_url is not None:
        post.image_url = image_url or None
    if allowed_viewer_ids is not None:
        post.allowed_viewers = User.query.filter(
            User.id.in_(set(allowed_viewer_ids))
        ).all() if allowed_viewer_ids else []

    db.session.commit()
    return post


def soft_delete(post):
    post.deleted_at = utcnow()
    db.session.commit()
    return post


def get_history(post_id: int):
    return (
        PostHistory.query
        .filter_by(post_id=post_id)
        .order_by(PostHistory.edited_at.desc(), PostHistory.id.desc())
        .all()
    )


def paginate_posts(visibility_filter, page: int, limit: int, **filters):
    query = Post.query.filter(Post.deleted_at.is_(None), visibility_filter)

    if filters.get("user_id") is not None:
        query = query.filter(Post.user_id == filters["user_id"])
    if filters.get("group_id") is not None:
        query = query.filter(Post.group_id == filters["group_id"])

    total = query.count()
    posts = (
        query
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return total, posts


def count_posts_by_user(user_id: int, visibility_filter=None) -> int:
    query = Post.query.filter(
        Post.user_id == user_id,
        Post.deleted_at.is_(None),
    )
    if visibility_filter is not None:
        query = query.filter(visibility_filter)
    return query.count()
