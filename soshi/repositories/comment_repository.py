from soshi.clock import utcnow
from soshi.db import db
from soshi.models.comment_model import Comment


def create_comment(user_id, post_id, content, parent_id=None, image_url=None):
    comment = Comment(
        user_id=user_id,
        post_id=post_id,
        parent_id=parent_id,
        content=content,
        image_url=image_url,
    )

    db.session.add(comment)
    db.session.commit()
    return comment


def get_by_id(comment_id: int):
    comment = db.session.get(Comment, comment_id)
    if not comment or comment.is_deleted:
        return None
    return comment


def get_comments_by_post(post_id: int, include_deleted: bool = False):
    query = Comment.query.filter(Comment.post_id == post_id)
    if not include_deleted:
        query = query.filter(Comment.deleted_at.is_(None))
    return (
        query
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def count_live_comments(post_id: int) -> int:
    return Comment.query.filter(
        Comment.post_id == post_id,
        Comment.deleted_at.is_(None),
    ).count()


def update_comment(comment, content, image_url=None):
    comment.content = content
    if image_url is not None:
        comment.image_url = image_url or None
    db.session.commit()
    return comment


def soft_delete(comment):
    comment.deleted_at = utcnow()
    db.session.commit()
    return comment
