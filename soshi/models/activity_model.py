from soshi.clock import utcnow
from soshi.db import db


POST_CREATED = "post_created"
COMMENT_CREATED = "comment_created"


class Activity(db.Model):
    __tablename__ = "activities"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    activity_type = db.Column(db.String(50), nullable=False)
    target_type = db.Column(db.String(20), nullable=False)  # "post" | "comment"
    target_id = db.Column(db.Integer, nullable=False)
    target_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    details = db.Column(db.JSON, nullable=False, default=dict)
    is_hidden = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "activity_type": self.activity_type,
            "target_type": self.target_type,
            "target_id": self.target_id,
            "target_user_id": self.target_user_id,
            "metadata": self.details or {},
            "is_hidden": self.is_hidden,
            "created_at": self.created_at.isoformat(),
        }


class ActivitySettings(db.Model):
    __tablename__ = "activity_settings"

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    show_posts = db.Column(db.Boolean, nullable=False, default=True)
    show_comments = db.Column(db.Boolean, nullable=False, default=True)
    show_likes = db.Column(db.Boolean, nullable=False, default=True)
    show_to_followers_only = db.Column(db.Boolean, nullable=False, default=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        return {
            "show_posts": self.show_posts,
            "show_comments": self.show_comments,
            "show_likes": self.show_likes,
            "show_to_followers_only": self.show_to_followers_only,
        }
