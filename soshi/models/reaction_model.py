from soshi.clock import utcnow
from soshi.db import db


REACTION_TYPES = ("like", "dislike")


class Reaction(db.Model):
    __tablename__ = "reactions"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    target_type = db.Column(
        db.String(20), nullable=False
    )  # "post" | "comment"

    target_id = db.Column(db.Integer, nullable=False)

    type = db.Column(db.String(20), nullable=False)  # "like" | "dislike"

    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "target_type", "target_id",
            name="unique_user_reaction"
        ),
        db.Index("ix_reactions_target", "target_type", "target_id"),
    )
