from soshi.db import db
from soshi.models.session_model import Session


def create_session(user_id: int, token_hash: str, expires_at):
    session = Session(
        user_id=user_id,
        token_hash=token_hash,
        expires_at=expires_at,
    )
    db.session.add(session)
    db.session.commit()
    return session


def get_by_token_hash(token_hash: str):
    return Session.query.filter_by(token_hash=token_hash).first()


def delete_session(session_id: int) -> bool:
    deleted = Session.query.filter_by(id=session_id).delete()
    db.session.commit()
    return deleted > 0


def delete_by_token_hash(token_hash: str) -> bool:
    deleted = Session.query.filter_by(token_hash=token_hash).delete()
    db.session.commit()
    return deleted > 0


def delete_user_sessions(user_id: int) -> int:
    deleted = Session.query.filter_by(user_id=user_id).delete()
    db.session.commit()
    return deleted


def delete_expired(now) -> int:
    deleted = Session.query.filter(Session.expires_at <= now).delete()
    db.session.commit()
    return deleted


def count_user_sessions(user_id: int) -> int:
    return Session.query.filter_by(user_id=user_id).count()
