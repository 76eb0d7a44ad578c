from soshi.db import db
from soshi.models.user_model import User


def get_by_id(user_id: int):
    return db.session.get(User, user_id)


def get_by_email(email: str):
    return User.query.filter_by(email=email.strip().lower()).first()


def get_many(user_ids):
    if not user_ids:
        return []
    return User.query.filter(User.id.in_(set(user_ids))).all()


def create_user(email, password_hash, first_name, last_name, date_of_birth,
                avatar=None, nickname=None, about_me=None):
    user = User(
        email=email.strip().lower(),
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date_of_birth,
        avatar=avatar,
        nickname=nickname,
        about_me=about_me,
    )
    db.session.add(user)
    db.session.commit()
    return user


def update_password(user, password_hash: str):
    user.password_hash = password_hash
    db.session.commit()
    return user
