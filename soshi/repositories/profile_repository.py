from soshi.db import db


def update_profile(user, **fields):
    for key, value in fields.items():
        setattr(user, key, value)
    db.session.commit()
    return user


def set_public(user, is_public: bool):
    user.is_public = is_public
    db.session.commit()
    return user
