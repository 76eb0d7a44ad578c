import hashlib
import logging
import secrets
from datetime import timedelta

from werkzeug.security import check_password_hash, generate_password_hash

from soshi.clock import utcnow
from soshi.errors import Conflict, Unauthenticated
from soshi.repositories import session_repository, user_repository
from soshi.schemas.auth_schema import RegisterSchema


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
DEFAULT_SESSION_TTL = timedelta(days=7)

# Compared against when the email is unknown so the response time does not
# reveal whether an account exists.
_DUMMY_PASSWORD_HASH = generate_password_hash("soshi-dummy-password")


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def register(payload):
    data = RegisterSchema().load(payload or {})

    if user_repository.get_by_email(data["email"]):
        raise Conflict("Email already registered")

    user = user_repository.create_user(
        email=data["email"],
        password_hash=generate_password_hash(data["password"]),
        first_name=data["first_name"],
        last_name=data["last_name"],
        date_of_birth=data["date_of_birth"],
        avatar=data.get("avatar"),
        nickname=data.get("nickname"),
        about_me=data.get("about_me"),
    )
    logger.info("Registered user %s", user.id)
    return user


def authenticate(email, password):
    if not isinstance(email, str) or not isinstance(password, str):
        raise Unauthenticated(INVALID_CREDENTIALS)

    user = user_repository.get_by_email(email)
    if user is None:
        check_password_hash(_DUMMY_PASSWORD_HASH, password)
        logger.info("Login failed for unknown email")
        raise Unauthenticated(INVALID_CREDENTIALS)

    if not check_password_hash(user.password_hash, password):
        logger.info("Login failed for user %s", user.id)
        raise Unauthenticated(INVALID_CREDENTIALS)

    return user


def create_session(user, ttl: timedelta | None = None) -> str:
    """Issue a new opaque token for ``user``; only its hash is persisted."""
    token = secrets.token_urlsafe(32)
    expires_at = utcnow() + (ttl or DEFAULT_SESSION_TTL)
    session_repository.create_session(user.id, hash_token(token), expires_at)
    return token


def resolve_session(token):
    """Map a cookie value to its user.

    Returns None for a missing, unknown or expired token. Expired rows are
    deleted on the spot.
    """
    if not token or not isinstance(token, str):
        return None

    session = session_repository.get_by_token_hash(hash_token(token))
    if session is None:
        return None

    if session.is_expired(utcnow()):
        session_repository.delete_session(session.id)
        logger.info("Expired session %s removed for user %s", session.id, session.user_id)
        return None

    return user_repository.get_by_id(session.user_id)


def revoke_session(token) -> bool:
    if not token:
        return False
    removed = session_repository.delete_by_token_hash(hash_token(token))
    if removed:
        logger.info("Session revoked")
    return removed


def revoke_user_sessions(user_id: int) -> int:
    count = session_repository.delete_user_sessions(user_id)
    logger.info("Revoked %s sessions for user %s", count, user_id)
    return count


def change_password(user, current_password, new_password, ttl=None) -> str:
    if not check_password_hash(user.password_hash, current_password):
        raise Unauthenticated("Current password is incorrect")

    user_repository.update_password(user, generate_password_hash(new_password))
    revoke_user_sessions(user.id)
    return create_session(user, ttl)


def purge_expired_sessions() -> int:
    count = session_repository.delete_expired(utcnow())
    logger.info("Purged %s expired sessions", count)
    return count
