"""Per-request identity resolution and page gatekeeping.

Every request gets a ``RequestContext`` on ``flask.g`` before any view
runs. Page routes are then redirected between ``/login`` and ``/feed``
depending on whether the session cookie resolves to a user.
"""
import logging
from datetime import timedelta

from flask import g, redirect, request

from soshi.context import RequestContext
from soshi.services import auth_service


logger = logging.getLogger(__name__)

PASSTHROUGH = "passthrough"
AUTH_ONLY = "auth_only"
PUBLIC = "public"
PROTECTED = "protected"

PASSTHROUGH_PREFIXES = ("/static", "/media", "/api", "/favicon.ico")
AUTH_ONLY_PATHS = ("/login", "/register")
PUBLIC_PATHS = ("/",)

LOGIN_PATH = "/login"
HOME_PATH = "/feed"


def _matches_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def classify_path(path: str) -> str:
    path = path or "/"
    if any(_matches_prefix(path, prefix) for prefix in PASSTHROUGH_PREFIXES):
        return PASSTHROUGH
    if path.rstrip("/") in AUTH_ONLY_PATHS:
        return AUTH_ONLY
    if path in PUBLIC_PATHS:
        return PUBLIC
    return PROTECTED


def decide(kind: str, path: str, had_cookie: bool, user) -> str | None:
    """Return the redirect target for a page request, or None to continue."""
    if kind == PASSTHROUGH:
        return None

    if had_cookie and user is None:
        # Stale cookie; login and register still render so the user can recover.
        return None if kind == AUTH_ONLY else LOGIN_PATH

    if kind == PUBLIC:
        return HOME_PATH if user is not None else LOGIN_PATH

    if kind == AUTH_ONLY:
        return HOME_PATH if user is not None else None

    if kind == PROTECTED and user is None:
        return LOGIN_PATH

    return None


def set_session_cookie(response, token: str, config):
    ctx = g.get("request_context")
    if ctx is not None:
        ctx.clear_cookie = False

    response.set_cookie(
        config["AUTH_COOKIE_NAME"],
        token,
        max_age=int(timedelta(days=config["SESSION_TTL_DAYS"]).total_seconds()),
        httponly=True,
        secure=config["AUTH_COOKIE_SECURE"],
        samesite=config["AUTH_COOKIE_SAMESITE"],
        path="/",
    )
    return response


def clear_session_cookie(response, config):
    response.delete_cookie(
        config["AUTH_COOKIE_NAME"],
        path="/",
        httponly=True,
        secure=config["AUTH_COOKIE_SECURE"],
        samesite=config["AUTH_COOKIE_SAMESITE"],
    )
    return response


def register_gatekeeper(app):
    cookie_name = app.config["AUTH_COOKIE_NAME"]

    @app.before_request
    def resolve_identity():
        token = request.cookies.get(cookie_name)
        user = auth_service.resolve_session(token) if token else None

        g.request_context = RequestContext(
            user=user,
            session_token=token if user is not None else None,
            config=app.config,
            clear_cookie=bool(token) and user is None,
        )

        kind = classify_path(request.path)
        target = decide(kind, request.path, bool(token), user)
        if target is not None and target != request.path:
            logger.debug("Redirecting %s to %s", request.path, target)
            return redirect(target)
        return None

    @app.after_request
    def clear_stale_cookie(response):
        ctx = g.get("request_context")
        if ctx is not None and ctx.clear_cookie:
            clear_session_cookie(response, app.config)
        return response
