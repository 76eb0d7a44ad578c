from dataclasses import dataclass, field
from functools import wraps

from flask import current_app, g

from soshi.errors import Unauthenticated


@dataclass
class RequestContext:
    """Identity resolved once per request by the gatekeeper."""

    user: object = None
    session_token: str | None = None
    config: dict = field(default_factory=dict)
    clear_cookie: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


def get_request_context() -> RequestContext:
    ctx = g.get("request_context")
    if ctx is None:
        ctx = RequestContext(config=current_app.config)
        g.request_context = ctx
    return ctx


def current_user():
    return get_request_context().user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            raise Unauthenticated()
        return view(*args, **kwargs)

    return wrapper
