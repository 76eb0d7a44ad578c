from datetime import timedelta

from flask import Blueprint, current_app, jsonify, request

from soshi.context import current_user, login_required
from soshi.middleware.gatekeeper import clear_session_cookie, set_session_cookie
from soshi.routes.helpers import json_body
from soshi.schemas.auth_schema import ChangePasswordSchema, LoginSchema
from soshi.services import auth_service


auth_bp = Blueprint("auth", __name__)


def _session_ttl():
    return timedelta(days=current_app.config["SESSION_TTL_DAYS"])


@auth_bp.route("/register", methods=["POST"])
def register():
    user = auth_service.register(json_body())
    token = auth_service.create_session(user, _session_ttl())

    response = jsonify({"user": user.to_dict()})
    response.status_code = 201
    return set_session_cookie(response, token, current_app.config)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = LoginSchema().load(json_body())
    user = auth_service.authenticate(data["email"], data["password"])
    token = auth_service.create_session(user, _session_ttl())

    response = jsonify({"user": user.to_dict()})
    return set_session_cookie(response, token, current_app.config)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    token = request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])
    auth_service.revoke_session(token)

    response = jsonify({"success": True})
    return clear_session_cookie(response, current_app.config)


@auth_bp.route("/session", methods=["GET"])
def session():
    user = current_user()
    return jsonify({"user": user.to_dict() if user else None}), 200


@auth_bp.route("/password", methods=["PUT"])
@login_required
def change_password():
    data = ChangePasswordSchema().load(json_body())
    token = auth_service.change_password(
        current_user(),
        data["current_password"],
        data["new_password"],
        _session_ttl(),
    )

    response = jsonify({"success": True})
    return set_session_cookie(response, token, current_app.config)
