from flask import Blueprint, jsonify

from soshi.context import current_user, login_required
from soshi.routes.helpers import json_body, paging
from soshi.services import post_service, profile_service


profile_bp = Blueprint("profiles", __name__)


@profile_bp.route("/users/profile", methods=["GET"])
@login_required
def get_my_profile():
    return jsonify({"profile": profile_service.get_own_profile(current_user())}), 200


@profile_bp.route("/users/profile", methods=["PUT"])
@login_required
def update_my_profile():
    profile = profile_service.update_profile(current_user(), json_body())
    return jsonify({"profile": profile}), 200


@profile_bp.route("/users/profile/privacy", methods=["PUT"])
@login_required
def update_privacy():
    return jsonify(profile_service.set_privacy(current_user(), json_body())), 200


@profile_bp.route("/users/<int:user_id>/profile", methods=["GET"])
def get_profile(user_id):
    return jsonify({"profile": profile_service.get_profile(current_user(), user_id)}), 200


@profile_bp.route("/users/<int:user_id>/posts", methods=["GET"])
def get_user_posts(user_id):
    page, limit = paging()
    return jsonify(post_service.get_user_posts(current_user(), user_id, page, limit)), 200
