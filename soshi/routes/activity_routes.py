from flask import Blueprint, jsonify, request

from soshi.context import current_user, login_required
from soshi.routes.helpers import json_body
from soshi.services import activity_service


activity_bp = Blueprint("activity", __name__)


@activity_bp.route("/activity", methods=["GET"])
@login_required
def my_activity():
    user = current_user()
    return jsonify(activity_service.list_activities(user, user.id, request.args)), 200


@activity_bp.route("/users/<int:user_id>/activity", methods=["GET"])
@login_required
def user_activity(user_id):
    return jsonify(activity_service.list_activities(current_user(), user_id, request.args)), 200


@activity_bp.route("/activity/settings", methods=["GET"])
@login_required
def get_settings():
    return jsonify({"settings": activity_service.get_settings(current_user())}), 200


@activity_bp.route("/activity/settings", methods=["PUT"])
@login_required
def update_settings():
    settings = activity_service.update_settings(current_user(), json_body())
    return jsonify({"settings": settings}), 200


@activity_bp.route("/activity/<int:activity_id>/hide", methods=["PUT"])
@login_required
def hide_activity(activity_id):
    activity = activity_service.hide_activity(current_user(), activity_id)
    return jsonify({"activity": activity}), 200


@activity_bp.route("/activity/<int:activity_id>/unhide", methods=["PUT"])
@login_required
def unhide_activity(activity_id):
    activity = activity_service.unhide_activity(current_user(), activity_id)
    return jsonify({"activity": activity}), 200
