from flask import Blueprint, jsonify

from soshi.context import current_user, login_required
from soshi.routes.helpers import json_body, paging
from soshi.services import group_service


group_bp = Blueprint("groups", __name__)


@group_bp.route("/groups", methods=["GET"])
@login_required
def list_groups():
    return jsonify({"groups": group_service.list_groups(current_user())}), 200


@group_bp.route("/groups", methods=["POST"])
@login_required
def create_group():
    group = group_service.create_group(current_user(), json_body())
    return jsonify({"group": group}), 201


@group_bp.route("/groups/<int:group_id>", methods=["GET"])
@login_required
def get_group(group_id):
    return jsonify({"group": group_service.get_group(current_user(), group_id)}), 200


@group_bp.route("/groups/<int:group_id>", methods=["PUT"])
@login_required
def update_group(group_id):
    group = group_service.update_group(current_user(), group_id, json_body())
    return jsonify({"group": group}), 200


@group_bp.route("/groups/<int:group_id>", methods=["DELETE"])
@login_required
def delete_group(group_id):
    group_service.delete_group(current_user(), group_id)
    return jsonify({"success": True}), 200


@group_bp.route("/groups/<int:group_id>/join", methods=["POST"])
@login_required
def join_group(group_id):
    status = group_service.request_join(current_user(), group_id)
    return jsonify({"status": status}), 201


@group_bp.route("/groups/<int:group_id>/join", methods=["DELETE"])
@login_required
def leave_group(group_id):
    group_service.leave_group(current_user(), group_id)
    return jsonify({"success": True}), 200


@group_bp.route("/groups/<int:group_id>/invite", methods=["POST"])
@login_required
def invite_member(group_id):
    status = group_service.invite(current_user(), group_id, json_body())
    return jsonify({"status": status}), 201


@group_bp.route("/groups/<int:group_id>/members/<int:member_id>", methods=["PUT"])
@login_required
def respond_membership(group_id, member_id):
    status = group_service.respond_to_membership(
        current_user(), group_id, member_id, json_body()
    )
    return jsonify({"status": status}), 200


@group_bp.route("/groups/<int:group_id>/members/<int:member_id>", methods=["DELETE"])
@login_required
def remove_member(group_id, member_id):
    group_service.remove_member(current_user(), group_id, member_id)
    return jsonify({"success": True}), 200


@group_bp.route("/groups/<int:group_id>/posts", methods=["GET"])
@login_required
def group_posts(group_id):
    page, limit = paging()
    return jsonify(group_service.get_group_posts(current_user(), group_id, page, limit)), 200


@group_bp.route("/groups/<int:group_id>/posts", methods=["POST"])
@login_required
def create_group_post(group_id):
    post = group_service.create_group_post(current_user(), group_id, json_body())
    return jsonify({"post": post}), 201


@group_bp.route("/groups/<int:group_id>/events", methods=["GET"])
@login_required
def list_events(group_id):
    return jsonify({"events": group_service.list_events(current_user(), group_id)}), 200


@group_bp.route("/groups/<int:group_id>/events", methods=["POST"])
@login_required
def create_event(group_id):
    event = group_service.create_event(current_user(), group_id, json_body())
    return jsonify({"event": event}), 201


@group_bp.route("/groups/events/<int:event_id>/respond", methods=["POST"])
@login_required
def respond_event(event_id):
    event = group_service.respond_to_event(current_user(), event_id, json_body())
    return jsonify({"event": event}), 200
