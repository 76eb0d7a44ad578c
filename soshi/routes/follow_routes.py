from flask import Blueprint, jsonify

from soshi.context import current_user, login_required
from soshi.routes.helpers import json_body
from soshi.services import follow_service


follow_bp = Blueprint("follows", __name__)


@follow_bp.route("/users/<int:user_id>/follow", methods=["POST"])
@login_required
def follow_user(user_id):
    status = follow_service.follow(current_user(), user_id)
    return jsonify({"status": status}), 200


@follow_bp.route("/users/<int:user_id>/follow", methods=["DELETE"])
@login_required
def unfollow_user(user_id):
    removed = follow_service.unfollow(current_user(), user_id)
    return jsonify(
        {"message": "Unfollowed"} if removed else {"message": "Not following"}
    ), 200


@follow_bp.route("/users/<int:user_id>/follow-request", methods=["PUT"])
@login_required
def respond_follow_request(user_id):
    status = follow_service.respond_to_request(current_user(), user_id, json_body())
    return jsonify({"status": status}), 200


@follow_bp.route("/users/<int:user_id>/follow-status", methods=["GET"])
@login_required
def follow_status(user_id):
    return jsonify(follow_service.follow_status(current_user(), user_id)), 200


@follow_bp.route("/users/<int:user_id>/followers", methods=["GET"])
def followers(user_id):
    return jsonify({"users": follow_service.get_followers(current_user(), user_id)}), 200


@follow_bp.route("/users/<int:user_id>/following", methods=["GET"])
def following(user_id):
    return jsonify({"users": follow_service.get_following(current_user(), user_id)}), 200


@follow_bp.route("/users/follow-requests", methods=["GET"])
@login_required
def pending_requests():
    return jsonify({"users": follow_service.get_pending_requests(current_user())}), 200


@follow_bp.route("/users/suggested", methods=["GET"])
@login_required
def suggested_users():
    return jsonify({"users": follow_service.get_suggested_users(current_user())}), 200
