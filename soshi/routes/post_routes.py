from flask import Blueprint, jsonify

from soshi.context import current_user, login_required
from soshi.routes.helpers import json_body, paging
from soshi.services import post_service


post_bp = Blueprint("posts", __name__)


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    page, limit = paging()
    return jsonify(post_service.get_feed(current_user(), page, limit)), 200


@post_bp.route("/posts", methods=["POST"])
@login_required
def create_post():
    post = post_service.create_post(current_user(), json_body())
    return jsonify({"post": post}), 201


@post_bp.route("/posts/<int:post_id>", methods=["GET"])
def get_post(post_id):
    return jsonify({"post": post_service.get_post(current_user(), post_id)}), 200


@post_bp.route("/posts/<int:post_id>", methods=["PUT"])
@login_required
def update_post(post_id):
    post = post_service.update_post(current_user(), post_id, json_body())
    return jsonify({"post": post}), 200


@post_bp.route("/posts/<int:post_id>", methods=["DELETE"])
@login_required
def delete_post(post_id):
    post_service.delete_post(current_user(), post_id)
    return jsonify({"success": True}), 200


@post_bp.route("/posts/<int:post_id>/history", methods=["GET"])
def post_history(post_id):
    history = post_service.get_post_history(current_user(), post_id)
    return jsonify({"history": history}), 200
