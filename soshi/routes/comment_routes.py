from flask import Blueprint, jsonify

from soshi.context import current_user, login_required
from soshi.routes.helpers import json_body
from soshi.services import comment_service


comment_bp = Blueprint("comments", __name__)


@comment_bp.route("/posts/<int:post_id>/comments", methods=["GET"])
def list_comments(post_id):
    comments = comment_service.get_post_comments(current_user(), post_id)
    return jsonify({"comments": comments}), 200


@comment_bp.route("/posts/<int:post_id>/comments", methods=["POST"])
@login_required
def create_comment(post_id):
    comment = comment_service.add_comment(current_user(), post_id, json_body())
    return jsonify({"comment": comment}), 201


@comment_bp.route("/comments/<int:comment_id>", methods=["GET"])
def get_comment(comment_id):
    return jsonify({"comment": comment_service.get_comment(current_user(), comment_id)}), 200


@comment_bp.route("/comments/<int:comment_id>", methods=["PUT"])
@login_required
def update_comment(comment_id):
    comment = comment_service.update_comment(current_user(), comment_id, json_body())
    return jsonify({"comment": comment}), 200


@comment_bp.route("/comments/<int:comment_id>", methods=["DELETE"])
@login_required
def delete_comment(comment_id):
    comment_service.delete_comment(current_user(), comment_id)
    return jsonify({"success": True}), 200
