from flask import Blueprint, jsonify

from soshi.context import current_user, login_required
from soshi.routes.helpers import json_body
from soshi.services import reaction_service


reaction_bp = Blueprint("reactions", __name__)


@reaction_bp.route("/posts/<int:post_id>/reactions", methods=["GET"])
def post_reactions(post_id):
    return jsonify(reaction_service.get_reactions(current_user(), "post", post_id)), 200


@reaction_bp.route("/posts/<int:post_id>/reactions", methods=["POST"])
@login_required
def react_to_post(post_id):
    result = reaction_service.react(current_user(), "post", post_id, json_body())
    return jsonify(result), 200


@reaction_bp.route("/comments/<int:comment_id>/reactions", methods=["GET"])
def comment_reactions(comment_id):
    return jsonify(reaction_service.get_reactions(current_user(), "comment", comment_id)), 200


@reaction_bp.route("/comments/<int:comment_id>/reactions", methods=["POST"])
@login_required
def react_to_comment(comment_id):
    result = reaction_service.react(current_user(), "comment", comment_id, json_body())
    return jsonify(result), 200
