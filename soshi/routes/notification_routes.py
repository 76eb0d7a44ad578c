from flask import Blueprint, jsonify

from soshi.context import current_user, login_required
from soshi.services import notification_service


notification_bp = Blueprint("notifications", __name__)


@notification_bp.route("/notifications", methods=["GET"])
@login_required
def list_notifications():
    notifications = notification_service.list_notifications(current_user())
    return jsonify({"notifications": notifications}), 200


@notification_bp.route("/notifications/unread-count", methods=["GET"])
@login_required
def unread_count():
    return jsonify({"count": notification_service.unread_count(current_user())}), 200


@notification_bp.route("/notifications/<int:notification_id>/read", methods=["PUT"])
@login_required
def mark_read(notification_id):
    notification = notification_service.mark_read(current_user(), notification_id)
    return jsonify({"notification": notification}), 200


@notification_bp.route("/notifications/read-all", methods=["PUT"])
@login_required
def mark_all_read():
    updated = notification_service.mark_all_read(current_user())
    return jsonify({"success": True, "updated": updated}), 200
