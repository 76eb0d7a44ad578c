from flask import Blueprint, jsonify, request

from soshi.context import login_required
from soshi.services import upload_service


upload_bp = Blueprint("uploads", __name__)


@upload_bp.route("/upload", methods=["POST"])
@login_required
def upload():
    upload_type = request.form.get("type", "posts")
    result = upload_service.save_upload(request.files.get("file"), upload_type)
    result["message"] = "File uploaded successfully"
    return jsonify(result), 200
