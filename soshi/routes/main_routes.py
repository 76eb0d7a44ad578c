import logging
from datetime import timezone

from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    render_template,
    request,
    stream_with_context,
)
from minio.error import S3Error
from werkzeug.http import http_date, parse_date

from soshi.context import current_user
from soshi.extensions.minio_client import get_minio_client

logger = logging.getLogger(__name__)

main_bp = Blueprint("main", __name__)


def _render_page(page: str, **params):
    return render_template("index.html", page=page, params=params, user=current_user())


@main_bp.route("/", methods=["GET"])
def index():
    # The gatekeeper redirects before this runs.
    return _render_page("index")


@main_bp.route("/login", methods=["GET"])
def login_page():
    return _render_page("login")


@main_bp.route("/register", methods=["GET"])
def register_page():
    return _render_page("register")


@main_bp.route("/feed", methods=["GET"])
def feed_page():
    return _render_page("feed")


@main_bp.route("/profile", methods=["GET"])
def own_profile_page():
    return _render_page("profile")


@main_bp.route("/profile/<int:user_id>", methods=["GET"])
def profile_page(user_id):
    return _render_page("profile", user_id=user_id)


@main_bp.route("/groups", methods=["GET"])
def groups_page():
    return _render_page("groups")


@main_bp.route("/groups/<int:group_id>", methods=["GET"])
def group_page(group_id):
    return _render_page("group", group_id=group_id)


@main_bp.route("/notifications", methods=["GET"])
def notifications_page():
    return _render_page("notifications")


@main_bp.route("/settings", methods=["GET"])
def settings_page():
    return _render_page("settings")


def _is_media_not_found(error: S3Error) -> bool:
    return error.code in {"NoSuchKey", "NoSuchBucket", "NoSuchObject"}


def _media_error_response(error: S3Error):
    if _is_media_not_found(error):
        return jsonify({"error": "Media not found"}), 404
    return jsonify({"error": "Media unavailable"}), 503


def _build_etag(value: str | None) -> str | None:
    if not value:
        return None
    value = str(value).strip().strip('"')
    return f'"{value}"' if value else None


def _build_last_modified(value):
    if not value:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return http_date(value.timestamp())


def _not_modified(etag: str | None, last_modified) -> bool:
    if_none_match = request.headers.get("If-None-Match")
    if if_none_match and etag:
        candidates = {part.strip().strip('"') for part in if_none_match.split(",")}
        return "*" in candidates or etag.strip('"') in candidates

    since = parse_date(request.headers.get("If-Modified-Since"))
    if since is None or not last_modified:
        return False
    if last_modified.tzinfo is None:
        last_modified = last_modified.replace(tzinfo=timezone.utc)
    return int(last_modified.timestamp()) <= int(since.timestamp())


def _build_media_headers(stat):
    config = current_app.config
    cache_control = f"public, max-age={max(int(config['MEDIA_CACHE_MAX_AGE_SECONDS']), 0)}"
    if config["MEDIA_CACHE_IMMUTABLE"]:
        cache_control = f"{cache_control}, immutable"

    headers = {
        "Cache-Control": cache_control,
        "Accept-Ranges": "bytes",
        "Content-Type": getattr(stat, "content_type", None) or "application/octet-stream",
    }

    size = getattr(stat, "size", None)
    if size is not None:
        headers["Content-Length"] = str(size)

    etag = _build_etag(getattr(stat, "etag", None))
    if etag:
        headers["ETag"] = etag

    last_modified = _build_last_modified(getattr(stat, "last_modified", None))
    if last_modified:
        headers["Last-Modified"] = last_modified

    return headers


@main_bp.route("/media/<path:object_name>", methods=["GET", "HEAD"])
def get_media(object_name: str):
    bucket = current_app.config["MINIO_BUCKET"]

    try:
        minio = get_minio_client(current_app.config)
        stat = minio.stat_object(bucket_name=bucket, object_name=object_name)
    except S3Error as e:
        return _media_error_response(e)
    except Exception:
        logger.warning("Media lookup failed for %s", object_name, exc_info=True)
        return jsonify({"error": "Media unavailable"}), 503

    headers = _build_media_headers(stat)

    if _not_modified(headers.get("ETag"), getattr(stat, "last_modified", None)):
        return Response(status=304, headers=headers)

    if request.method == "HEAD":
        return Response(status=200, headers=headers)

    try:
        minio_response = minio.get_object(bucket_name=bucket, object_name=object_name)
    except S3Error as e:
        return _media_error_response(e)
    except Exception:
        logger.warning("Media fetch failed for %s", object_name, exc_info=True)
        return jsonify({"error": "Media unavailable"}), 503

    chunk_size = max(int(current_app.config["MEDIA_STREAM_CHUNK_SIZE"]), 1024)

    def _stream():
        try:
            yield from minio_response.stream(chunk_size)
        finally:
            minio_response.close()
            minio_response.release_conn()

    return Response(
        stream_with_context(_stream()),
        status=200,
        headers=headers,
        direct_passthrough=True,
    )
