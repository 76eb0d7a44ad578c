import logging
import os
import uuid
from http import HTTPStatus

from flask import current_app, has_request_context, request

from soshi.errors import ApiError, ValidationError
from soshi.extensions.minio_client import get_minio_client


logger = logging.getLogger(__name__)

INVALID_FILE = "Invalid file. Must be JPG, PNG, or GIF under 5MB"

# Sniffed from the file header; the client's Content-Type is not trusted.
_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg", "jpg"),
    (b"\x89PNG\r\n\x1a\n", "image/png", "png"),
    (b"GIF87a", "image/gif", "gif"),
    (b"GIF89a", "image/gif", "gif"),
)


class MediaStorageError(ApiError):
    status = HTTPStatus.SERVICE_UNAVAILABLE
    default_message = "Media storage is unavailable"


def build_media_url(object_name: str) -> str:
    base_url = current_app.config.get("APP_PUBLIC_BASE_URL", "").rstrip("/")
    if not base_url and has_request_context():
        base_url = request.url_root.rstrip("/")

    if object_name.startswith("static/"):
        if base_url:
            return f"{base_url}/{object_name}"
        return f"/{object_name}"

    if base_url:
        return f"{base_url}/media/{object_name}"
    return f"/media/{object_name}"


def _get_stream_and_length(file_storage):
    stream = getattr(file_storage, "stream", file_storage)
    try:
        stream.seek(0, 2)
        length = stream.tell()
        stream.seek(0)
        return stream, length
    except (AttributeError, OSError):
        return stream, -1


def _sniff_image(stream):
    header = stream.read(8)
    stream.seek(0)
    for signature, mimetype, extension in _SIGNATURES:
        if header.startswith(signature):
            return mimetype, extension
    return None, None


def _store_locally(file_storage, upload_type: str, filename: str) -> str:
    relative_parts = ["uploads", upload_type, filename]
    absolute_path = os.path.join(current_app.static_folder, *relative_parts)
    os.makedirs(os.path.dirname(absolute_path), exist_ok=True)

    file_storage.stream.seek(0)
    file_storage.save(absolute_path)
    return "static/" + "/".join(relative_parts)


def _store_in_minio(stream, length, object_name, mimetype):
    config = current_app.config
    minio = get_minio_client(config)
    bucket = config["MINIO_BUCKET"]

    if not minio.bucket_exists(bucket):
        minio.make_bucket(bucket)

    minio.put_object(
        bucket_name=bucket,
        object_name=object_name,
        data=stream,
        length=length,
        content_type=mimetype,
    )
    return object_name


def validate_upload(file_storage, upload_type):
    """Check type and size before anything touches storage."""
    config = current_app.config

    if upload_type not in config["UPLOAD_ALLOWED_TYPES"]:
        raise ValidationError("Invalid upload type")
    if file_storage is None or not getattr(file_storage, "filename", ""):
        raise ValidationError("No file provided")

    stream, length = _get_stream_and_length(file_storage)
    max_bytes = int(config["UPLOAD_MAX_BYTES"])
    if length < 0 or length > max_bytes:
        logger.info("Rejected upload of %s bytes for %s", length, upload_type)
        raise ValidationError(f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB")
    if length == 0:
        raise ValidationError(INVALID_FILE)

    mimetype, extension = _sniff_image(stream)
    if mimetype is None:
        logger.info("Rejected upload with unsupported content for %s", upload_type)
        raise ValidationError(INVALID_FILE)

    return stream, length, mimetype, extension


def save_upload(file_storage, upload_type):
    stream, length, mimetype, extension = validate_upload(file_storage, upload_type)
    filename = f"{uuid.uuid4()}.{extension}"
    object_name = f"uploads/{upload_type}/{filename}"

    try:
        stored = _store_in_minio(stream, length, object_name, mimetype)
    except Exception as e:
        if not current_app.config.get("MEDIA_LOCAL_FALLBACK_ENABLED", True):
            raise MediaStorageError("Media storage is unavailable") from e
        logger.warning("MinIO upload failed, storing %s on local disk: %s", filename, e)
        try:
            stored = _store_locally(file_storage, upload_type, filename)
        except OSError as local_error:
            raise MediaStorageError("Media storage is unavailable") from local_error

    return {"url": build_media_url(stored)}
