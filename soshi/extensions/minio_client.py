import urllib3
from threading import Lock

from minio import Minio


_minio_client = None
_minio_signature = None
_minio_lock = Lock()


def _build_signature(config):
    return (
        config["MINIO_ENDPOINT"],
        config["MINIO_ACCESS_KEY"],
        config["MINIO_SECRET_KEY"],
        config["MINIO_SECURE"],
        config["MINIO_CONNECT_TIMEOUT"],
        config["MINIO_READ_TIMEOUT"],
        config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
    )


def get_minio_client(config):
    """Return a process-wide MinIO client, rebuilt when its settings change."""
    global _minio_client, _minio_signature

    signature = _build_signature(config)
    with _minio_lock:
        if _minio_client is not None and _minio_signature == signature:
            return _minio_client

        http_client = urllib3.PoolManager(
            timeout=urllib3.Timeout(
                connect=config["MINIO_CONNECT_TIMEOUT"],
                read=config["MINIO_READ_TIMEOUT"],
            ),
            retries=False,
            maxsize=config.get("MINIO_HTTP_POOL_MAXSIZE", 32),
        )

        _minio_client = Minio(
            config["MINIO_ENDPOINT"],
            access_key=config["MINIO_ACCESS_KEY"],
            secret_key=config["MINIO_SECRET_KEY"],
            secure=config["MINIO_SECURE"],
            http_client=http_client,
        )
        _minio_signature = signature
        return _minio_client
