import io
from datetime import timedelta

from minio import Minio
from minio.error import S3Error

from docvault.storage.base import DEFAULT_SIGNED_URL_TTL_SECONDS, BaseObjectStore
from docvault.storage.exceptions import ObjectNotFoundError, StorageError
from docvault.storage.keys import encode_key, key_from_url

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NoSuchObject"})


class S3ObjectStore(BaseObjectStore):
    """Object store adapter for AWS S3 and S3-compatible endpoints."""

    def __init__(
        self,
        *,
        client: Minio,
        bucket: str,
        region: str,
        public_base_url: str = "",
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._public_base_url = (
            public_base_url.rstrip("/")
            or f"https://{bucket}.s3.{region}.amazonaws.com"
        )

    def put(
        self,
        key: str,
        content: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> str:
        try:
            self._client.put_object(
                bucket_name=self._bucket,
                object_name=key,
                data=io.BytesIO(content),
                length=len(content),
                content_type=content_type,
                metadata=metadata or None,
            )
        except S3Error as exc:
            raise StorageError(f"Upload failed for {key}: {exc}") from exc
        return self.url_for(key)

    def get(self, key: str) -> bytes:
        response = None
        try:
            response = self._client.get_object(bucket_name=self._bucket, object_name=key)
            return response.read()
        except S3Error as exc:
            if exc.code in _MISSING_OBJECT_CODES:
                raise ObjectNotFoundError(f"Object not found: {key}") from exc
            raise StorageError(f"Download failed for {key}: {exc}") from exc
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def signed_url(self, key: str, ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS) -> str:
        try:
            return self._client.presigned_get_object(
                bucket_name=self._bucket,
                object_name=key,
                expires=timedelta(seconds=ttl_seconds),
            )
        except S3Error as exc:
            raise StorageError(f"Failed to sign URL for {key}: {exc}") from exc

    def url_for(self, key: str) -> str:
        return f"{self._public_base_url}/{encode_key(key)}"

    def key_for_url(self, url: str) -> str:
        return key_from_url(url, self._public_base_url)
