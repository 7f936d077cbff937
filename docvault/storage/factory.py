from minio import Minio

from docvault.config.settings import Settings
from docvault.storage.base import BaseObjectStore
from docvault.storage.memory_store import InMemoryObjectStore
from docvault.storage.s3_store import S3ObjectStore


class ObjectStoreFactory:
    """Creates the configured object store backend."""

    @staticmethod
    def create(settings: Settings) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        if backend == "memory":
            return InMemoryObjectStore()
        if backend == "s3":
            if not settings.aws_s3_bucket_name:
                raise ValueError("aws_s3_bucket_name is required for storage_backend=s3")
            client = Minio(
                endpoint=settings.storage_endpoint,
                access_key=settings.aws_access_key_id or None,
                secret_key=settings.aws_secret_access_key or None,
                secure=settings.storage_secure,
                region=settings.aws_s3_region,
            )
            return S3ObjectStore(
                client=client,
                bucket=settings.aws_s3_bucket_name,
                region=settings.aws_s3_region,
                public_base_url=settings.storage_public_base_url,
            )
        raise ValueError(
            f"Unknown storage backend '{settings.storage_backend}'. Choose from: ['memory', 's3']"
        )
