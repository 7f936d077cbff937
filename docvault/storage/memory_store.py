"""In-memory object store.

No network calls. Used for local development and tests; it honours the same
URL layout as the S3 store so key/URL round-trips behave identically.
"""

import time
from dataclasses import dataclass, field
from urllib.parse import urlencode

from docvault.storage.base import DEFAULT_SIGNED_URL_TTL_SECONDS, BaseObjectStore
from docvault.storage.exceptions import ObjectNotFoundError
from docvault.storage.keys import encode_key, key_from_url


@dataclass
class StoredBlob:
    content: bytes
    content_type: str
    metadata: dict[str, str] = field(default_factory=dict)


class InMemoryObjectStore(BaseObjectStore):
    def __init__(self, base_url: str = "https://docvault.local") -> None:
        self._base_url = base_url.rstrip("/")
        self.objects: dict[str, StoredBlob] = {}

    def put(
        self,
        key: str,
        content: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> str:
        self.objects[key] = StoredBlob(content, content_type, dict(metadata or {}))
        return self.url_for(key)

    def get(self, key: str) -> bytes:
        blob = self.objects.get(key)
        if blob is None:
            raise ObjectNotFoundError(f"Object not found: {key}")
        return blob.content

    def signed_url(self, key: str, ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS) -> str:
        query = urlencode({"expires": int(time.time()) + ttl_seconds})
        return f"{self.url_for(key)}?{query}"

    def url_for(self, key: str) -> str:
        return f"{self._base_url}/{encode_key(key)}"

    def key_for_url(self, url: str) -> str:
        return key_from_url(url, self._base_url)
