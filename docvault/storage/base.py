from abc import ABC, abstractmethod

DEFAULT_SIGNED_URL_TTL_SECONDS = 3600


class BaseObjectStore(ABC):
    """Contract for object storage backends."""

    @abstractmethod
    def put(
        self,
        key: str,
        content: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> str:
        """Upload ``content`` under ``key`` and return its public URL.

        Writing identical content to an existing key leaves the object unchanged
        in effect.

        Raises:
            StorageError: on any backend failure.
        """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Download the object stored under ``key``.

        Raises:
            ObjectNotFoundError: if the key does not exist.
            StorageError: on any other backend failure.
        """

    @abstractmethod
    def signed_url(self, key: str, ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS) -> str:
        """Return a time-limited GET URL for ``key``."""

    @abstractmethod
    def url_for(self, key: str) -> str:
        """Return the unsigned URL that addresses ``key``."""

    @abstractmethod
    def key_for_url(self, url: str) -> str:
        """Return the decoded key that ``url`` (signed or not) addresses.

        Raises:
            InvalidUrlFormatError: if ``url`` does not address this store.
        """
