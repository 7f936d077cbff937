"""Storage key layout and URL <-> key conversion.

Keys are written decoded (plain UTF-8). URLs carry the key percent-encoded
with ``/`` kept as the separator. ``raw_key_from_url`` exists for keys that
earlier versions stored pre-encoded.
"""

import re
from urllib.parse import quote, unquote, urlsplit

from docvault.storage.exceptions import InvalidUrlFormatError

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')


def sanitize_filename(filename: str) -> str:
    """Replace characters that are unsafe in keys and archive entries with '_'."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def document_key(project_id: str, content_hash: str, filename: str) -> str:
    """projects/{project_id}/{hash}-{filename}"""
    return f"projects/{project_id}/{content_hash}-{sanitize_filename(filename)}"


def archive_key(project_id: str, content_hash: str, filename: str) -> str:
    """projects/{project_id}/zips/{hash}-{filename}"""
    return f"projects/{project_id}/zips/{content_hash}-{sanitize_filename(filename)}"


def encode_key(key: str) -> str:
    return quote(key, safe="/")


def key_from_url(url: str, base_url: str | None = None) -> str:
    """Return the decoded storage key addressed by ``url``.

    ``base_url`` is the store's public base; when it carries a path (for
    example ``http://minio:9000/bucket``) that prefix is not part of the key.

    Raises:
        InvalidUrlFormatError: if the URL has no scheme, host, or path, or
            lies outside ``base_url``'s path.
    """
    return unquote(_path_of(url, base_url))


def raw_key_from_url(url: str, base_url: str | None = None) -> str:
    """Return the storage key exactly as encoded in the URL path.

    Raises:
        InvalidUrlFormatError: if the URL has no scheme, host, or path, or
            lies outside ``base_url``'s path.
    """
    return _path_of(url, base_url)


def _path_of(url: str, base_url: str | None = None) -> str:
    try:
        parts = urlsplit(url)
        prefix = urlsplit(base_url).path.strip("/") if base_url else ""
    except ValueError as exc:
        raise InvalidUrlFormatError(f"Invalid storage URL format: {url!r}") from exc
    path = parts.path.lstrip("/")
    if prefix:
        if not path.startswith(f"{prefix}/"):
            raise InvalidUrlFormatError(f"URL {url!r} is outside storage base {base_url!r}")
        path = path[len(prefix) + 1 :]
    if not parts.scheme or not parts.netloc or not path:
        raise InvalidUrlFormatError(f"Invalid storage URL format: {url!r}")
    return path
