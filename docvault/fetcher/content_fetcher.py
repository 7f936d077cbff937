import hashlib
import time
from email.message import Message
from email.utils import collapse_rfc2231_value
from urllib.parse import unquote, urlsplit

import httpx

from docvault.archive.exceptions import FetchError
from docvault.archive.mime import strip_mime_parameters
from docvault.fetcher.models import FetchedFile
from docvault.logging.logger import Log
from docvault.storage.keys import sanitize_filename


def filename_from_content_disposition(header: str | None) -> str | None:
    """Extract the filename parameter, preferring the RFC 5987 ``filename*`` form."""
    if not header:
        return None
    message = Message()
    message["content-disposition"] = header
    plain: str | None = None
    for key, value in message.get_params(header="content-disposition") or []:
        if key.lower() != "filename":
            continue
        if isinstance(value, tuple):
            return collapse_rfc2231_value(value).strip() or None
        plain = plain or value.strip() or None
    return plain


def filename_from_url(url: str) -> str | None:
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    segment = unquote(path.rsplit("/", 1)[-1])
    return segment or None


def fallback_filename() -> str:
    return f"file-{int(time.time() * 1000)}"


class ContentFetcher:
    """Downloads a source file and derives its filename, MIME type and hash."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def fetch(self, url: str, project_id: str, filename: str | None = None) -> FetchedFile:
        """GET ``url`` and return its body with derived metadata.

        Raises:
            FetchError: on a network failure or a non-2xx response.
        """
        Log.info("Fetching source file", url=url, project_id=project_id)
        try:
            response = self._client.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}", url=url) from exc

        if not response.is_success:
            raise FetchError(
                f"Failed to fetch {url}: HTTP {response.status_code} {response.reason_phrase}",
                url=url,
                status_code=response.status_code,
            )

        content = response.content
        final_name = (
            filename
            or filename_from_content_disposition(response.headers.get("content-disposition"))
            or filename_from_url(url)
            or fallback_filename()
        )
        fetched = FetchedFile(
            content=content,
            mime_type=strip_mime_parameters(response.headers.get("content-type")),
            filename=sanitize_filename(final_name),
            hash=hashlib.sha256(content).hexdigest(),
            source_url=url,
        )
        Log.info(
            f"Fetched {fetched.size} bytes",
            filename=fetched.filename,
            mime_type=fetched.mime_type,
        )
        return fetched
