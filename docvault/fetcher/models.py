from dataclasses import dataclass


@dataclass(frozen=True)
class FetchedFile:
    """Bytes downloaded from a source URL plus what the response told us."""

    content: bytes
    mime_type: str
    filename: str
    hash: str
    source_url: str

    @property
    def size(self) -> int:
        return len(self.content)
