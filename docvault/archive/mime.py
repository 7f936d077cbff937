from pathlib import PurePosixPath

OCTET_STREAM = "application/octet-stream"

ZIP_MIME_TYPES = frozenset(
    {
        "application/zip",
        "application/x-zip-compressed",
        "application/x-zip",
        "multipart/x-zip",
    }
)

IMAGE_EXTENSIONS = frozenset(
    {
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".bmp",
        ".webp",
        ".heic",
        ".tiff",
        ".tif",
        ".svg",
        ".ico",
    }
)

EXTENSION_MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".txt": "text/plain",
    ".csv": "text/csv",
}


def extension_of(filename: str) -> str:
    return PurePosixPath(filename.replace("\\", "/")).suffix.lower()


def is_image(filename: str) -> bool:
    return extension_of(filename) in IMAGE_EXTENSIONS


def mime_type_for(filename: str) -> str:
    """Infer a MIME type from the file extension, defaulting to octet-stream."""
    return EXTENSION_MIME_TYPES.get(extension_of(filename), OCTET_STREAM)


def strip_mime_parameters(content_type: str | None) -> str:
    """'text/plain; charset=utf-8' -> 'text/plain'"""
    if not content_type:
        return OCTET_STREAM
    base = content_type.split(";", 1)[0].strip().lower()
    return base or OCTET_STREAM
