"""Upload gate: size and accepted-type checks run before any chat is created."""

from docchat.ingestion.exceptions import FileTooLargeError, UnsupportedFileTypeError
from docchat.ingestion.formats import (
    DOCX_MEDIA_TYPE,
    LEGACY_DOC_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    PLAIN_TEXT_MEDIA_TYPE,
    base_media_type,
)
from docchat.ingestion.models import UploadedArtifact

ALLOWED_MEDIA_TYPES = frozenset({
    PDF_MEDIA_TYPE,
    DOCX_MEDIA_TYPE,
    LEGACY_DOC_MEDIA_TYPE,
    PLAIN_TEXT_MEDIA_TYPE,
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/bmp",
    "image/webp",
})

ALLOWED_EXTENSIONS = (
    ".pdf", ".doc", ".docx", ".txt", ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp",
)

# Declared types that say nothing about the content; the extension decides instead.
_GENERIC_MEDIA_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})

ALLOWED_TYPES_DESCRIPTION = "PDF, DOCX, TXT, and images (JPEG, PNG, GIF, BMP, WebP)"


def validate_artifact(artifact: UploadedArtifact, max_size_bytes: int) -> None:
    """Reject oversized or disallowed uploads.

    Raises:
        FileTooLargeError: if the artifact is larger than *max_size_bytes*.
        UnsupportedFileTypeError: if neither its type nor its extension is accepted.
    """
    if artifact.size_bytes > max_size_bytes:
        size_mb = artifact.size_bytes / 1024 / 1024
        limit_mb = max_size_bytes / 1024 / 1024
        raise FileTooLargeError(
            f"File size ({size_mb:.2f}MB) exceeds the {limit_mb:g}MB limit."
        )

    declared = base_media_type(artifact.media_type)
    if declared in ALLOWED_MEDIA_TYPES:
        return
    if declared in _GENERIC_MEDIA_TYPES and artifact.name.lower().endswith(ALLOWED_EXTENSIONS):
        return
    raise UnsupportedFileTypeError(
        f"Unsupported file type: {artifact.media_type or 'unknown'}. "
        f"Supported formats: {ALLOWED_TYPES_DESCRIPTION}."
    )
