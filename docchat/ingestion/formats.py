"""Classifies uploaded artifacts into the format that selects their extractor."""

from enum import Enum

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
LEGACY_DOC_MEDIA_TYPE = "application/msword"
PLAIN_TEXT_MEDIA_TYPE = "text/plain"
IMAGE_MEDIA_PREFIX = "image/"


class Format(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    PLAIN_TEXT = "plain_text"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


def base_media_type(media_type: str | None) -> str:
    """Lowercased media type without parameters ("text/plain; charset=x" -> "text/plain")."""
    return (media_type or "").split(";", 1)[0].strip().lower()


def classify(media_type: str | None, filename: str | None) -> Format:
    """Pick the format for an artifact. First matching rule wins; never raises."""
    declared = base_media_type(media_type)
    name = (filename or "").strip().lower()

    if declared == PDF_MEDIA_TYPE or name.endswith(".pdf"):
        return Format.PDF
    if declared in (DOCX_MEDIA_TYPE, LEGACY_DOC_MEDIA_TYPE) or name.endswith((".docx", ".doc")):
        return Format.DOCX
    if declared == PLAIN_TEXT_MEDIA_TYPE or name.endswith(".txt"):
        return Format.PLAIN_TEXT
    if declared.startswith(IMAGE_MEDIA_PREFIX):
        return Format.IMAGE
    return Format.UNSUPPORTED
