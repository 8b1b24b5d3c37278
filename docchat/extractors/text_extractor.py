import codecs

from docchat.extractors.exceptions import TextExtractionError
from docchat.logging.logger import Log

_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def declared_charset(media_type: str | None) -> str | None:
    """Return the charset parameter of a media type, if any."""
    for param in (media_type or "").split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return None


def detect_encoding(raw: bytes) -> str | None:
    # UTF-32 LE BOM starts with the UTF-16 LE BOM, so order matters
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return encoding
    return None


class PlainTextExtractor:
    """Decodes a text buffer: declared charset, then BOM, then UTF-8, then latin-1.

    An unknown declared charset is ignored; only an unreadable buffer fails.
    """

    def __init__(self, media_type: str | None = None) -> None:
        self._media_type = media_type

    def extract(self, text_bytes: bytes) -> str:
        try:
            raw = bytes(text_bytes)
        except (TypeError, ValueError) as exc:
            raise TextExtractionError(f"Failed to read text file: {exc}") from exc

        charset = declared_charset(self._media_type)
        if charset is not None:
            try:
                return raw.decode(charset, errors="replace")
            except LookupError:
                Log.warning(f"Unknown declared text encoding '{charset}', detecting instead")

        encoding = detect_encoding(raw)
        if encoding is not None:
            return raw.decode(encoding, errors="replace")
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw.decode("latin-1")
