class ExtractionError(Exception):
    """Raised when an extractor cannot turn artifact bytes into text."""


class DocxExtractionError(ExtractionError):
    """Raised when a DOCX package is corrupt or not a wordprocessing document."""


class TextExtractionError(ExtractionError):
    """Raised when a plain-text buffer cannot be read or decoded."""
