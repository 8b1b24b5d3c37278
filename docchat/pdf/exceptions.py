from docchat.extractors.exceptions import ExtractionError


class PdfExtractionError(ExtractionError):
    """Raised when a PDF is invalid or has no extractable text layer."""
