class IngestionError(Exception):
    """Base exception for ingestion lifecycle errors."""


class UploadValidationError(IngestionError):
    """Raised when an upload is rejected before any chat record is created."""


class FileTooLargeError(UploadValidationError):
    """Raised when the artifact exceeds the configured upload size."""


class UnsupportedFileTypeError(UploadValidationError):
    """Raised when the artifact's declared type is not on the upload allow-list."""


class ChatNotFoundError(IngestionError):
    """Raised when a chat id is not present in the conversation store."""
