import pytest

from docchat.ingestion.exceptions import FileTooLargeError, UnsupportedFileTypeError
from docchat.ingestion.models import UploadedArtifact
from docchat.ingestion.validation import validate_artifact

MB = 1024 * 1024
LIMIT = 15 * MB


def _artifact(name: str = "doc.pdf", media_type: str = "application/pdf", size: int = 10) -> UploadedArtifact:
    return UploadedArtifact(name=name, size_bytes=size, media_type=media_type, content=b"x")


class TestSizeGate:
    def test_accepts_file_at_limit(self) -> None:
        validate_artifact(_artifact(size=LIMIT), LIMIT)

    def test_rejects_file_over_limit(self) -> None:
        with pytest.raises(FileTooLargeError, match=r"20\.00MB\) exceeds the 15MB limit"):
            validate_artifact(_artifact(size=20 * MB), LIMIT)

    def test_size_checked_before_type(self) -> None:
        with pytest.raises(FileTooLargeError):
            validate_artifact(_artifact(media_type="application/zip", size=LIMIT + 1), LIMIT)


class TestTypeGate:
    @pytest.mark.parametrize(
        "media_type",
        [
            "application/pdf",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/msword",
            "text/plain",
            "text/plain; charset=utf-8",
            "image/jpeg",
            "image/jpg",
            "image/png",
            "image/gif",
            "image/bmp",
            "image/webp",
        ],
    )
    def test_accepts_allowed_types(self, media_type: str) -> None:
        validate_artifact(_artifact(media_type=media_type), LIMIT)

    @pytest.mark.parametrize("media_type", ["application/zip", "image/tiff", "text/html"])
    def test_rejects_other_types(self, media_type: str) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="Supported formats: PDF, DOCX, TXT"):
            validate_artifact(_artifact(media_type=media_type), LIMIT)

    def test_generic_type_with_known_extension_is_accepted(self) -> None:
        validate_artifact(_artifact(name="scan.PNG", media_type="application/octet-stream"), LIMIT)

    def test_empty_type_with_unknown_extension_is_rejected(self) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="unknown"):
            validate_artifact(_artifact(name="data.bin", media_type=""), LIMIT)
