from abc import ABC, abstractmethod


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> str:
        """Run OCR over the full image and return the recognized text.

        Raises:
            OcrError: if the image cannot be opened or recognition fails.
        """
