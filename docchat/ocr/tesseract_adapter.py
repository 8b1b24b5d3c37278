import io

import pytesseract
from PIL import Image

from docchat.ocr.base import BaseOcrEngine
from docchat.ocr.exceptions import OcrError


class TesseractAdapter(BaseOcrEngine):
    """OCR via the Tesseract binary (pytesseract + Pillow)."""

    def __init__(self, language: str = "eng") -> None:
        self._language = language

    def recognize(self, image_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                if image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")
                text = pytesseract.image_to_string(image, lang=self._language)
        except Exception as exc:
            raise OcrError(f"Tesseract OCR failed: {exc}") from exc
        return (text or "").strip()
