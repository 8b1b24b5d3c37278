"""Turns an image into text: OCR output plus a remote visual description.

Both passes degrade on their own. A failing OCR pass contributes nothing and a
failing vision pass is replaced by FALLBACK_DESCRIPTION, so analyze() always
returns non-empty text.
"""

import base64
from pathlib import Path

from docchat.logging.logger import Log, preview
from docchat.ocr.base import BaseOcrEngine
from docchat.vision.client_base import BaseVisionClient
from docchat.vision.prompt_loader import load_vision_prompt

TEXT_SECTION_HEADER = "TEXT CONTENT FOUND IN IMAGE:"
VISUAL_SECTION_HEADER = "VISUAL CONTENT DESCRIPTION:"

FALLBACK_DESCRIPTION = (
    "Image uploaded successfully, but a detailed visual description is not "
    "available right now. You can still ask questions about the image; answers "
    "will rely on any text recognized in it."
)


class ImageContentAnalyzer:
    """Composes OCR and vision description into one grounding text for an image."""

    def __init__(
        self,
        *,
        ocr_engine: BaseOcrEngine,
        vision_client: BaseVisionClient,
        model: str,
        max_tokens: int = 1000,
        min_ocr_length: int = 10,
        prompt_path: Path | None = None,
    ) -> None:
        self._ocr_engine = ocr_engine
        self._vision_client = vision_client
        self._model = model
        self._max_tokens = max_tokens
        self._min_ocr_length = min_ocr_length
        self._prompt = load_vision_prompt(prompt_path)

    def analyze(self, image_bytes: bytes, media_type: str) -> str:
        ocr_text = self._run_ocr(image_bytes)
        description = self._describe(image_bytes, media_type)
        return self.merge(ocr_text, description)

    def merge(self, ocr_text: str, description: str) -> str:
        visual = f"{VISUAL_SECTION_HEADER}\n{description}"
        if self._is_meaningful(ocr_text):
            return f"{TEXT_SECTION_HEADER}\n{ocr_text}\n\n{visual}"
        return visual

    def _is_meaningful(self, ocr_text: str) -> bool:
        return len(ocr_text.strip()) > self._min_ocr_length

    def _run_ocr(self, image_bytes: bytes) -> str:
        try:
            text = self._ocr_engine.recognize(image_bytes).strip()
        except Exception as exc:
            Log.warning(f"OCR pass failed, continuing without image text: {exc}")
            return ""
        if not self._is_meaningful(text):
            Log.debug(f"OCR output below noise threshold ({len(text)} chars), ignoring")
            return ""
        Log.info(f"OCR recognized {len(text)} chars: {preview(text)}")
        return text

    def _describe(self, image_bytes: bytes, media_type: str) -> str:
        try:
            description = self._vision_client.describe_image(
                model=self._model,
                prompt=self._prompt,
                image_base64=base64.b64encode(image_bytes).decode("ascii"),
                media_type=media_type or "image/png",
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            Log.warning(f"Vision description failed, using fallback: {exc}")
            return FALLBACK_DESCRIPTION
        if not description.strip():
            return FALLBACK_DESCRIPTION
        return description.strip()
