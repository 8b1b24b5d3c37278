"""Offline vision client adapter.

Returns a fixed description without any network call. Useful for local
development and tests, and as a template for new provider adapters: implement
BaseVisionClient and register the provider in VisionClientFactory.
"""

from typing import ClassVar

from docchat.vision.client_base import BaseVisionClient


class ExampleClientAdapter(BaseVisionClient):
    DEFAULT_DESCRIPTION: ClassVar[str] = (
        "An uploaded image. No vision provider is configured, so only text "
        "recognized by OCR is available for this image."
    )

    def describe_image(
        self,
        *,
        model: str,
        prompt: str,
        image_base64: str,
        media_type: str,
        max_tokens: int,
    ) -> str:
        _ = model, prompt, image_base64, media_type, max_tokens
        return self.DEFAULT_DESCRIPTION
