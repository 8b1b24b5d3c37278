from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific image description clients."""

    @abstractmethod
    def describe_image(
        self,
        *,
        model: str,
        prompt: str,
        image_base64: str,
        media_type: str,
        max_tokens: int,
    ) -> str:
        """Return the provider's natural-language description of the image."""
