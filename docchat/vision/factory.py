from typing import ClassVar

from docchat.config.settings import Settings
from docchat.ocr.tesseract_adapter import TesseractAdapter
from docchat.vision.analyzer import ImageContentAnalyzer
from docchat.vision.client_base import BaseVisionClient
from docchat.vision.example_client_adapter import ExampleClientAdapter
from docchat.vision.openai_client_adapter import OpenAIClientAdapter


class VisionClientFactory:
    """Creates the configured vision client and the image analyzer around it."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
    }

    @classmethod
    def create_analyzer(cls, settings: Settings) -> ImageContentAnalyzer:
        """Build an ImageContentAnalyzer wired to Tesseract and the configured provider."""
        return ImageContentAnalyzer(
            ocr_engine=TesseractAdapter(language=settings.ocr_language),
            vision_client=cls.create(settings),
            model=cls._resolve_model_name(settings.vision_provider.lower(), settings),
            max_tokens=settings.vision_max_tokens,
            min_ocr_length=settings.ocr_min_text_length,
        )

    @classmethod
    def create(cls, settings: Settings) -> BaseVisionClient:
        provider = settings.vision_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.vision_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "vision_openai_compatible_base_url is required for "
                    "vision_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(f"Unknown vision provider '{provider}'. Choose from: {supported}")

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.vision_openai_api_key,
            "openai_compatible": settings.vision_openai_compatible_api_key,
            "openrouter": settings.vision_openrouter_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.vision_openai_model_name,
            "openai_compatible": settings.vision_openai_compatible_model_name,
            "openrouter": settings.vision_openrouter_model_name,
        }
        return key_map.get(provider, "") or provider

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        key_map = {
            "openai": settings.vision_openai_timeout_seconds,
            "openai_compatible": settings.vision_openai_compatible_timeout_seconds,
            "openrouter": settings.vision_openrouter_timeout_seconds,
        }
        return key_map.get(provider, 30) or 30
