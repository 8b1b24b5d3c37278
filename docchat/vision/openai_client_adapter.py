import httpx
import openai

from docchat.vision.client_base import BaseVisionClient
from docchat.vision.exceptions import VisionError, VisionNetworkError


class OpenAIClientAdapter(BaseVisionClient):
    """Vision client adapter built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
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
        try:
            response = self._client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{media_type};base64,{image_base64}"},
                            },
                        ],
                    },
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise VisionNetworkError(f"Vision provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise VisionNetworkError(f"Vision provider API error: {exc}") from exc

        if not response.choices:
            raise VisionError("Vision provider returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise VisionError("Vision provider returned empty response")
        return content.strip()
