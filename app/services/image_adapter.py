import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.config import get_settings
from app.services.errors import (
    ConfigurationError,
    NoImageProduced,
    PaymentRequired,
    RateLimited,
    UpstreamError,
    ValidationError,
)
from app.services.extraction import (
    describe_structure,
    extract_image_reference,
    extract_text_content,
)

settings = get_settings()
logger = logging.getLogger(__name__)


@dataclass
class GenerationRequest:
    """A validated request for the adapter."""
    prompt: str
    edit_image: str | None = None


@dataclass
class GenerationResult:
    """Normalized outcome of a successful provider call."""
    image_reference: str
    text_content: str = ""


def parse_request(body: Any) -> GenerationRequest:
    """
    Validate a raw request body of the form ``{prompt, editImageBase64?}``.

    An empty ``editImageBase64`` is treated as absent.
    """
    if not isinstance(body, dict):
        raise ValidationError("Prompt is required and must be a string")

    prompt = body.get("prompt")
    if not prompt or not isinstance(prompt, str):
        raise ValidationError("Prompt is required and must be a string")

    edit_image = body.get("editImageBase64")
    if edit_image is not None and not isinstance(edit_image, str):
        raise ValidationError("editImageBase64 must be a string")

    return GenerationRequest(prompt=prompt, edit_image=edit_image or None)


def build_messages(prompt: str, edit_image: str | None = None) -> list[dict]:
    """
    Build the chat messages for the gateway.

    Without an edit target the content is the plain prompt. With one it is a
    content list holding the text entry followed by the image entry.
    """
    if edit_image:
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": edit_image}},
                ],
            }
        ]
    return [{"role": "user", "content": prompt}]


class ImageGatewayAdapter:
    """
    Adapter for image synthesis and editing through an OpenAI-compatible
    chat completions gateway.

    Every call makes exactly one HTTP request; nothing is kept between calls.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.transport = transport

    def build_payload(self, request: GenerationRequest) -> dict:
        return {
            "model": settings.image_model,
            "messages": build_messages(request.prompt, request.edit_image),
            "modalities": ["image", "text"],
        }

    def _require_api_key(self) -> str:
        api_key = settings.ai_gateway_api_key
        if not api_key:
            raise ConfigurationError("AI_GATEWAY_API_KEY is not configured")
        return api_key

    async def generate_from_body(self, body: Any) -> GenerationResult:
        """Entry point for raw JSON bodies; the credential is checked first."""
        self._require_api_key()
        return await self.generate(parse_request(body))

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate (or edit) an image.

        Args:
            request: Validated prompt and optional edit image data URI/URL

        Returns:
            GenerationResult with the image reference and any text content

        Raises:
            ConfigurationError, RateLimited, PaymentRequired, UpstreamError,
            NoImageProduced
        """
        api_key = self._require_api_key()

        logger.info(
            "Generating image (prompt_length=%d, edit_mode=%s)",
            len(request.prompt),
            request.edit_image is not None,
        )

        payload = self.build_payload(request)

        try:
            async with httpx.AsyncClient(
                timeout=settings.ai_gateway_timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    settings.ai_gateway_url,
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            logger.error("AI gateway request failed: %s", e)
            raise UpstreamError(f"AI gateway request failed: {e}") from e

        if response.status_code == 429:
            logger.warning("AI gateway rate limit hit")
            raise RateLimited()

        if response.status_code == 402:
            logger.warning("AI gateway reports payment required")
            raise PaymentRequired()

        if not response.is_success:
            logger.error("AI gateway error: %s %s", response.status_code, response.text)
            raise UpstreamError(
                f"AI gateway error: {response.status_code}",
                upstream_status=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error("AI gateway returned a non-JSON body: %s", response.text[:500])
            raise UpstreamError(
                "AI gateway returned an invalid response",
                upstream_status=response.status_code,
                body=response.text,
            ) from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Full AI response: %s", json.dumps(data, indent=2))

        image_reference = extract_image_reference(data)
        if not image_reference:
            logger.error("No image found in response. Structure: %s", describe_structure(data))
            raise NoImageProduced()

        return GenerationResult(
            image_reference=image_reference,
            text_content=extract_text_content(data),
        )


# Singleton instance
image_adapter = ImageGatewayAdapter()
