"""OpenAI Images API client for generation."""

import logging
from dataclasses import dataclass

from openai import AsyncOpenAI, BadRequestError, OpenAIError

from image_relay.domain.errors import ContentPolicyError, ExternalServiceError
from image_relay.services.generation import ImageGenerationClient

logger = logging.getLogger(__name__)

CONTENT_POLICY_CODES = {"content_policy_violation", "moderation_blocked"}


@dataclass
class OpenAIImageClient(ImageGenerationClient):
    """Image generation client backed by OpenAI Images API."""

    client: AsyncOpenAI

    async def generate(self, *, model: str, prompt: str, size: str) -> str:
        """Request a single image and return its URL."""
        try:
            response = await self.client.images.generate(
                model=model,
                prompt=prompt,
                n=1,
                size=size,
                response_format="url",
            )
        except BadRequestError as exc:
            if exc.code in CONTENT_POLICY_CODES:
                logger.warning("Prompt rejected by content policy: %s", prompt)
                raise ContentPolicyError(str(exc)) from exc
            logger.warning("Image generation rejected: %s", exc)
            raise ExternalServiceError(f"Image generation failed: {exc}") from exc
        except OpenAIError as exc:
            logger.warning("Image generation failed: %s", exc)
            raise ExternalServiceError(f"Image generation failed: {exc}") from exc
        if not response.data or not response.data[0].url:
            raise ExternalServiceError("OpenAI returned no image URL")
        return response.data[0].url
