"""OpenAI Responses API client for image descriptions."""

import logging
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from image_relay.domain.errors import ExternalServiceError
from image_relay.services.vision import DescriptionClient

logger = logging.getLogger(__name__)


@dataclass
class OpenAIVisionClient(DescriptionClient):
    """Description client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    async def describe(
        self, *, model: str, image_data_url: str, instruction: str
    ) -> str:
        """Call OpenAI Responses API with the image and a fixed instruction."""
        try:
            response = await self.client.responses.create(
                model=model,
                instructions=instruction,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": "Describe this image."},
                            {"type": "input_image", "image_url": image_data_url},
                        ],
                    }
                ],
            )
        except OpenAIError as exc:
            logger.warning("Image description failed: %s", exc)
            raise ExternalServiceError(f"Image description failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise ExternalServiceError("OpenAI returned an empty description")
        return output_text
