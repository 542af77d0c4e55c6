"""Generation pipeline: describe, compose, generate, fetch, persist."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from image_relay.domain.errors import ExternalServiceError, InvalidRequestError
from image_relay.domain.generation import (
    GenerationRequest,
    GenerationResult,
    ImageSource,
    QrRelaySource,
    TextSource,
)
from image_relay.services.artifacts import ArtifactStore
from image_relay.services.vision import VisionService

logger = logging.getLogger(__name__)

MODES = ("text", "image", "qr")


class ImageGenerationClient(Protocol):
    """Interface for the remote image generator."""

    async def generate(self, *, model: str, prompt: str, size: str) -> str:
        """Generate one image and return the URL it can be fetched from."""


class ImageDownloadClient(Protocol):
    """Interface for fetching generated image bytes."""

    async def fetch(self, url: str) -> bytes:
        """Download the bytes behind ``url``."""


def parse_generation_request(
    *,
    mode: str | None,
    prompt: str | None,
    style: str | None,
    has_image: bool,
    qr_filename: str | None,
) -> tuple[str, str, str]:
    """Validate the mode-dependent fields of an incoming request.

    Returns the normalized ``(mode, prompt, style)``. Raises
    :class:`InvalidRequestError` before anything is written or sent.
    """
    resolved_mode = (mode or "").strip().lower()
    resolved_prompt = (prompt or "").strip()
    resolved_style = (style or "").strip()
    if resolved_mode not in MODES:
        raise InvalidRequestError(f"Unknown mode {mode!r}")
    if resolved_mode == "text" and not resolved_prompt:
        raise InvalidRequestError("A prompt is required in text mode")
    if resolved_mode == "image" and not has_image:
        raise InvalidRequestError("An image is required in image mode")
    if resolved_mode == "qr" and not (qr_filename or "").strip():
        raise InvalidRequestError("qrUploadedFileName is required in qr mode")
    return resolved_mode, resolved_prompt, resolved_style


def compose_prompt(description: str | None, prompt: str, style: str) -> str:
    """Join the image description, the user prompt and the style label."""
    segments = [
        segment.strip().rstrip(".")
        for segment in (description or "", prompt)
        if segment and segment.strip()
    ]
    if style.strip():
        segments.append(f"Style: {style.strip()}")
    return ". ".join(segments)


@dataclass
class GenerationPipeline:
    """Runs one request through every stage, stopping at the first failure."""

    store: ArtifactStore
    vision_service: VisionService
    image_client: ImageGenerationClient
    download_client: ImageDownloadClient
    image_model: str
    image_size: str

    async def run(self, request: GenerationRequest) -> GenerationResult:
        """Produce one image for ``request`` and return where it is stored."""
        source_path = self._resolve_source(request)
        description = None
        if source_path is not None:
            description = await self.vision_service.describe_file(source_path)
        final_prompt = compose_prompt(description, request.prompt, request.style)
        logger.info("Generating image with prompt: %s", final_prompt)

        image_url = await self.image_client.generate(
            model=self.image_model, prompt=final_prompt, size=self.image_size
        )
        if not image_url:
            raise ExternalServiceError("Image provider returned no URL")
        content = await self.download_client.fetch(image_url)
        stored = self.store.save_result(content)
        return GenerationResult(
            stored_name=stored.stored_name, url=stored.url, prompt=final_prompt
        )

    def _resolve_source(self, request: GenerationRequest) -> Path | None:
        match request.source:
            case TextSource():
                return None
            case ImageSource(path=path):
                return path
            case QrRelaySource(filename=filename):
                return self.store.find_upload(filename)
        raise InvalidRequestError(f"Unsupported source {request.source!r}")
