"""Image description service using a vision model."""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from image_relay.domain.errors import InputFileError

logger = logging.getLogger(__name__)

DESCRIPTION_INSTRUCTION = (
    "You write captions for an image generator. Describe the photo in exactly "
    "one sentence covering composition, main subject, lighting and dominant "
    "colors. Do not name artistic styles, and do not mention anything that "
    "could identify a person such as names, faces, age, ethnicity or gender."
)


class DescriptionClient(Protocol):
    """Interface for LLM image description."""

    async def describe(
        self, *, model: str, image_data_url: str, instruction: str
    ) -> str:
        """Return a one-sentence description of the image."""


@dataclass
class VisionService:
    """Service that reads a source image and asks for a caption."""

    client: DescriptionClient
    model: str

    async def describe_file(self, path: Path) -> str:
        """Describe the image stored at ``path``."""
        image_bytes = read_image_bytes(path)
        description = await self.client.describe(
            model=self.model,
            image_data_url=_to_data_url(image_bytes),
            instruction=DESCRIPTION_INSTRUCTION,
        )
        logger.info("Described %s: %s", path.name, description)
        return description.strip()


def read_image_bytes(path: Path) -> bytes:
    """Read a file and make sure Pillow can decode it."""
    try:
        image_bytes = path.read_bytes()
    except FileNotFoundError as exc:
        raise InputFileError(f"Source image {path.name} not found") from exc
    except OSError as exc:
        raise InputFileError(f"Source image {path.name} is unreadable") from exc
    try:
        with Image.open(path) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise InputFileError(f"Source image {path.name} is not a valid image") from exc
    return image_bytes


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
