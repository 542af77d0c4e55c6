"""Gallery listing and downloads of generated results."""

import io
import logging
import mimetypes
from dataclasses import dataclass
from datetime import UTC, datetime

from PIL import Image, UnidentifiedImageError

from image_relay.domain.artifacts import Download, GalleryItem
from image_relay.domain.errors import InputFileError
from image_relay.services.artifacts import ArtifactStore

logger = logging.getLogger(__name__)

SIZE_WIDTHS: dict[str, int | None] = {
    "small": 512,
    "medium": 1024,
    "large": None,
}


@dataclass
class DeliveryService:
    """Serves stored results back to clients."""

    store: ArtifactStore

    def list_results(self) -> list[GalleryItem]:
        """Return generated results, newest first."""
        items = [
            GalleryItem(
                url=self.store.result_url(path.name),
                filename=path.name,
                timestamp=datetime.fromtimestamp(path.stat().st_mtime, tz=UTC),
            )
            for path in self.store.list_results()
        ]
        return sorted(items, key=lambda item: item.timestamp, reverse=True)

    def download(self, filename: str, size: str | None = None) -> Download:
        """Return the stored file, scaled down when a smaller size is asked for."""
        path = self.store.find_result(filename)
        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        max_width = SIZE_WIDTHS.get((size or "").lower())
        if max_width is None:
            return Download(filename=filename, media_type=media_type, path=path)

        try:
            with Image.open(path) as image:
                if image.width <= max_width:
                    return Download(
                        filename=filename, media_type=media_type, path=path
                    )
                height = max(1, round(image.height * max_width / image.width))
                image_format = image.format or "PNG"
                resized = image.resize((max_width, height), Image.Resampling.LANCZOS)
        except (UnidentifiedImageError, OSError) as exc:
            raise InputFileError(
                f"Stored image {filename} cannot be decoded",
                message="The stored image could not be read.",
            ) from exc
        if image_format == "JPEG" and resized.mode not in {"RGB", "L"}:
            resized = resized.convert("RGB")
        buffer = io.BytesIO()
        resized.save(buffer, format=image_format)
        logger.info("Resized %s to %dx%d for download", filename, max_width, height)
        return Download(
            filename=filename,
            media_type=Image.MIME.get(image_format, media_type),
            content=buffer.getvalue(),
        )
