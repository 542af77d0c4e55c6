"""Domain models for stored artifacts."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class StoredFile:
    """A file written to the artifact store."""

    path: Path
    original_name: str
    stored_name: str
    url: str


@dataclass(frozen=True)
class GalleryItem:
    """A generated result listed in the gallery."""

    url: str
    filename: str
    timestamp: datetime


@dataclass(frozen=True)
class Download:
    """Bytes ready to be streamed back as an attachment."""

    filename: str
    media_type: str
    path: Path | None = None
    content: bytes | None = None
