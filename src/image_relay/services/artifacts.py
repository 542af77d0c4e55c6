"""Filesystem-backed artifact store for uploads and generated results."""

import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from image_relay.domain.artifacts import StoredFile
from image_relay.domain.errors import NotFoundError

logger = logging.getLogger(__name__)

UPLOADS_SUBDIR = "uploads"
RESULT_PREFIX = "ai_"


@dataclass
class ArtifactStore:
    """Stores uploaded sources under ``uploads/`` and results at the root."""

    root: Path
    url_prefix: str

    @property
    def uploads_dir(self) -> Path:
        return self.root / UPLOADS_SUBDIR

    def ensure_directories(self) -> None:
        """Create the artifact root and the uploads subdirectory."""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def save_upload(self, content: bytes, original_name: str) -> StoredFile:
        """Write an uploaded file under a fresh unique name."""
        stored_name = f"{uuid4()}{_extension(original_name)}"
        path = self.uploads_dir / stored_name
        path.write_bytes(content)
        logger.info("Stored upload %s (%d bytes)", stored_name, len(content))
        return StoredFile(
            path=path,
            original_name=original_name,
            stored_name=stored_name,
            url=f"{self.url_prefix}/{UPLOADS_SUBDIR}/{stored_name}",
        )

    def find_upload(self, stored_name: str) -> Path:
        """Return the path of an upload by stored name."""
        if not is_safe_name(stored_name):
            raise NotFoundError(f"Upload {stored_name!r} not found")
        return self.uploads_dir / stored_name

    def save_result(self, content: bytes, extension: str = ".png") -> StoredFile:
        """Write generated image bytes directly under the artifact root."""
        stored_name = f"{RESULT_PREFIX}{uuid4()}{extension}"
        path = self.root / stored_name
        path.write_bytes(content)
        logger.info("Stored result %s (%d bytes)", stored_name, len(content))
        return StoredFile(
            path=path,
            original_name=stored_name,
            stored_name=stored_name,
            url=self.result_url(stored_name),
        )

    def find_result(self, filename: str) -> Path:
        """Return the path of a generated result, if it exists."""
        if not is_safe_name(filename) or not filename.startswith(RESULT_PREFIX):
            raise NotFoundError(f"File {filename!r} not found")
        path = self.root / filename
        if not path.is_file():
            raise NotFoundError(f"File {filename!r} not found")
        return path

    def list_results(self) -> list[Path]:
        """Return generated result files in no particular order."""
        if not self.root.is_dir():
            return []
        return [
            path
            for path in self.root.iterdir()
            if path.is_file() and path.name.startswith(RESULT_PREFIX)
        ]

    def result_url(self, stored_name: str) -> str:
        return f"{self.url_prefix}/{stored_name}"


def is_safe_name(name: str) -> bool:
    """Reject empty names and anything that could escape a directory."""
    if not name or name in {".", ".."}:
        return False
    return Path(name).name == name and "\\" not in name


def _extension(original_name: str) -> str:
    return Path(original_name).suffix.lower()
