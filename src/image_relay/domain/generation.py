"""Domain models for generation requests."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TextSource:
    """Prompt-only generation; no image is read."""


@dataclass(frozen=True)
class ImageSource:
    """Generation from a file uploaded with the request."""

    path: Path


@dataclass(frozen=True)
class QrRelaySource:
    """Generation from a file previously uploaded through a pairing session."""

    filename: str


Source = TextSource | ImageSource | QrRelaySource


@dataclass(frozen=True)
class GenerationRequest:
    """A validated request to produce one image."""

    prompt: str
    style: str
    source: Source


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful pipeline run."""

    stored_name: str
    url: str
    prompt: str
