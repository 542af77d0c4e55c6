"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from PIL import Image

from image_relay.config import Settings
from image_relay.containers import AppContainer
from image_relay.domain.errors import RelayError
from image_relay.services.artifacts import ArtifactStore
from image_relay.services.delivery import DeliveryService
from image_relay.services.generation import (
    GenerationPipeline,
    ImageDownloadClient,
    ImageGenerationClient,
)
from image_relay.services.pairing import PairingRegistry
from image_relay.services.vision import DescriptionClient, VisionService


def make_image_bytes(width: int, height: int, image_format: str = "PNG") -> bytes:
    """Encode a solid-colour image of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 80, 40)).save(
        buffer, format=image_format
    )
    return buffer.getvalue()


@dataclass
class FakeDescriptionClient(DescriptionClient):
    """Fake description client that records requests."""

    description: str = "A fox sits in tall grass under soft morning light."
    calls: list[dict[str, str]] = field(default_factory=list)
    error: RelayError | None = None

    async def describe(
        self, *, model: str, image_data_url: str, instruction: str
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "image_data_url": image_data_url,
                "instruction": instruction,
            }
        )
        if self.error is not None:
            raise self.error
        return self.description


@dataclass
class FakeImageClient(ImageGenerationClient):
    """Fake image generator returning a fixed URL."""

    url: str = "https://images.test/generated.png"
    prompts: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def generate(self, *, model: str, prompt: str, size: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.url


@dataclass
class FakeDownloadClient(ImageDownloadClient):
    """Fake downloader that returns static image bytes."""

    content: bytes = field(default_factory=lambda: make_image_bytes(64, 64))
    urls: list[str] = field(default_factory=list)
    error: RelayError | None = None

    async def fetch(self, url: str) -> bytes:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        static_dir=tmp_path / "public",
        artifact_dir=tmp_path / "public" / "images",
        public_origin="https://relay.test",
    )


@pytest.fixture
def store(settings: Settings) -> ArtifactStore:
    artifact_store = ArtifactStore(root=settings.artifact_dir, url_prefix="/images")
    artifact_store.ensure_directories()
    return artifact_store


@pytest.fixture
def description_client() -> FakeDescriptionClient:
    return FakeDescriptionClient()


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def download_client() -> FakeDownloadClient:
    return FakeDownloadClient()


@pytest.fixture
def pipeline(
    store: ArtifactStore,
    description_client: FakeDescriptionClient,
    image_client: FakeImageClient,
    download_client: FakeDownloadClient,
) -> GenerationPipeline:
    return GenerationPipeline(
        store=store,
        vision_service=VisionService(client=description_client, model="gpt-4o-mini"),
        image_client=image_client,
        download_client=download_client,
        image_model="dall-e-3",
        image_size="1024x1024",
    )


@pytest.fixture
def container(
    settings: Settings,
    store: ArtifactStore,
    pipeline: GenerationPipeline,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        artifact_store=store,
        pairing_registry=PairingRegistry(),
        generation_pipeline=pipeline,
        delivery_service=DeliveryService(store),
        close_resources=close_resources,
    )
