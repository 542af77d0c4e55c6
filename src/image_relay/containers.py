"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI

from image_relay.adapters.image_download_client import HttpxImageDownloadClient
from image_relay.adapters.openai_image_client import OpenAIImageClient
from image_relay.adapters.openai_vision_client import OpenAIVisionClient
from image_relay.config import Settings, normalize_url_prefix
from image_relay.services.artifacts import ArtifactStore
from image_relay.services.delivery import DeliveryService
from image_relay.services.generation import GenerationPipeline
from image_relay.services.pairing import PairingRegistry
from image_relay.services.vision import VisionService

UNSET_API_KEY = "unset"


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    artifact_store: ArtifactStore
    pairing_registry: PairingRegistry
    generation_pipeline: GenerationPipeline
    delivery_service: DeliveryService
    close_resources: Callable[[], Awaitable[None]]


def resolve_api_key(raw: str) -> str:
    """Return a key the OpenAI client accepts at construction time.

    The client refuses an empty key, so an unset key is replaced by a
    placeholder the provider rejects on the first call.
    """
    return raw.strip() or UNSET_API_KEY


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    artifact_store = ArtifactStore(
        root=resolved_settings.artifact_dir,
        url_prefix=normalize_url_prefix(resolved_settings.artifact_url_prefix),
    )
    artifact_store.ensure_directories()
    openai_client = AsyncOpenAI(
        api_key=resolve_api_key(resolved_settings.openai_api_key)
    )
    vision_service = VisionService(
        client=OpenAIVisionClient(client=openai_client),
        model=resolved_settings.description_model,
    )
    download_client = HttpxImageDownloadClient.create(
        timeout=resolved_settings.download_timeout_seconds
    )
    generation_pipeline = GenerationPipeline(
        store=artifact_store,
        vision_service=vision_service,
        image_client=OpenAIImageClient(client=openai_client),
        download_client=download_client,
        image_model=resolved_settings.image_model,
        image_size=resolved_settings.image_size,
    )

    async def close_resources() -> None:
        await download_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        artifact_store=artifact_store,
        pairing_registry=PairingRegistry(
            ttl_seconds=resolved_settings.pairing_session_ttl_seconds
        ),
        generation_pipeline=generation_pipeline,
        delivery_service=DeliveryService(artifact_store),
        close_resources=close_resources,
    )
