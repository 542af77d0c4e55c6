"""Tests for the generation pipeline."""

import asyncio

import pytest

from image_relay.domain.errors import (
    ContentPolicyError,
    DownloadError,
    ExternalServiceError,
    InputFileError,
    InvalidRequestError,
    NotFoundError,
)
from image_relay.domain.generation import (
    GenerationRequest,
    ImageSource,
    QrRelaySource,
    TextSource,
)
from image_relay.services.artifacts import RESULT_PREFIX, ArtifactStore
from image_relay.services.generation import (
    GenerationPipeline,
    compose_prompt,
    parse_generation_request,
)
from tests.conftest import (
    FakeDescriptionClient,
    FakeDownloadClient,
    FakeImageClient,
    make_image_bytes,
)


def test_compose_prompt_text_only() -> None:
    assert compose_prompt(None, "a red fox", "watercolor") == (
        "a red fox. Style: watercolor"
    )


def test_compose_prompt_with_description() -> None:
    prompt = compose_prompt("A dog on a beach at sunset.", "make it a knight", "oil")

    assert prompt == "A dog on a beach at sunset. make it a knight. Style: oil"


def test_compose_prompt_skips_empty_parts() -> None:
    assert compose_prompt("A quiet street.", "", "") == "A quiet street"


def test_text_mode_never_describes(
    pipeline: GenerationPipeline,
    description_client: FakeDescriptionClient,
    image_client: FakeImageClient,
    store: ArtifactStore,
) -> None:
    request = GenerationRequest(
        prompt="a red fox", style="watercolor", source=TextSource()
    )

    result = asyncio.run(pipeline.run(request))

    assert description_client.calls == []
    assert image_client.prompts == ["a red fox. Style: watercolor"]
    assert result.stored_name.startswith(RESULT_PREFIX)
    assert result.url == f"/images/{result.stored_name}"
    assert (store.root / result.stored_name).is_file()


def test_image_mode_describes_then_generates(
    pipeline: GenerationPipeline,
    description_client: FakeDescriptionClient,
    image_client: FakeImageClient,
    download_client: FakeDownloadClient,
    store: ArtifactStore,
) -> None:
    source = store.save_upload(make_image_bytes(32, 32), "cat.png")
    request = GenerationRequest(
        prompt="as a statue",
        style="marble",
        source=ImageSource(path=source.path),
    )

    result = asyncio.run(pipeline.run(request))

    assert len(description_client.calls) == 1
    assert description_client.calls[0]["image_data_url"].startswith(
        "data:image/png;base64,"
    )
    assert image_client.prompts == [
        "A fox sits in tall grass under soft morning light. as a statue. Style: marble"
    ]
    assert download_client.urls == [image_client.url]
    assert (store.root / result.stored_name).read_bytes() == download_client.content


def test_qr_mode_reads_paired_upload(
    pipeline: GenerationPipeline,
    description_client: FakeDescriptionClient,
    store: ArtifactStore,
) -> None:
    paired = store.save_upload(make_image_bytes(16, 16, "JPEG"), "phone.jpg")
    request = GenerationRequest(
        prompt="", style="anime", source=QrRelaySource(filename=paired.stored_name)
    )

    asyncio.run(pipeline.run(request))

    assert description_client.calls[0]["image_data_url"].startswith(
        "data:image/jpeg;base64,"
    )


def test_qr_mode_missing_file_fails_before_generation(
    pipeline: GenerationPipeline, image_client: FakeImageClient
) -> None:
    request = GenerationRequest(
        prompt="x", style="y", source=QrRelaySource(filename="missing.jpg")
    )

    with pytest.raises(InputFileError):
        asyncio.run(pipeline.run(request))
    assert image_client.prompts == []


def test_qr_mode_rejects_path_traversal(pipeline: GenerationPipeline) -> None:
    request = GenerationRequest(
        prompt="x", style="y", source=QrRelaySource(filename="../ai_other.png")
    )

    with pytest.raises(NotFoundError):
        asyncio.run(pipeline.run(request))


def test_undecodable_image_fails(
    pipeline: GenerationPipeline,
    description_client: FakeDescriptionClient,
    store: ArtifactStore,
) -> None:
    broken = store.save_upload(b"definitely not an image", "broken.png")
    request = GenerationRequest(
        prompt="x", style="y", source=ImageSource(path=broken.path)
    )

    with pytest.raises(InputFileError):
        asyncio.run(pipeline.run(request))
    assert description_client.calls == []


def test_description_failure_aborts(
    pipeline: GenerationPipeline,
    description_client: FakeDescriptionClient,
    image_client: FakeImageClient,
    store: ArtifactStore,
) -> None:
    description_client.error = ExternalServiceError("vision down")
    source = store.save_upload(make_image_bytes(8, 8), "a.png")
    request = GenerationRequest(
        prompt="x", style="y", source=ImageSource(path=source.path)
    )

    with pytest.raises(ExternalServiceError):
        asyncio.run(pipeline.run(request))
    assert image_client.prompts == []


def test_content_policy_rejection_leaves_no_result(
    pipeline: GenerationPipeline,
    image_client: FakeImageClient,
    store: ArtifactStore,
) -> None:
    image_client.error = ContentPolicyError("blocked")
    request = GenerationRequest(prompt="bad", style="", source=TextSource())

    with pytest.raises(ContentPolicyError):
        asyncio.run(pipeline.run(request))
    assert store.list_results() == []


def test_download_failure_leaves_no_result(
    pipeline: GenerationPipeline,
    download_client: FakeDownloadClient,
    store: ArtifactStore,
) -> None:
    download_client.error = DownloadError("404")
    request = GenerationRequest(prompt="fox", style="", source=TextSource())

    with pytest.raises(DownloadError):
        asyncio.run(pipeline.run(request))
    assert store.list_results() == []


def test_empty_generation_url_is_an_error(
    pipeline: GenerationPipeline,
    image_client: FakeImageClient,
    download_client: FakeDownloadClient,
) -> None:
    image_client.url = ""
    request = GenerationRequest(prompt="fox", style="", source=TextSource())

    with pytest.raises(ExternalServiceError):
        asyncio.run(pipeline.run(request))
    assert download_client.urls == []


def test_parse_generation_request_normalizes() -> None:
    assert parse_generation_request(
        mode=" TEXT ",
        prompt=" a red fox ",
        style=" watercolor ",
        has_image=False,
        qr_filename=None,
    ) == ("text", "a red fox", "watercolor")


@pytest.mark.parametrize(
    ("mode", "prompt", "has_image", "qr_filename"),
    [
        (None, "fox", False, None),
        ("video", "fox", True, None),
        ("text", "   ", False, None),
        ("image", "fox", False, None),
        ("qr", "fox", False, ""),
    ],
)
def test_parse_generation_request_rejects(
    mode: str | None, prompt: str, has_image: bool, qr_filename: str | None
) -> None:
    with pytest.raises(InvalidRequestError):
        parse_generation_request(
            mode=mode,
            prompt=prompt,
            style="",
            has_image=has_image,
            qr_filename=qr_filename,
        )
