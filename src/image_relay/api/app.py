"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from image_relay.api import pages
from image_relay.api.models import (
    AiProcessResponse,
    FileInfo,
    GalleryImage,
    GalleryListResponse,
    UploadSessionResponse,
    UploadStatusResponse,
)
from image_relay.app_logging import configure_logging
from image_relay.containers import AppContainer
from image_relay.domain.artifacts import StoredFile
from image_relay.domain.errors import NotFoundError, RelayError, UnhandledError
from image_relay.domain.generation import (
    GenerationRequest,
    ImageSource,
    QrRelaySource,
    TextSource,
)
from image_relay.domain.pairing import PairingStatus
from image_relay.services.generation import parse_generation_request


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Serving artifacts from %s", app.state.container.artifact_store.root
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "details": exc.details},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/start-upload-session", response_model=UploadSessionResponse)
    async def start_upload_session(request: Request) -> UploadSessionResponse:
        """Create a pairing session for a phone to upload into."""
        state_container: AppContainer = request.app.state.container
        session = state_container.pairing_registry.create()
        origin = state_container.settings.public_origin or str(request.base_url)
        origin = origin.rstrip("/")
        return UploadSessionResponse(
            session_id=session.id,
            origin=origin,
            upload_url=f"{origin}/upload.html?id={session.id}",
        )

    @app.get("/upload.html", response_class=HTMLResponse)
    async def upload_page(
        request: Request,
        id: str | None = None,  # noqa: A002
        sessionId: str | None = None,  # noqa: N803
    ) -> HTMLResponse:
        """Serve the phone upload form for a known session."""
        state_container: AppContainer = request.app.state.container
        session_id = id or sessionId
        if not session_id or not state_container.pairing_registry.exists(session_id):
            return HTMLResponse(pages.session_not_found_page(), status_code=404)
        return HTMLResponse(pages.upload_form_page(session_id))

    @app.post("/api/mobile-upload/{session_id}", response_class=HTMLResponse)
    async def mobile_upload(
        session_id: str,
        request: Request,
        image: UploadFile | None = File(default=None),
    ) -> HTMLResponse:
        """Receive the phone's photo and attach it to the session."""
        state_container: AppContainer = request.app.state.container
        registry = state_container.pairing_registry
        if not registry.exists(session_id):
            return HTMLResponse(
                pages.upload_error_page("Session not found."), status_code=404
            )
        stored: StoredFile | None = None
        if _has_file(image):
            content = await image.read()
            stored = state_container.artifact_store.save_upload(
                content, image.filename or ""
            )
        try:
            registry.record_upload(session_id, stored)
        except RelayError as exc:
            logger.warning("Mobile upload rejected: %s", exc)
            if stored is not None:
                stored.path.unlink(missing_ok=True)
            return HTMLResponse(
                pages.upload_error_page(exc.message), status_code=exc.status_code
            )
        return HTMLResponse(pages.upload_done_page())

    @app.get(
        "/api/check-upload-status/{session_id}",
        response_model=UploadStatusResponse,
        response_model_exclude_none=True,
    )
    async def check_upload_status(
        session_id: str, request: Request
    ) -> UploadStatusResponse | JSONResponse:
        """Report whether the phone has uploaded; hands the file out once."""
        state_container: AppContainer = request.app.state.container
        try:
            session = state_container.pairing_registry.poll_and_consume(session_id)
        except NotFoundError as exc:
            body = UploadStatusResponse(status="error", message=exc.message)
            return JSONResponse(
                status_code=exc.status_code,
                content=body.model_dump(by_alias=True, exclude_none=True),
            )
        if session.status is PairingStatus.WAITING or session.file is None:
            return UploadStatusResponse(status=PairingStatus.WAITING.value)
        return UploadStatusResponse(
            status=PairingStatus.UPLOADED.value,
            file_info=FileInfo(
                path=session.file.url,
                original_name=session.file.original_name,
                stored_name=session.file.stored_name,
            ),
        )

    @app.post("/api/ai-process", response_model=AiProcessResponse)
    async def ai_process(  # noqa: PLR0913
        request: Request,
        image: UploadFile | None = File(default=None),
        prompt: str | None = Form(default=None),
        style: str | None = Form(default=None),
        mode: str | None = Form(default=None),
        qrUploadedFileName: str | None = Form(default=None),  # noqa: N803
    ) -> AiProcessResponse:
        """Run the generation pipeline and return the stored result URL."""
        state_container: AppContainer = request.app.state.container
        resolved_mode, resolved_prompt, resolved_style = parse_generation_request(
            mode=mode,
            prompt=prompt,
            style=style,
            has_image=_has_file(image),
            qr_filename=qrUploadedFileName,
        )
        if resolved_mode == "image":
            content = await image.read()
            stored = state_container.artifact_store.save_upload(
                content, image.filename or ""
            )
            source = ImageSource(path=stored.path)
        elif resolved_mode == "qr":
            source = QrRelaySource(filename=(qrUploadedFileName or "").strip())
        else:
            source = TextSource()
        generation_request = GenerationRequest(
            prompt=resolved_prompt, style=resolved_style, source=source
        )
        try:
            result = await state_container.generation_pipeline.run(generation_request)
        except RelayError:
            raise
        except Exception as exc:
            logger.exception("Generation pipeline failed unexpectedly")
            raise UnhandledError(str(exc)) from exc
        return AiProcessResponse(ai_image_url=result.url)

    @app.get("/api/gallery-list", response_model=GalleryListResponse)
    async def gallery_list(request: Request) -> GalleryListResponse:
        """List generated results, newest first."""
        state_container: AppContainer = request.app.state.container
        items = state_container.delivery_service.list_results()
        return GalleryListResponse(
            images=[
                GalleryImage(
                    url=item.url, filename=item.filename, timestamp=item.timestamp
                )
                for item in items
            ]
        )

    @app.get("/api/download/{filename}")
    async def download(
        filename: str, request: Request, size: str | None = None
    ) -> Response:
        """Stream a result as an attachment, optionally scaled down."""
        state_container: AppContainer = request.app.state.container
        result = state_container.delivery_service.download(filename, size)
        if result.path is not None:
            return FileResponse(
                result.path, media_type=result.media_type, filename=result.filename
            )
        return Response(
            content=result.content,
            media_type=result.media_type,
            headers={
                "Content-Disposition": f'attachment; filename="{result.filename}"'
            },
        )

    _mount_static(app, container)
    return app


def _mount_static(app: FastAPI, container: AppContainer) -> None:
    """Serve artifacts and the public root as plain files."""
    store = container.artifact_store
    if store.url_prefix:
        app.mount(
            store.url_prefix,
            StaticFiles(directory=str(store.root)),
            name="artifacts",
        )
    static_dir = container.settings.static_dir
    static_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")


def _has_file(upload: UploadFile | None) -> bool:
    return upload is not None and bool(upload.filename)
