"""Pydantic models for API response payloads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UploadSessionResponse(_CamelModel):
    """Pairing session handed to the desktop."""

    session_id: str = Field(alias="sessionId")
    origin: str
    upload_url: str = Field(alias="uploadUrl")


class FileInfo(_CamelModel):
    """Reference to a file uploaded by the phone."""

    path: str
    original_name: str = Field(alias="originalName")
    stored_name: str = Field(alias="storedName")


class UploadStatusResponse(_CamelModel):
    """Poll result for a pairing session."""

    status: str
    file_info: FileInfo | None = Field(default=None, alias="fileInfo")
    message: str | None = None


class AiProcessResponse(_CamelModel):
    """Location of a freshly generated image."""

    ai_image_url: str = Field(alias="aiImageUrl")


class GalleryImage(BaseModel):
    """Single generated image in the gallery."""

    url: str
    filename: str
    timestamp: datetime


class GalleryListResponse(BaseModel):
    """Generated images, newest first."""

    images: list[GalleryImage]
