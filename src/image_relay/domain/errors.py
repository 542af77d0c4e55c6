"""Error taxonomy surfaced to HTTP callers."""


class RelayError(Exception):
    """Base error carrying an HTTP status and a user-facing message."""

    status_code: int = 500
    message: str = "Something went wrong."

    def __init__(self, details: str = "", *, message: str | None = None) -> None:
        super().__init__(details or message or self.message)
        self.details = details
        if message is not None:
            self.message = message


class InvalidRequestError(RelayError):
    """Missing file or prompt, or a mode that does not match the input."""

    status_code = 400
    message = "Insufficient input or mode mismatch."


class NotFoundError(RelayError):
    """Unknown pairing session or missing artifact."""

    status_code = 404
    message = "Not found."


class InputFileError(RelayError):
    """The source image is missing on disk or cannot be decoded."""

    message = "The source image could not be read."


class ExternalServiceError(RelayError):
    """The image provider failed to describe or generate."""

    message = "Image generation failed. Please try again."


class ContentPolicyError(ExternalServiceError):
    """The provider rejected the request under its content policy."""

    message = (
        "The request was rejected by the content policy. "
        "Try a different prompt or image."
    )


class DownloadError(ExternalServiceError):
    """The generated image could not be fetched from the provider."""

    message = "The generated image could not be downloaded."


class UnhandledError(RelayError):
    """Fallback for failures outside the known taxonomy."""

    message = "An unexpected error occurred."
