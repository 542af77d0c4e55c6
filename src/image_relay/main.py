"""Command-line entry point that serves the API with uvicorn."""

import uvicorn

from image_relay.config import Settings


def main() -> None:
    """Run the relay on the configured host and port."""
    settings = Settings()
    uvicorn.run("image_relay.api.asgi:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
