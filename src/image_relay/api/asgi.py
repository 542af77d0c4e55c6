"""ASGI entrypoint for the image relay API."""

from image_relay.api.app import create_app
from image_relay.containers import build_container

app = create_app(build_container())
