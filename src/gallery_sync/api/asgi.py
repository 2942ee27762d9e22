"""ASGI entrypoint for the gallery sync API."""

from gallery_sync.api.app import create_app
from gallery_sync.containers import build_container

app = create_app(build_container())
