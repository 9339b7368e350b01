"""ASGI entrypoint for the brewform API."""

from brewform.api.app import create_app
from brewform.containers import build_container

app = create_app(build_container())
