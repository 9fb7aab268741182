"""ASGI entrypoint for the Find a Time API."""

from find_a_time.api.app import create_app
from find_a_time.containers import build_container

app = create_app(build_container())
