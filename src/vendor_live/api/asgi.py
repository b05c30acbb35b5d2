"""ASGI entrypoint for the vendor live API."""

from vendor_live.api.app import create_app
from vendor_live.containers import build_container

app = create_app(build_container())
