"""ASGI entrypoint for the label admin API."""

from label_admin.api.app import create_app
from label_admin.containers import build_container

app = create_app(build_container())
