"""ASGI entrypoint for the BeFit API."""

from befit.api.app import create_app
from befit.containers import build_container

app = create_app(build_container())
