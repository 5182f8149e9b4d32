"""ASGI entry point: ``uvicorn bodymetrics.main:app``."""

from bodymetrics.core.app_factory import create_app

app = create_app()
