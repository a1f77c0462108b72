"""
FastAPI/ASGI application entrypoint.

Builds the app from environment settings.
Run with: uvicorn initia2aptos.api_server.app:app --host 0.0.0.0 --port 3000
"""

from initia2aptos.api_server.server import create_app

app = create_app()

__all__ = ["app"]
