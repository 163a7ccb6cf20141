"""HTTP API for daily-write."""

from api.routes import create_app

__all__ = ["create_app"]
