"""Browser front-end: FastAPI routes and server-rendered HTML components."""

from web.app import create_app

__all__ = ["create_app"]
