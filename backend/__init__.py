"""Backend package exposing the FastAPI application for the point of sale."""

from .main import app

__all__ = ["app"]
