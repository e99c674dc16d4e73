"""HTTP API for the study panels."""

from .server import create_app

__all__ = ["create_app"]
