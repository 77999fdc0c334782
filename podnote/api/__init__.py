"""HTTP API for PodNote."""

from podnote.api.server import create_app

__all__ = ["create_app"]
