"""HTTP API for skillscout."""

from skillscout.api.app import create_app

__all__ = ["create_app"]
