"""Terminal front end for Murmur."""

from .app import app

__all__ = ["app"]
