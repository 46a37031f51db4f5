"""ASGI application factory and dependencies for the PantryPal server."""

from pantrypal.server.app import app, create_app

__all__ = ["app", "create_app"]
