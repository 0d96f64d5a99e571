"""Command-line front end."""

from .app import app, main

__all__ = ["app", "main"]
