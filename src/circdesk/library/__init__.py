"""Library facade."""

from .facade import Library

__all__ = ["Library"]
