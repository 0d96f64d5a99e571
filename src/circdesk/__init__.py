"""circdesk - catalog, membership and loan tracking for a small library."""

__version__ = "0.1.0"
