"""Pinboard export ingestion and tag-scoped mirroring into linkding."""

__version__ = "0.1.0"
