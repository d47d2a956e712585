from __future__ import annotations


class NewsError(Exception):
    """Base class for failures surfaced by the news service."""


class ValidationError(NewsError):
    """Raised when required input (title, description, image) is missing or unusable."""


class NotFoundError(NewsError):
    """Raised when an id does not resolve to a stored record."""


class StorageError(NewsError):
    """Raised when the media backend fails to accept an upload."""


class RenderError(NewsError):
    """Raised when the preview document cannot be built."""
