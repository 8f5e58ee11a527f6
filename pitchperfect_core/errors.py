from __future__ import annotations


class PortalError(Exception):
    """Base class for errors raised by the portal core."""


class ConfigurationError(PortalError):
    """The row store or text-generation client is not configured."""


class StoreError(PortalError):
    """A row-store read or write failed."""


class NarrativeError(PortalError):
    """Narrative generation failed or returned something unparseable."""


class MissingNarrativeError(PortalError):
    """A report card was assembled before its narrative was generated."""


class ImageUploadError(PortalError):
    """An uploaded image has an unsupported type or is too large."""
