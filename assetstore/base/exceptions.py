"""
Assetstore exception hierarchy.

Transport failures raised by an object store client inherit from
:class:`TransportError` and keep the backend's diagnostic message.
Provider-level failures (missing objects, bad configuration) inherit
directly from :class:`AssetStoreError`.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class AssetStoreError(Exception):
    """Root exception for all Assetstore errors."""


# ── Transport ─────────────────────────────────────────────────────────
class TransportError(AssetStoreError):
    """Network, authentication or backend failure reported by the store.

    Attributes:
        message: Diagnostic text returned by the backend (or the SDK).
        code: Backend error code when one was reported.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class BucketNotFoundError(TransportError):
    """Bucket not found."""


class KeyNotFoundError(TransportError):
    """Key not found or not readable."""


class AuthenticationError(TransportError):
    """Credentials rejected by the backend."""


class ObjectAlreadyExistsError(TransportError):
    """Destination key exists and overwriting was not allowed."""


class IntegrityError(TransportError):
    """Downloaded payload does not match the checksum reported by the store."""


# ── Provider ──────────────────────────────────────────────────────────
class ObjectNotFoundError(AssetStoreError):
    """Read target is missing or failed integrity verification."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Object not found: '{path}'")
        self.path = path


class ConfigurationInvalidError(AssetStoreError):
    """A configuration check failed for a specific field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
