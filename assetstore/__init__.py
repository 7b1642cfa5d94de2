"""Assetstore: namespaced object storage with soft delete.

Entry point for the library. Import :func:`provider_factory` to create a
storage provider with a single call::

    from assetstore import provider_factory

    storage = provider_factory("s3", {"bucket": "acme", "access_key": "AK", "secret_key": "SK"})
    storage.write(b"hello", "docs/Readme.txt")
    token = storage.soft_delete("docs/Readme.txt")
    storage.restore(token, "docs/readme.txt")
"""

from .base import StorageProviderBlueprint, Visibility
from .base.exceptions import (
    AssetStoreError,
    ConfigurationInvalidError,
    ObjectNotFoundError,
    TransportError,
)
from .factory import provider_factory

__all__ = [
    "StorageProviderBlueprint",
    "Visibility",
    "AssetStoreError",
    "ConfigurationInvalidError",
    "ObjectNotFoundError",
    "TransportError",
    "provider_factory",
]
