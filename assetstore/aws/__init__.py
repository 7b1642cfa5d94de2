"""S3-backed storage provider."""

from .client import S3ObjectStoreClient
from .provider import S3StorageProvider

__all__ = ["S3ObjectStoreClient", "S3StorageProvider"]
