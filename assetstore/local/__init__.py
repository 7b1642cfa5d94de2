"""Local filesystem storage provider."""

from .provider import FileSystemStorageProvider

__all__ = ["FileSystemStorageProvider"]
