"""S3 implementation of the storage provider blueprint."""

from __future__ import annotations

from typing import Any, Mapping

from botocore.exceptions import BotoCoreError

from assetstore.base import StorageProviderBlueprint
from assetstore.base.async_support import AsyncMixin
from assetstore.base.config import S3ProviderConfig
from assetstore.base.exceptions import ObjectNotFoundError, TransportError
from assetstore.base.logger import as_logger
from assetstore.base.paths import as_directory_prefix, normalize_path, parent_prefix
from assetstore.base.types import ConfigurationReport, ListEntry, ObjectInfo

from .client import S3ObjectStoreClient


class S3StorageProvider(StorageProviderBlueprint, AsyncMixin):
    """Namespaced object storage in a single S3 bucket.

    Public, private and trashed objects share one bucket and are told
    apart by key prefix. Public keys carry the ``public-read`` canned ACL;
    everything else is private. Soft delete, restore and move are
    server-side copies followed by a delete of the source.

    Attributes:
        client: Object store client used for every S3 call.
        bucket: Bucket holding all three namespaces.
    """

    provider_name = "s3"

    def __init__(
        self, config: S3ProviderConfig, client: S3ObjectStoreClient | None = None
    ) -> None:
        """Initialize the provider.

        Args:
            config: Validated S3 provider configuration.
            client: Object store client to use; built from *config* when
                omitted.
        """
        super().__init__(config)
        self._client = client or S3ObjectStoreClient(config)

    @property
    def client(self) -> S3ObjectStoreClient:
        return self._client

    @property
    def bucket(self) -> str:
        return self._config.bucket

    def _log(self, message: str, operation: str, key: str, namespace: str) -> None:
        as_logger.info(
            message,
            provider=self.provider_name,
            namespace=namespace,
            operation=operation,
            key=key,
        )

    # --- Queries ---

    def list(self, path: str = "", private: bool = False) -> list[ListEntry]:
        """List direct child objects of a logical directory.

        Raises:
            TransportError: If the listing fails.
        """
        prefix = as_directory_prefix(self.expand(path, private=private))
        directory = normalize_path(path)
        entries = []
        for summary in self._client.list_by_prefix(self.bucket, prefix, delimiter="/"):
            name = summary.key[len(prefix):]
            if not name or "/" in name or summary.size <= 0:
                continue
            entries.append(
                ListEntry(
                    name=name,
                    directory=directory,
                    size=summary.size,
                    last_modified=summary.last_modified,
                )
            )
        return entries

    def inspect(
        self, path: str, trashed: bool = False, private: bool = False
    ) -> ObjectInfo | None:
        key = self.expand(path, private=private, trashed=trashed)
        try:
            for summary in self._client.list_by_prefix(
                self.bucket, parent_prefix(key), delimiter="/"
            ):
                if summary.key == key:
                    return ObjectInfo(size=summary.size, last_modified=summary.last_modified)
        except TransportError as e:
            # A store outage is indistinguishable from a missing object here.
            as_logger.warning(
                f"Lookup failed, treating as missing: {e}",
                provider=self.provider_name,
                namespace=self.namespace_of(private, trashed),
                operation="inspect",
                key=key,
            )
        return None

    def read(self, path: str, trashed: bool = False, private: bool = False) -> bytes:
        key = self.expand(path, private=private, trashed=trashed)
        try:
            return self._client.get_bytes(self.bucket, key)
        except TransportError as e:
            as_logger.warning(
                f"Read failed: {e}",
                provider=self.provider_name,
                namespace=self.namespace_of(private, trashed),
                operation="read",
                key=key,
            )
            raise ObjectNotFoundError(path) from e

    # --- Mutations ---

    def write(self, data: bytes, path: str, private: bool = False) -> None:
        key = self.expand(path, private=private)
        self._client.put_bytes(self.bucket, key, data, self.access_for(private=private))
        self._log(
            f"Wrote {len(data)} bytes", "write", key, self.namespace_of(private)
        )

    def delete(self, path: str, trashed: bool = False, private: bool = False) -> None:
        key = self.expand(path, private=private, trashed=trashed)
        self._client.delete_object(self.bucket, key)
        self._log("Deleted object", "delete", key, self.namespace_of(private, trashed))

    def soft_delete(self, path: str, private: bool = False) -> str:
        source = self.expand(path, private=private)
        destination = self.expand(path, trashed=True)
        self._client.move_object(
            self.bucket, source, destination, self.access_for(trashed=True)
        )
        self._log(f"Moved '{source}' to trash", "soft_delete", destination, "trash")
        return path

    def restore(self, trashed_path: str, new_path: str, private: bool = False) -> bool:
        source = self.expand(trashed_path, trashed=True)
        destination = self.expand(new_path, private=private)
        self._client.move_object(
            self.bucket, source, destination, self.access_for(private=private)
        )
        self._log(
            f"Restored '{source}'", "restore", destination, self.namespace_of(private)
        )
        return True

    def move(
        self,
        original_path: str,
        new_path: str,
        original_is_private: bool = False,
        new_is_private: bool = False,
    ) -> bool:
        source = self.expand(original_path, private=original_is_private)
        destination = self.expand(new_path, private=new_is_private)
        self._client.move_object(
            self.bucket, source, destination, self.access_for(private=new_is_private)
        )
        self._log(
            f"Moved '{source}'", "move", destination, self.namespace_of(new_is_private)
        )
        return True

    # --- Configuration ---

    @classmethod
    def validate_configuration(
        cls, config: S3ProviderConfig | Mapping[str, Any]
    ) -> ConfigurationReport:
        """Check credentials, then the bucket, reporting field-level errors.

        The credential check (``list_buckets``) short-circuits the bucket
        check (a one-key listing). Never raises.
        """
        report = ConfigurationReport()
        config = report.load(S3ProviderConfig, config)
        if config is None:
            return report

        try:
            client = S3ObjectStoreClient(config)
            client.list_buckets()
        except (TransportError, BotoCoreError, ValueError) as e:
            as_logger.error(
                f"Credential check failed: {e}",
                provider=cls.provider_name,
                operation="validate_configuration",
            )
            report.add("access_key", f"Credentials were rejected: {e}")
            return report

        try:
            next(iter(client.list_by_prefix(config.bucket, "", max_results=1)), None)
        except TransportError as e:
            as_logger.error(
                f"Bucket check failed: {e}",
                provider=cls.provider_name,
                operation="validate_configuration",
            )
            report.add("bucket", f"Bucket '{config.bucket}' is not accessible: {e}")
        return report
