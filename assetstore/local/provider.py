"""Local filesystem implementation of the storage provider blueprint."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from assetstore.base import StorageProviderBlueprint
from assetstore.base.async_support import AsyncMixin
from assetstore.base.config import FileSystemProviderConfig
from assetstore.base.exceptions import ObjectNotFoundError, TransportError
from assetstore.base.logger import as_logger
from assetstore.base.paths import normalize_path
from assetstore.base.types import ConfigurationReport, ListEntry, ObjectInfo


def _modified_at(stat: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)


class FileSystemStorageProvider(StorageProviderBlueprint, AsyncMixin):
    """Namespaced object storage under a local directory.

    Physical keys become relative paths below ``root_path``. Files carry
    no ACL, so access descriptors are computed but not applied. OS errors
    on mutations are re-raised as :class:`TransportError`.
    """

    provider_name = "filesystem"

    def __init__(self, config: FileSystemProviderConfig) -> None:
        super().__init__(config)
        self._root = Path(config.root_path)

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        """Map a physical key below the root; ``.`` and ``..`` parts are dropped."""
        parts = [part for part in key.split("/") if part not in ("", ".", "..")]
        return self._root.joinpath(*parts)

    def _relocate(self, source_key: str, destination_key: str, operation: str) -> None:
        source = self._path_for(source_key)
        destination = self._path_for(destination_key)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, destination)
        except OSError as e:
            raise TransportError(
                f"Failed to {operation} '{source_key}' to '{destination_key}': {e}"
            ) from e

    # --- Queries ---

    def list(self, path: str = "", private: bool = False) -> list[ListEntry]:
        directory = self._path_for(self.expand(path, private=private))
        if not directory.is_dir():
            return []
        entries = []
        for child in sorted(directory.iterdir()):
            if not child.is_file():
                continue
            stat = child.stat()
            if stat.st_size <= 0:
                continue
            entries.append(
                ListEntry(
                    name=child.name,
                    directory=normalize_path(path),
                    size=stat.st_size,
                    last_modified=_modified_at(stat),
                )
            )
        return entries

    def inspect(
        self, path: str, trashed: bool = False, private: bool = False
    ) -> ObjectInfo | None:
        target = self._path_for(self.expand(path, private=private, trashed=trashed))
        try:
            if not target.is_file():
                return None
            stat = target.stat()
        except OSError as e:
            as_logger.warning(
                f"Lookup failed, treating as missing: {e}",
                provider=self.provider_name,
                operation="inspect",
            )
            return None
        return ObjectInfo(size=stat.st_size, last_modified=_modified_at(stat))

    def read(self, path: str, trashed: bool = False, private: bool = False) -> bytes:
        target = self._path_for(self.expand(path, private=private, trashed=trashed))
        try:
            return target.read_bytes()
        except OSError as e:
            as_logger.warning(
                f"Read failed: {e}", provider=self.provider_name, operation="read"
            )
            raise ObjectNotFoundError(path) from e

    # --- Mutations ---

    def write(self, data: bytes, path: str, private: bool = False) -> None:
        key = self.expand(path, private=private)
        target = self._path_for(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise TransportError(f"Failed to write '{key}': {e}") from e
        as_logger.info(
            f"Wrote {len(data)} bytes",
            provider=self.provider_name,
            namespace=self.namespace_of(private),
            operation="write",
            key=key,
        )

    def delete(self, path: str, trashed: bool = False, private: bool = False) -> None:
        key = self.expand(path, private=private, trashed=trashed)
        try:
            self._path_for(key).unlink()
        except OSError as e:
            raise TransportError(f"Failed to delete '{key}': {e}") from e

    def soft_delete(self, path: str, private: bool = False) -> str:
        self._relocate(
            self.expand(path, private=private), self.expand(path, trashed=True), "trash"
        )
        return path

    def restore(self, trashed_path: str, new_path: str, private: bool = False) -> bool:
        self._relocate(
            self.expand(trashed_path, trashed=True),
            self.expand(new_path, private=private),
            "restore",
        )
        return True

    def move(
        self,
        original_path: str,
        new_path: str,
        original_is_private: bool = False,
        new_is_private: bool = False,
    ) -> bool:
        self._relocate(
            self.expand(original_path, private=original_is_private),
            self.expand(new_path, private=new_is_private),
            "move",
        )
        return True

    # --- Configuration ---

    @classmethod
    def validate_configuration(
        cls, config: FileSystemProviderConfig | Mapping[str, Any]
    ) -> ConfigurationReport:
        """Check that the root directory exists and is writable."""
        report = ConfigurationReport()
        config = report.load(FileSystemProviderConfig, config)
        if config is None:
            return report

        root = Path(config.root_path)
        if not root.is_dir():
            report.add("root_path", f"Directory '{root}' does not exist.")
        elif not os.access(root, os.W_OK):
            report.add("root_path", f"Directory '{root}' is not writable.")
        return report
