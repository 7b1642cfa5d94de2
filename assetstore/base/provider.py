"""Storage provider blueprint."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .access import AccessDescriptor, access_for
from .config import NamespaceSettings
from .paths import Visibility, expand, select_namespace
from .types import ConfigurationReport, ListEntry, ObjectInfo


class StorageProviderBlueprint(ABC):
    """Abstract interface for namespaced object storage.

    Callers address objects by logical path inside the public or private
    namespace; soft-deleted objects live in the trash namespace until
    restored or deleted for good. Implementations map to S3 and to a
    local directory.

    The configuration is captured once by the constructor and exposed
    read-only through :attr:`config`.
    """

    provider_name: str = ""

    def __init__(self, config: NamespaceSettings) -> None:
        self._config = config
        self._roots = config.roots

    @property
    def config(self) -> NamespaceSettings:
        return self._config

    # --- Path helpers ---

    def expand(self, path: str, private: bool = False, trashed: bool = False) -> str:
        """Return the physical key for a logical path."""
        return expand(path, Visibility.from_flag(private), trashed, self._roots)

    def access_for(self, private: bool = False, trashed: bool = False) -> AccessDescriptor:
        """Return the access descriptor applied to keys in that namespace."""
        return access_for(Visibility.from_flag(private), trashed)

    def namespace_of(self, private: bool = False, trashed: bool = False) -> str:
        return select_namespace(Visibility.from_flag(private), trashed).value

    def public_url(self, path: str) -> str:
        """Return the public URL of *path*, or ``""`` without a root URL.

        No network call and no existence check is made.
        """
        base_url = self._config.base_url
        if not base_url:
            return ""
        return base_url + self.expand(path)

    # --- Queries ---

    @abstractmethod
    def list(self, path: str = "", private: bool = False) -> list[ListEntry]:
        """List the direct child objects of a logical directory.

        Zero-size entries are directory placeholders and are skipped.

        Args:
            path: Logical directory; empty lists the namespace root.
            private: List the private namespace instead of the public one.

        Returns:
            A possibly empty list of entries.
        """
        pass

    @abstractmethod
    def inspect(
        self, path: str, trashed: bool = False, private: bool = False
    ) -> ObjectInfo | None:
        """Return size and modification time of an object.

        Lookup failures of any kind degrade to ``None``; a missing object
        and an unreachable store look the same to the caller.

        Args:
            path: Logical path of the object.
            trashed: Look in the trash namespace.
            private: Look in the private namespace.

        Returns:
            The object info, or ``None`` if it could not be found.
        """
        pass

    def exists(self, path: str, trashed: bool = False, private: bool = False) -> bool:
        """Return whether :meth:`inspect` finds the object."""
        return self.inspect(path, trashed=trashed, private=private) is not None

    @abstractmethod
    def read(self, path: str, trashed: bool = False, private: bool = False) -> bytes:
        """Read an object's bytes.

        Raises:
            ObjectNotFoundError: If the fetch or its integrity check fails.
        """
        pass

    # --- Mutations ---

    @abstractmethod
    def write(self, data: bytes, path: str, private: bool = False) -> None:
        """Store *data* at *path*, overwriting any existing object.

        Raises:
            TransportError: If the store rejects the write.
        """
        pass

    @abstractmethod
    def delete(self, path: str, trashed: bool = False, private: bool = False) -> None:
        """Permanently remove an object.

        Raises:
            TransportError: If the store reports a failure.
        """
        pass

    @abstractmethod
    def soft_delete(self, path: str, private: bool = False) -> str:
        """Move a live object to the trash namespace.

        The trash key keeps the logical path's original case.

        Returns:
            *path* unchanged; pass it to :meth:`restore` to recover the object.

        Raises:
            TransportError: If the move fails.
        """
        pass

    @abstractmethod
    def restore(self, trashed_path: str, new_path: str, private: bool = False) -> bool:
        """Move an object out of the trash, optionally renaming it.

        Args:
            trashed_path: Recovery token returned by :meth:`soft_delete`.
            new_path: Logical path to restore to.
            private: Restore into the private namespace.

        Returns:
            ``True`` once the object is live again.

        Raises:
            TransportError: If the move fails.
        """
        pass

    @abstractmethod
    def move(
        self,
        original_path: str,
        new_path: str,
        original_is_private: bool = False,
        new_is_private: bool = False,
    ) -> bool:
        """Relocate a live object, possibly across visibilities.

        Returns:
            ``True`` once the object lives at the new key.

        Raises:
            TransportError: If the move fails.
        """
        pass

    # --- Configuration ---

    @classmethod
    @abstractmethod
    def validate_configuration(
        cls, config: NamespaceSettings | Mapping[str, Any]
    ) -> ConfigurationReport:
        """Check a configuration without raising.

        Args:
            config: A config model or the raw mapping to validate.

        Returns:
            A report holding one field-level error per failed check.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config!r})"
