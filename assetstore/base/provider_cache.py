"""Shared provider instances.

Providers hold nothing mutable beyond their frozen configuration, so two
callers asking for the same validated configuration can share one
provider (and the boto3 client inside it).
"""

from __future__ import annotations

import threading
from typing import Callable, Hashable

from .config import NamespaceSettings


class ProviderCache:
    """Providers keyed by ``(provider_name, config)``.

    Config models are frozen pydantic models and therefore hashable;
    raw mappings that validate to the same model share an entry.
    """

    def __init__(self) -> None:
        self._providers: dict[tuple[str, Hashable], object] = {}
        self._lock = threading.Lock()

    def get_or_create(
        self,
        provider_name: str,
        config: NamespaceSettings,
        build: Callable[[NamespaceSettings], object],
    ) -> object:
        """Return the provider for *config*, calling ``build(config)`` on a miss."""
        key = (provider_name, config)
        with self._lock:
            provider = self._providers.get(key)
            if provider is None:
                provider = self._providers[key] = build(config)
            return provider

    def __len__(self) -> int:
        return len(self._providers)

    def clear(self) -> None:
        with self._lock:
            self._providers.clear()


provider_cache = ProviderCache()
