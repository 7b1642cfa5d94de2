"""Abstract provider blueprint and core utilities.

Every storage provider inherits from :class:`StorageProviderBlueprint`.
Import it to type-hint your own code or to create custom providers.
"""

from .access import AccessDescriptor, access_for
from .paths import Namespace, NamespaceRoots, Visibility, expand, normalize_path
from .provider import StorageProviderBlueprint
from .types import ConfigurationReport, ListEntry, ObjectInfo, ObjectSummary
from .supported_providers import existing_providers


__all__ = [
    "AccessDescriptor",
    "access_for",
    "Namespace",
    "NamespaceRoots",
    "Visibility",
    "expand",
    "normalize_path",
    "StorageProviderBlueprint",
    "ConfigurationReport",
    "ListEntry",
    "ObjectInfo",
    "ObjectSummary",
    "existing_providers",
]
