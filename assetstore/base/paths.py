"""
Path expansion: logical paths to physical storage keys.

A caller addresses an object by a logical path inside one visibility
namespace. The backing store only knows flat keys, so every operation
first expands the logical path against the namespace root it lives in.
Nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SEPARATOR = "/"


class Visibility(str, Enum):
    """Live namespaces an object can be written to."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_flag(cls, private: bool) -> Visibility:
        return cls.PRIVATE if private else cls.PUBLIC


class Namespace(str, Enum):
    """Every namespace a physical key can live in."""

    PUBLIC = "public"
    PRIVATE = "private"
    TRASH = "trash"


def strip_leading_separator(path: str) -> str:
    """Remove exactly one leading ``/`` (keys may not start with one)."""
    return path[1:] if path.startswith(SEPARATOR) else path


def normalize_root(subpath: str, suffix: str) -> str:
    """Build a namespace root from the common subpath and its suffix.

    The result is either empty or ends with ``/``, and never starts with
    one. ``normalize_root("", "/public")`` gives ``"public/"``.
    """
    root = (subpath + suffix).replace("\\", SEPARATOR).strip()
    root = root.lstrip(SEPARATOR)
    if root and not root.endswith(SEPARATOR):
        root += SEPARATOR
    return root


def normalize_path(logical_path: str, trashed: bool = False) -> str:
    """Normalise a caller-supplied logical path.

    Backslashes become ``/``, one leading separator is dropped and
    surrounding whitespace is trimmed. Live paths are lower-cased;
    trashed paths keep their case so a restore can recover the exact
    original key.
    """
    path = logical_path.replace("\\", SEPARATOR)
    path = strip_leading_separator(path)
    path = path.strip()
    if not trashed:
        path = path.lower()
    return path


@dataclass(frozen=True)
class NamespaceRoots:
    """The three disjoint key prefixes of a provider."""

    public: str
    private: str
    trash: str

    @classmethod
    def build(
        cls,
        subpath: str = "",
        public_suffix: str = "/public",
        private_suffix: str = "/private",
        trash_suffix: str = "/.trash",
    ) -> NamespaceRoots:
        return cls(
            public=normalize_root(subpath, public_suffix),
            private=normalize_root(subpath, private_suffix),
            trash=normalize_root(subpath, trash_suffix),
        )

    def for_namespace(self, namespace: Namespace) -> str:
        return getattr(self, namespace.value)

    def overlapping(self) -> list[tuple[str, str]]:
        """Return pairs of namespace names whose roots are not disjoint."""
        names = [ns.value for ns in Namespace]
        pairs = []
        for i, first in enumerate(names):
            for second in names[i + 1:]:
                a, b = getattr(self, first), getattr(self, second)
                if a.startswith(b) or b.startswith(a):
                    pairs.append((first, second))
        return pairs


def select_namespace(visibility: Visibility, trashed: bool) -> Namespace:
    if trashed:
        return Namespace.TRASH
    return Namespace(visibility.value)


def expand(
    logical_path: str,
    visibility: Visibility,
    trashed: bool,
    roots: NamespaceRoots,
) -> str:
    """Map a logical path to the physical key sent to the store.

    Args:
        logical_path: Caller path, possibly un-normalised.
        visibility: Live namespace the path belongs to.
        trashed: Resolve against the trash root instead.
        roots: Namespace roots of the provider.

    Returns:
        The physical key. An empty logical path yields the bare root.
    """
    root = roots.for_namespace(select_namespace(visibility, trashed))
    return strip_leading_separator(root + normalize_path(logical_path, trashed))


def parent_prefix(key: str) -> str:
    """Return the listing prefix holding *key* (``""`` at the top level)."""
    head, sep, _ = key.rpartition(SEPARATOR)
    return head + sep


def as_directory_prefix(key: str) -> str:
    """Append ``/`` to a non-empty key so it only matches its children."""
    if key and not key.endswith(SEPARATOR):
        return key + SEPARATOR
    return key
