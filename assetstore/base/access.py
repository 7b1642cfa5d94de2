"""Access policy: which physical keys are publicly readable."""

from __future__ import annotations

from dataclasses import dataclass

from .paths import Visibility

ACL_PUBLIC_READ = "public-read"
ACL_PRIVATE = "private"

STORAGE_STANDARD = "STANDARD"
STORAGE_REDUCED_REDUNDANCY = "REDUCED_REDUNDANCY"


@dataclass(frozen=True)
class AccessDescriptor:
    """Canned ACL plus storage class applied to an object on write or move."""

    acl: str
    storage_class: str

    @property
    def public_read(self) -> bool:
        return self.acl == ACL_PUBLIC_READ


def access_for(visibility: Visibility, trashed: bool) -> AccessDescriptor:
    """Compute the access descriptor for a (visibility, trashed) pair.

    Trashed and private objects get the ``private`` canned ACL, which
    drops any public-group read grant. Only live public objects are
    readable by everyone. Trashed objects are expected to be purged
    soon and go to the reduced-redundancy tier.
    """
    if trashed or visibility is Visibility.PRIVATE:
        acl = ACL_PRIVATE
    else:
        acl = ACL_PUBLIC_READ
    storage_class = STORAGE_REDUCED_REDUNDANCY if trashed else STORAGE_STANDARD
    return AccessDescriptor(acl=acl, storage_class=storage_class)
