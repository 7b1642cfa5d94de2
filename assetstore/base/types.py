"""Value objects returned by providers and object store clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import ConfigurationInvalidError

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class ObjectSummary:
    """One row of a prefix listing, as reported by the store."""

    key: str
    size: int
    last_modified: datetime


@dataclass(frozen=True)
class ObjectInfo:
    """Size and modification time of a stored object."""

    size: int
    last_modified: datetime


@dataclass(frozen=True)
class ListEntry:
    """A direct child object of a listed logical directory."""

    name: str
    directory: str
    size: int
    last_modified: datetime


@dataclass
class ConfigurationReport:
    """Outcome of :meth:`StorageProviderBlueprint.validate_configuration`.

    Attributes:
        errors: One :class:`ConfigurationInvalidError` per failed check.
    """

    errors: list[ConfigurationInvalidError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str) -> None:
        self.errors.append(ConfigurationInvalidError(field_name, message))

    def fields(self) -> list[str]:
        return [err.field for err in self.errors]

    def as_dict(self) -> dict[str, str]:
        return {err.field: err.message for err in self.errors}

    def raise_for_errors(self) -> None:
        """Raise the first collected error, if any."""
        if self.errors:
            raise self.errors[0]

    def load(self, model: type[M], config: M | Mapping[str, Any] | None) -> M | None:
        """Build *model* from a raw mapping, recording failures as field errors.

        Returns:
            The config model, or ``None`` if it could not be built.
        """
        if isinstance(config, model):
            return config
        try:
            return model(**config)  # type: ignore[arg-type]
        except ValidationError as e:
            for error in e.errors():
                field_name = ".".join(str(part) for part in error["loc"]) or "config"
                self.add(field_name, error["msg"])
        except TypeError as e:
            self.add("config", f"Expected a mapping, got {type(config).__name__}: {e}")
        return None
