"""
Pydantic configuration models for storage providers.

Validates provider configs at construction time instead of silently
passing bad values to SDK clients. Models are frozen: a provider
captures its configuration once and never mutates it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .paths import NamespaceRoots

DEFAULT_REGION = "us-west-1"


class NamespaceSettings(BaseModel):
    """Common subpath and the three namespace suffixes.

    Each namespace root is ``subpath + suffix`` normalised so that it is
    empty or ends with ``/``. The roots must be disjoint prefixes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    subpath: str = Field(default="", description="Common prefix for every namespace root")
    public_suffix: str = Field(default="/public", description="Public namespace suffix")
    private_suffix: str = Field(default="/private", description="Private namespace suffix")
    trash_suffix: str = Field(default="/.trash", description="Trash namespace suffix")

    @property
    def roots(self) -> NamespaceRoots:
        return NamespaceRoots.build(
            self.subpath, self.public_suffix, self.private_suffix, self.trash_suffix
        )

    @model_validator(mode="after")
    def validate_disjoint_roots(self) -> NamespaceSettings:
        """Reject suffixes whose namespace roots share a prefix."""
        overlapping = self.roots.overlapping()
        if overlapping:
            first, second = overlapping[0]
            raise ValueError(
                f"Namespace roots '{first}' and '{second}' overlap; "
                "each root must not be a prefix of another."
            )
        return self


class S3ProviderConfig(NamespaceSettings):
    """Configuration for the S3 storage provider.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_DEFAULT_REGION).

    ``root_url`` defaults to the bucket's virtual-hosted URL for the
    region. Pass an empty string to disable public URLs.
    """

    bucket: str = Field(min_length=1, description="Bucket holding every namespace")
    access_key: str = Field(min_length=1, description="AWS access key ID")
    secret_key: str = Field(min_length=1, repr=False, description="AWS secret access key")
    region: str = Field(default=DEFAULT_REGION, description="AWS region (e.g. 'us-west-1')")
    root_url: str | None = Field(default=None, description="Base URL of public objects")
    endpoint_url: str | None = Field(
        default=None, description="Custom endpoint for S3-compatible services"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: Any) -> Any:
        """Fall back to environment variables for missing credentials."""
        if not isinstance(values, dict):
            return values
        values = dict(values)
        env_map = {
            "access_key": "AWS_ACCESS_KEY_ID",
            "secret_key": "AWS_SECRET_ACCESS_KEY",
            "region": "AWS_DEFAULT_REGION",
        }
        for field, env_var in env_map.items():
            if not values.get(field) and os.environ.get(env_var):
                values[field] = os.environ[env_var]
        return values

    @property
    def base_url(self) -> str:
        """Root URL public object keys are appended to (may be empty)."""
        if self.root_url is None:
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/"
        return self.root_url


class FileSystemProviderConfig(NamespaceSettings):
    """Configuration for the local filesystem storage provider."""

    root_path: Path = Field(description="Directory every namespace root lives under")
    root_url: str = Field(default="", description="Base URL of public objects")

    @property
    def base_url(self) -> str:
        return self.root_url


# Map provider names to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[NamespaceSettings]] = {
    "s3": S3ProviderConfig,
    "filesystem": FileSystemProviderConfig,
}


def validate_config(provider_name: str, config: dict) -> NamespaceSettings:
    """Validate and return a typed config model for the given provider.

    Args:
        provider_name: The provider name (e.g. 's3', 'filesystem').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the provider is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(provider_name)
    if model is None:
        raise ValueError(f"No config model registered for provider: {provider_name}")
    return model(**config)


__all__ = [
    "DEFAULT_REGION",
    "NamespaceSettings",
    "S3ProviderConfig",
    "FileSystemProviderConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
