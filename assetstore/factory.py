"""Provider factory.

Provides :func:`provider_factory`, the single entry-point for creating
storage providers. The function validates the raw configuration with the
provider's pydantic model and returns a typed instance via ``@overload``
signatures so IDEs can autocomplete methods.
"""

from typing import overload, Literal, Any

from assetstore.base import StorageProviderBlueprint, existing_providers
from assetstore.base.provider_cache import provider_cache
from assetstore.base.config import validate_config
from assetstore.aws.provider import S3StorageProvider
from assetstore.local.provider import FileSystemStorageProvider


# Provider registry: provider name -> provider class
PROVIDER_REGISTRY: dict[str, type[StorageProviderBlueprint]] = {
    "s3": S3StorageProvider,
    "filesystem": FileSystemStorageProvider,
}


@overload
def provider_factory(
    provider_name: Literal["s3"], config: dict, cached: bool = False
) -> S3StorageProvider: ...


@overload
def provider_factory(
    provider_name: Literal["filesystem"], config: dict, cached: bool = False
) -> FileSystemStorageProvider: ...


def provider_factory(
    provider_name: existing_providers,
    config: dict,
    cached: bool = False,
) -> Any:
    """
    Create a storage provider from a raw configuration mapping.
    Args:
        provider_name: The provider name ('s3' or 'filesystem').
        config: Configuration dictionary validated against the provider's model.
        cached: Reuse a previously created provider for an identical config.
    Returns:
        An instance of the requested provider class.
    Raises:
        ValueError: If the provider is not supported.
        pydantic.ValidationError: If the config is invalid.
    """
    if provider_name not in PROVIDER_REGISTRY:
        raise ValueError(f"Unsupported storage provider: {provider_name}")

    provider_class = PROVIDER_REGISTRY[provider_name]
    config_model = validate_config(provider_name, config)

    if cached:
        return provider_cache.get_or_create(provider_name, config_model, provider_class)
    return provider_class(config_model)


def get_provider_class(provider_name: str) -> type[StorageProviderBlueprint]:
    """Return the provider class registered under *provider_name*.

    Raises:
        ValueError: If the provider is not supported.
    """
    if provider_name not in PROVIDER_REGISTRY:
        raise ValueError(f"Unsupported storage provider: {provider_name}")
    return PROVIDER_REGISTRY[provider_name]
