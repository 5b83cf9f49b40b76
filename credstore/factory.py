"""Secret store factory.

Provides :func:`create_secret_store`, the single entry-point for creating
the backend that holds the credential map. The function dispatches to the
provider-specific registry based on ``provider``.
"""

from typing import Any

from credstore.base import SecretStoreBlueprint, existing_providers
from credstore.base.config import HelperConfig, load_config
from credstore.aws.factory import SERVICE_REGISTRY as AWS_SERVICES


# Nested factory registry: provider -> service registry
_FACTORY_REGISTRY: dict[str, dict[str, type]] = {
    "aws": AWS_SERVICES,
}


def create_secret_store(
    provider: existing_providers,
    config: HelperConfig | dict[str, Any],
) -> SecretStoreBlueprint:
    """
    Create the secret store backend for a provider.
    Args:
        provider: The provider name (e.g. 'aws').
        config: A validated :class:`HelperConfig`, or raw overrides to validate.
    Returns:
        An instance of the provider's secret store class.
    Raises:
        ValueError: If the provider is not supported.
        ConfigurationError: If ``config`` is a dict that does not validate.
    """
    if provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported provider: {provider}")

    store_class = _FACTORY_REGISTRY[provider]["secret_store"]
    config_obj = config if isinstance(config, HelperConfig) else load_config(config)
    return store_class(config_obj)
