"""Abstract secret store blueprint and core utilities.

Secret store providers inherit from :class:`SecretStoreBlueprint`.
Import it to type-hint your own code or to plug in a custom backend.
"""

from .secret_store import SecretStoreBlueprint, SecretValue
from .supported_providers import existing_providers


__all__ = [
    "SecretStoreBlueprint",
    "SecretValue",
    "existing_providers",
]
