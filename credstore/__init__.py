"""Credstore — container registry credentials in AWS Secrets Manager.

All registry credentials live in one secret. Use :class:`CredentialStore`
directly, or run the ``docker-credential-secretsmanager`` helper::

    from credstore import CredentialStore, create_secret_store

    store = CredentialStore(create_secret_store("aws", {"secret_name": "docker"}), "docker")
    store.list()
"""

from .base import SecretStoreBlueprint, SecretValue
from .codec import CredentialRecord, RegistryCredentials
from .factory import create_secret_store
from .store import CredentialStore

__all__ = [
    "SecretStoreBlueprint",
    "SecretValue",
    "CredentialRecord",
    "RegistryCredentials",
    "create_secret_store",
    "CredentialStore",
]
