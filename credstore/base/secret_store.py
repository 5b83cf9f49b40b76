"""Secret store blueprint."""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional


class SecretValue(NamedTuple):
    """Raw secret text plus the version it was read from."""

    value: str
    version_id: Optional[str] = None


class SecretStoreBlueprint(ABC):
    """Abstract interface for the service holding the credential blob.

    Maps to AWS Secrets Manager. Implementations only move raw strings;
    decoding is left to :mod:`credstore.codec`.
    """

    def fetch_secret(self, secret_id: str) -> str:
        """Retrieve the current value of a secret.

        Convenience for callers without a version check; :class:`CredentialStore`
        reads through :meth:`fetch_secret_versioned`.

        Args:
            secret_id: Secret name or ARN.

        Returns:
            The secret value as a string.
        """
        return self.fetch_secret_versioned(secret_id).value

    @abstractmethod
    def fetch_secret_versioned(self, secret_id: str) -> SecretValue:
        """Retrieve the current value of a secret along with its version id.

        Args:
            secret_id: Secret name or ARN.

        Returns:
            A :class:`SecretValue`.

        Raises:
            SecretNotFoundError: If the secret does not exist.
            FormatError: If the secret has no string value.
            TransportError: If retrieval fails for any other reason.
        """
        pass

    @abstractmethod
    def put_secret(
        self,
        secret_id: str,
        value: str,
        idempotency_token: str,
        expected_version: Optional[str] = None,
    ) -> None:
        """Write a new value for a secret.

        Args:
            secret_id: Secret name or ARN.
            value: New secret value.
            idempotency_token: Client request token deduplicating retries
                of this write.
            expected_version: When set, the write is refused with
                :class:`ConflictError` unless the secret's current version
                still matches.

        Raises:
            ConflictError: If ``expected_version`` no longer matches.
            TransportError: If the write fails.
        """
        pass
