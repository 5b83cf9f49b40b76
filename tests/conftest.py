import itertools
from typing import Optional

import pytest

from credstore.base import SecretStoreBlueprint, SecretValue
from credstore.base.exceptions import ConflictError, SecretNotFoundError


class FakeSecretStore(SecretStoreBlueprint):
    """In-memory secret store recording every write."""

    def __init__(self, value: Optional[str] = "{}"):
        self.value = value
        self.version_id = "v0" if value is not None else None
        self.puts: list[tuple[str, str, str, Optional[str]]] = []
        self._versions = itertools.count(1)

    def fetch_secret_versioned(self, secret_id: str) -> SecretValue:
        if self.value is None:
            raise SecretNotFoundError(f"Secret '{secret_id}' not found.")
        return SecretValue(self.value, self.version_id)

    def put_secret(self, secret_id, value, idempotency_token, expected_version=None):
        if expected_version is not None and expected_version != self.version_id:
            raise ConflictError(f"Secret '{secret_id}' changed since it was read.")
        self.puts.append((secret_id, value, idempotency_token, expected_version))
        self.value = value
        self.version_id = f"v{next(self._versions)}"


@pytest.fixture
def fake_store():
    return FakeSecretStore()
