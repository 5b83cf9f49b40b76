"""Credential store operations.

Each operation fetches the whole credential map from the secret store,
works on it in memory and, for ``store`` and ``erase``, writes the whole
map back as a new secret version. Nothing is cached between calls.
"""

from __future__ import annotations

import uuid
from typing import Optional

from credstore.base import SecretStoreBlueprint, SecretValue
from credstore.base.exceptions import FormatError, NotFoundError, SecretNotFoundError
from credstore.base.logger import cs_logger
from credstore.codec import (
    CredentialRecord,
    SecretMap,
    decode_map,
    decode_record,
    encode_map,
    encode_record,
)


class CredentialStore:
    """Registry credentials kept in a single secret.

    Attributes:
        secret_store: Backend holding the serialized map.
        secret_id: Name or ARN of the secret.
        optimistic_lock: When True, writes carry the version id seen by the
            preceding read and fail with ``ConflictError`` if it moved on.
            Off by default, in which case the last writer wins.
    """

    def __init__(
        self,
        secret_store: SecretStoreBlueprint,
        secret_id: str,
        optimistic_lock: bool = False,
    ) -> None:
        self.secret_store = secret_store
        self.secret_id = secret_id
        self.optimistic_lock = optimistic_lock

    def _fetch_map(self) -> tuple[SecretMap, Optional[str]]:
        try:
            current = self.secret_store.fetch_secret_versioned(self.secret_id)
        except SecretNotFoundError:
            cs_logger.info("secret does not exist yet, using an empty map", secret_id=self.secret_id)
            current = SecretValue("{}")
        return decode_map(current.value), current.version_id

    def _put_map(self, secret_map: SecretMap, version_id: Optional[str]) -> None:
        token = str(uuid.uuid4())
        self.secret_store.put_secret(
            self.secret_id,
            encode_map(secret_map),
            token,
            expected_version=version_id if self.optimistic_lock else None,
        )
        cs_logger.info(
            f"wrote {len(secret_map)} entries",
            secret_id=self.secret_id,
            operation="put_secret",
            request_id=token,
        )

    @staticmethod
    def _lookup(secret_map: SecretMap, url: str) -> CredentialRecord:
        if url not in secret_map:
            raise NotFoundError(f"no credentials stored for '{url}'")
        return decode_record(secret_map[url])

    def get(self, url: str) -> CredentialRecord:
        """Return the credentials stored for ``url``.

        Raises:
            NotFoundError: If nothing is stored for ``url``.
            FormatError: If the stored entry is not a credential record.
        """
        secret_map, _ = self._fetch_map()
        return self._lookup(secret_map, url)

    def store(self, record: CredentialRecord, url: str) -> None:
        """Insert or overwrite the credentials for ``url``."""
        secret_map, version_id = self._fetch_map()
        secret_map[url] = encode_record(record)
        self._put_map(secret_map, version_id)

    def erase(self, url: str) -> None:
        """Remove the credentials for ``url``.

        Raises:
            NotFoundError: If nothing is stored for ``url``, or the entry
                there is not a credential record.
        """
        secret_map, version_id = self._fetch_map()
        try:
            self._lookup(secret_map, url)
        except FormatError as e:
            raise NotFoundError(f"no credentials stored for '{url}': {e}") from e
        del secret_map[url]
        self._put_map(secret_map, version_id)

    def list(self) -> dict[str, str]:
        """Map every URL holding a valid record to its username.

        Entries that do not decode are skipped.
        """
        secret_map, _ = self._fetch_map()
        usernames: dict[str, str] = {}
        for url, entry in secret_map.items():
            try:
                usernames[url] = decode_record(entry).username
            except FormatError:
                cs_logger.debug(f"skipping undecodable entry for '{url}'", secret_id=self.secret_id)
        return usernames
