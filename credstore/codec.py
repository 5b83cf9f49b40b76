"""Secret map codec.

The whole credential store is one secret whose value is a JSON object
mapping registry URL to a *string*; each string is itself the JSON form of
a :class:`CredentialRecord`. A malformed or foreign entry therefore never
makes the map itself undecodable.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from credstore.base.exceptions import FormatError


SecretMap = dict[str, str]

_SECRET_MAP_ADAPTER: TypeAdapter[SecretMap] = TypeAdapter(SecretMap)


class CredentialRecord(BaseModel):
    """Username and secret for one registry."""

    model_config = ConfigDict(frozen=True, validate_by_name=True, validate_by_alias=True)

    username: str = Field(alias="Username")
    secret: str = Field(alias="Secret")


class RegistryCredentials(BaseModel):
    """Credentials as exchanged with the container engine.

    On the wire this is the flat object ``{"ServerURL", "Username", "Secret"}``.
    """

    model_config = ConfigDict(frozen=True, validate_by_name=True, validate_by_alias=True)

    server_url: str = Field(alias="ServerURL", min_length=1)
    username: str = Field(alias="Username")
    secret: str = Field(alias="Secret")

    @property
    def record(self) -> CredentialRecord:
        return CredentialRecord(username=self.username, secret=self.secret)

    @classmethod
    def from_record(cls, server_url: str, record: CredentialRecord) -> RegistryCredentials:
        return cls(server_url=server_url, username=record.username, secret=record.secret)


def _describe(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def decode_map(raw: str) -> SecretMap:
    """Decode the secret value into a URL -> serialized record map.

    Raises:
        FormatError: If ``raw`` is not a JSON object of string to string.
    """
    try:
        return _SECRET_MAP_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise FormatError(f"invalid secret format: {_describe(e)}") from e


def encode_map(secret_map: SecretMap) -> str:
    """Encode a map with sorted keys so identical maps give identical secrets."""
    return json.dumps(secret_map, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def decode_record(entry: str) -> CredentialRecord:
    """Decode one map entry.

    Raises:
        FormatError: If ``entry`` is not a JSON object with string
            ``Username`` and ``Secret`` fields.
    """
    try:
        return CredentialRecord.model_validate_json(entry, by_alias=True, by_name=False)
    except ValidationError as e:
        raise FormatError(f"invalid credential record: {_describe(e)}") from e


def encode_record(record: CredentialRecord) -> str:
    return record.model_dump_json(by_alias=True)


def decode_registry_credentials(raw: str) -> RegistryCredentials:
    """Decode the ``store`` request body.

    Raises:
        FormatError: If ``raw`` lacks a non-empty ``ServerURL`` or the
            ``Username`` / ``Secret`` strings.
    """
    try:
        return RegistryCredentials.model_validate_json(raw, by_alias=True, by_name=False)
    except ValidationError as e:
        raise FormatError(f"invalid credentials: {_describe(e)}") from e


def encode_registry_credentials(credentials: RegistryCredentials) -> str:
    return credentials.model_dump_json(by_alias=True)


def encode_usernames(usernames: dict[str, Any]) -> str:
    """Pretty-print the ``list`` result."""
    return json.dumps(usernames, sort_keys=True, indent=2, ensure_ascii=False)


__all__ = [
    "SecretMap",
    "CredentialRecord",
    "RegistryCredentials",
    "decode_map",
    "encode_map",
    "decode_record",
    "encode_record",
    "decode_registry_credentials",
    "encode_registry_credentials",
    "encode_usernames",
]
