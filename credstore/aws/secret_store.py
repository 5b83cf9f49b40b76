"""AWS Secrets Manager implementation of the SecretStore blueprint."""

from __future__ import annotations

from typing import Any, Callable, Optional

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
)

from credstore.base import SecretStoreBlueprint, SecretValue
from credstore.base.config import HelperConfig
from credstore.base.exceptions import (
    ConfigurationError,
    ConflictError,
    FormatError,
    SecretNotFoundError,
    TransientTransportError,
    TransportError,
)
from credstore.base.logger import cs_logger
from credstore.base.retry import retry


# Error codes worth another attempt with the same client request token
_TRANSIENT_CODES = frozenset({
    "ThrottlingException",
    "Throttling",
    "TooManyRequestsException",
    "RequestLimitExceeded",
    "InternalServiceError",
    "InternalFailure",
    "ServiceUnavailable",
})


def _translate(exc: Exception, action: str, secret_id: str) -> TransportError:
    """Map a botocore exception onto the Credstore hierarchy."""
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code", "")
        if code == "ResourceNotFoundException":
            return SecretNotFoundError(f"Secret '{secret_id}' not found.")
        if code in _TRANSIENT_CODES:
            return TransientTransportError(f"Failed to {action} secret '{secret_id}': {str(exc)}")
    elif isinstance(exc, (BotoConnectionError, HTTPClientError)):
        return TransientTransportError(f"Failed to {action} secret '{secret_id}': {str(exc)}")
    return TransportError(f"Failed to {action} secret '{secret_id}': {str(exc)}")


class SecretStore(SecretStoreBlueprint):
    """AWS Secrets Manager implementation of the credential blob store.

    Reads with ``GetSecretValue`` and writes with ``PutSecretValue``. A
    secret that does not exist yet is created on first write, encrypted
    with ``key_arn`` when one is configured.

    Attributes:
        client: boto3 Secrets Manager client for interacting with the AWS API.
        key_arn: Optional KMS key ARN used when creating the secret.
        max_attempts: Attempts per call for transient failures.
        retry_base_delay: Initial backoff between attempts, in seconds.
    """

    def __init__(self, config: HelperConfig):
        """Initialize the AWS Secrets Manager client.

        Args:
            config: Validated helper configuration. Credentials and region
                left as None are resolved by boto3's default chain.
        """
        try:
            self.client = boto3.client(
                "secretsmanager",
                aws_access_key_id=config.aws_access_key_id,
                aws_secret_access_key=config.aws_secret_access_key,
                aws_session_token=config.aws_session_token,
                region_name=config.region_name,
                endpoint_url=config.endpoint_url,
            )
        except BotoCoreError as e:
            raise ConfigurationError(f"Failed to create Secrets Manager client: {str(e)}") from e
        self.key_arn = config.key_arn
        self.max_attempts = config.max_attempts
        self.retry_base_delay = config.retry_base_delay

    def _retrying(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        return retry(max_attempts=self.max_attempts, base_delay=self.retry_base_delay)(fn)

    def fetch_secret_versioned(self, secret_id: str) -> SecretValue:
        """Retrieve the secret string and its version id.

        Args:
            secret_id: Name or ARN of the secret.

        Returns:
            A :class:`SecretValue` carrying ``SecretString`` and ``VersionId``.

        Raises:
            SecretNotFoundError: If the secret does not exist.
            FormatError: If the secret only has a binary value.
            TransportError: If retrieval fails for any other reason.
        """
        response = self._retrying(self._get_secret_value)(secret_id)
        value = response.get("SecretString")
        if value is None:
            raise FormatError(f"invalid secret format: '{secret_id}' has no string value")
        return SecretValue(value, response.get("VersionId"))

    def _get_secret_value(self, secret_id: str) -> dict:
        cs_logger.debug("fetching secret", secret_id=secret_id, operation="get_secret_value")
        try:
            return self.client.get_secret_value(SecretId=secret_id)
        except (ClientError, BotoCoreError) as e:
            raise _translate(e, "retrieve", secret_id) from e

    def put_secret(
        self,
        secret_id: str,
        value: str,
        idempotency_token: str,
        expected_version: Optional[str] = None,
    ) -> None:
        """Write a new secret version, creating the secret if it is missing.

        Every retry attempt reuses ``idempotency_token`` as the client
        request token so Secrets Manager deduplicates repeated writes.

        Args:
            secret_id: Name or ARN of the secret.
            value: Full serialized credential map.
            idempotency_token: Client request token for this logical write.
            expected_version: Version id observed by the preceding read; when
                set, the write is refused if ``AWSCURRENT`` moved on.

        Raises:
            ConflictError: If the secret changed since ``expected_version``
                or was created concurrently.
            TransportError: If the write fails.
        """
        if expected_version is not None:
            # Checked once, outside the retried put
            current = self._retrying(self._current_version)(secret_id)
            if current != expected_version:
                raise ConflictError(
                    f"Secret '{secret_id}' changed since it was read "
                    f"(expected version {expected_version}, found {current})."
                )
        self._retrying(self._put_secret_value)(
            secret_id, value, idempotency_token, create_missing=expected_version is None
        )

    def _put_secret_value(
        self,
        secret_id: str,
        value: str,
        idempotency_token: str,
        create_missing: bool,
    ) -> None:
        cs_logger.debug("writing secret", secret_id=secret_id, operation="put_secret_value")
        try:
            self.client.put_secret_value(
                SecretId=secret_id,
                SecretString=value,
                ClientRequestToken=idempotency_token,
            )
            return
        except (ClientError, BotoCoreError) as e:
            error = _translate(e, "update", secret_id)
            if not isinstance(error, SecretNotFoundError) or not create_missing:
                raise error from e
        self._create_secret(secret_id, value, idempotency_token)

    def _create_secret(self, secret_id: str, value: str, idempotency_token: str) -> None:
        params: dict[str, Any] = {
            "Name": secret_id,
            "SecretString": value,
            "ClientRequestToken": idempotency_token,
        }
        if self.key_arn:
            params["KmsKeyId"] = self.key_arn
        cs_logger.info("creating secret", secret_id=secret_id, operation="create_secret")
        try:
            self.client.create_secret(**params)
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceExistsException":
                raise ConflictError(f"Secret '{secret_id}' was created concurrently.") from e
            raise _translate(e, "create", secret_id) from e
        except BotoCoreError as e:
            raise _translate(e, "create", secret_id) from e

    def _current_version(self, secret_id: str) -> Optional[str]:
        try:
            response = self.client.describe_secret(SecretId=secret_id)
        except (ClientError, BotoCoreError) as e:
            raise _translate(e, "describe", secret_id) from e
        for version_id, stages in response.get("VersionIdsToStages", {}).items():
            if "AWSCURRENT" in stages:
                return version_id
        return None
