"""
Pydantic configuration model for the credential helper.

The helper is launched by the container engine with nothing but a
command name, so every setting is resolved from the environment at
startup and validated before any network call is made.
"""

from __future__ import annotations

import os
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from credstore.base.exceptions import ConfigurationError


# Field -> environment variables, first non-empty one wins
_ENV_MAP: dict[str, tuple[str, ...]] = {
    "secret_name": ("DOCKER_SECRETSMANAGER_NAME",),
    "key_arn": ("DOCKER_SECRETSMANAGER_KEY_ARN",),
    "aws_access_key_id": ("AWS_ACCESS_KEY_ID",),
    "aws_secret_access_key": ("AWS_SECRET_ACCESS_KEY",),
    "aws_session_token": ("AWS_SESSION_TOKEN",),
    "region_name": ("AWS_REGION", "AWS_DEFAULT_REGION"),
    "endpoint_url": ("DOCKER_SECRETSMANAGER_ENDPOINT_URL",),
    "max_attempts": ("DOCKER_SECRETSMANAGER_MAX_ATTEMPTS",),
    "retry_base_delay": ("DOCKER_SECRETSMANAGER_RETRY_DELAY",),
    "optimistic_lock": ("DOCKER_SECRETSMANAGER_OPTIMISTIC_LOCK",),
    "log_level": ("DOCKER_SECRETSMANAGER_LOG_LEVEL",),
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class HelperConfig(BaseModel):
    """Configuration for the Secrets Manager credential helper.

    Values are resolved in order:
    1. Explicit values passed to the model.
    2. Environment variables (DOCKER_SECRETSMANAGER_NAME, AWS_REGION, ...).
    3. Defaults. AWS credentials and region are left as None so boto3 can fall
       back to its own credential chain (instance metadata, ~/.aws/credentials, etc.).
    """

    model_config = ConfigDict(extra="forbid")

    secret_name: str = Field(min_length=1, description="Name or ARN of the secret holding all credentials")
    key_arn: str | None = Field(default=None, description="KMS key used when the secret is created")
    aws_access_key_id: str | None = Field(default=None, description="AWS access key ID")
    aws_secret_access_key: str | None = Field(default=None, description="AWS secret access key")
    aws_session_token: str | None = Field(default=None, description="AWS session token")
    region_name: str | None = Field(default=None, description="AWS region (e.g. 'us-east-1')")
    endpoint_url: str | None = Field(default=None, description="Override for the Secrets Manager endpoint")
    max_attempts: int = Field(default=3, ge=1, description="Attempts per secret store call")
    retry_base_delay: float = Field(default=0.5, ge=0, description="Initial retry delay in seconds")
    optimistic_lock: bool = Field(
        default=False, description="Refuse writes when the secret changed since it was read"
    )
    log_level: str = Field(default="WARNING", description="Level for the stderr logger")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing settings."""
        for field, env_vars in _ENV_MAP.items():
            if values.get(field) not in (None, ""):
                continue
            for env_var in env_vars:
                env_value = os.environ.get(env_var)
                if env_value:
                    values[field] = env_value
                    break
        return values

    @model_validator(mode="after")
    def normalize_log_level(self) -> HelperConfig:
        """Upper-case the log level and reject unknown names."""
        level = self.log_level.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        self.log_level = level
        return self


def load_config(overrides: dict[str, Any] | None = None) -> HelperConfig:
    """Validate and return the helper configuration.

    Args:
        overrides: Explicit values taking precedence over the environment.

    Returns:
        A validated :class:`HelperConfig`.

    Raises:
        ConfigurationError: If a required setting is missing or invalid.
    """
    try:
        return HelperConfig(**dict(overrides or {}))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"invalid configuration: {problems}") from e


__all__ = [
    "HelperConfig",
    "load_config",
]
