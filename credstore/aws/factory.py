"""AWS provider factory.

Maps service names to their AWS SDK implementations.
``SERVICE_REGISTRY`` is consumed by :func:`credstore.factory.create_secret_store`.
"""

from credstore.aws.secret_store import SecretStore


# Service registry for AWS
SERVICE_REGISTRY: dict[str, type] = {
    "secret_store": SecretStore,
}
