"""
Credstore exception hierarchy.

Every failure the helper can report inherits from :class:`CredstoreError`
so the CLI can turn it into a single ``error: <message>`` line.
Secret store faults have their own branch rooted at :class:`TransportError`.
"""


# ── Base ──────────────────────────────────────────────────────────────
class CredstoreError(Exception):
    """Root exception for all Credstore errors."""


# ── Credentials ───────────────────────────────────────────────────────
class FormatError(CredstoreError):
    """Secret blob or one of its entries is not in the expected format."""


class NotFoundError(CredstoreError):
    """No credentials stored for the requested server URL."""


class ConflictError(CredstoreError):
    """Secret changed between read and write (optimistic lock only)."""


# ── Invocation ────────────────────────────────────────────────────────
class UsageError(CredstoreError):
    """Missing or unknown command."""


class ConfigurationError(CredstoreError):
    """Environment configuration is missing or invalid."""


# ── Secret store ──────────────────────────────────────────────────────
class TransportError(CredstoreError):
    """Failure communicating with the secret store."""


class TransientTransportError(TransportError):
    """Throttling, service-side or connection fault worth retrying."""


class SecretNotFoundError(TransportError):
    """The remote secret itself does not exist."""
