"""Credential helper CLI.

Implements the container-registry credential helper protocol::

    echo https://index.docker.io/v1/ | docker-credential-secretsmanager get
    echo '{"ServerURL":"…","Username":"…","Secret":"…"}' | docker-credential-secretsmanager store
    echo https://index.docker.io/v1/ | docker-credential-secretsmanager erase
    docker-credential-secretsmanager list

Results go to stdout. Failures are reported on stdout as a single
``error: <message>`` line and exit status 1.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable

from credstore.base.config import load_config
from credstore.base.exceptions import CredstoreError, FormatError, UsageError
from credstore.base.logger import cs_logger
from credstore.codec import (
    RegistryCredentials,
    decode_registry_credentials,
    encode_registry_credentials,
    encode_usernames,
)
from credstore.factory import create_secret_store
from credstore.store import CredentialStore


class _HelperArgumentParser(argparse.ArgumentParser):
    """Parser that reports bad arguments as :class:`UsageError` instead of exiting 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the credential helper.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = _HelperArgumentParser(
        add_help=False,
        prog="docker-credential-secretsmanager",
        description="Container registry credential helper backed by AWS Secrets Manager",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help="Helper command: get, store, erase or list",
    )
    return parser


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except UnicodeDecodeError as e:
        raise FormatError(f"stream did not contain valid UTF-8: {e}") from e


def _read_url() -> str:
    return _read_stdin().rstrip()


def _get(store: CredentialStore) -> None:
    url = _read_url()
    record = store.get(url)
    print(encode_registry_credentials(RegistryCredentials.from_record(url, record)))


def _store(store: CredentialStore) -> None:
    credentials = decode_registry_credentials(_read_stdin())
    store.store(credentials.record, credentials.server_url)


def _erase(store: CredentialStore) -> None:
    store.erase(_read_url())


def _list(store: CredentialStore) -> None:
    print(encode_usernames(store.list()))


_COMMANDS: dict[str, Callable[[CredentialStore], None]] = {
    "get": _get,
    "store": _store,
    "erase": _erase,
    "list": _list,
}


def run(command: str | None) -> None:
    """Execute one helper command against the configured secret.

    Args:
        command: One of the ``_COMMANDS`` names, or None when missing.

    Raises:
        UsageError: If ``command`` is missing.
        CredstoreError: If the command fails.
    """
    if not command:
        raise UsageError("invalid usage!")
    handler = _COMMANDS[command]

    config = load_config()
    cs_logger.set_level(config.log_level)
    store = CredentialStore(
        create_secret_store("aws", config),
        config.secret_name,
        optimistic_lock=config.optimistic_lock,
    )
    cs_logger.debug("running command", command=command, secret_id=config.secret_name)
    handler(store)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Unknown commands and options exit with status 1 and no output; every
    other failure prints ``error: <message>`` on stdout first.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    try:
        ns = _build_parser().parse_args(argv)
    except UsageError:
        sys.exit(1)

    if ns.command and ns.command not in _COMMANDS:
        sys.exit(1)

    try:
        run(ns.command)
    except CredstoreError as e:
        cs_logger.error(f"{ns.command or 'helper'} failed: {e}", command=ns.command)
        print(f"error: {e}")
        sys.exit(1)
    except Exception as e:
        cs_logger.error(f"{ns.command} failed unexpectedly: {e}", command=ns.command, exc_info=True)
        print(f"error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
