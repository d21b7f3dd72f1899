"""API key storage in the OS keyring."""

from __future__ import annotations

import logging
from typing import Optional

import keyring
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, PasswordDeleteError

from bytestashy.core.errors import CredentialError, CredentialNotFound

logger = logging.getLogger(__name__)

DEFAULT_SERVICE = "bytestashy"


def normalize_server_url(server_url: str) -> str:
    return server_url.strip().rstrip("/")


class CredentialVault:
    """One API key per server URL, held by a keyring backend.

    The secret never leaves this class except as the return value of
    :meth:`retrieve`; it is not logged and not part of ``repr()``.
    """

    def __init__(self, service: str = DEFAULT_SERVICE, backend: Optional[KeyringBackend] = None):
        self.service = service
        self._backend = backend

    def __repr__(self) -> str:
        return f"CredentialVault(service={self.service!r})"

    @property
    def backend(self) -> KeyringBackend:
        """Lazily resolve the platform keyring."""
        if self._backend is None:
            self._backend = keyring.get_keyring()
        return self._backend

    def store(self, server_url: str, secret: str) -> None:
        key = normalize_server_url(server_url)
        try:
            self.backend.set_password(self.service, key, secret)
        except KeyringError as e:
            raise CredentialError(f"Couldn't store API key for {key}: {e}") from e
        logger.debug("Stored API key for %s", key)

    def retrieve(self, server_url: str) -> str:
        key = normalize_server_url(server_url)
        try:
            secret = self.backend.get_password(self.service, key)
        except KeyringError as e:
            raise CredentialError(f"Couldn't read API key for {key}: {e}") from e
        if secret is None:
            raise CredentialNotFound(f"No API key stored for {key}")
        return secret

    def delete(self, server_url: str) -> None:
        key = normalize_server_url(server_url)
        try:
            self.backend.delete_password(self.service, key)
        except PasswordDeleteError as e:
            raise CredentialNotFound(f"No API key stored for {key}") from e
        except KeyringError as e:
            raise CredentialError(f"Couldn't delete API key for {key}: {e}") from e
        logger.debug("Deleted API key for %s", key)
