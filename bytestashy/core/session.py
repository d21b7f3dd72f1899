"""Login state: which server we talk to and whether we hold a key for it."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from bytestashy.core.api_client import APIClient
from bytestashy.core.config import Config, ConfigStore
from bytestashy.core.errors import (
    AuthRequired,
    ConfigError,
    CredentialError,
    CredentialNotFound,
    ValidationError,
)
from bytestashy.core.settings import Settings
from bytestashy.core.vault import CredentialVault, normalize_server_url

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


def validate_server_url(server_url: str) -> str:
    """Return the normalized URL, or raise if it is not an http(s) URL with a host."""
    candidate = normalize_server_url(server_url)
    try:
        url = httpx.URL(candidate)
    except httpx.InvalidURL as e:
        raise ValidationError(f"Invalid URL: {server_url} ({e})") from e
    if url.scheme not in ("http", "https"):
        raise ValidationError(
            f"URL must use http or https scheme: {server_url}",
            hint="Make sure it starts with 'http://' or 'https://'.",
        )
    if not url.host:
        raise ValidationError(f"URL has no host: {server_url}")
    return candidate


class Session:
    """Owns the config store, the vault and the authenticated API client.

    Starts Unauthenticated; :meth:`restore` or :meth:`login` move it to
    Authenticated, :meth:`logout` moves it back.
    """

    def __init__(
        self,
        store: ConfigStore,
        vault: CredentialVault,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.store = store
        self.vault = vault
        self.settings = settings or Settings()
        self._transport = transport
        self.config = Config()
        self.state = SessionState.UNAUTHENTICATED
        self._client: Optional[APIClient] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def restore(self) -> SessionState:
        """Resume from the saved config and keyring entry, if both exist."""
        self.config = self.store.load()
        if not self.config.server_url:
            return self.state

        try:
            client = APIClient.from_vault(
                self.config,
                self.vault,
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        except CredentialNotFound:
            logger.debug("No API key stored for %s", self.config.server_url)
            return self.state

        self._set_client(client)
        return self.state

    def require_client(self) -> APIClient:
        """The authenticated client; raises AuthRequired without touching the network."""
        if not self.is_authenticated or self._client is None:
            raise AuthRequired()
        return self._client

    def login(self, server_url: str, secret: str) -> None:
        """Validate ``secret`` against ``server_url`` and persist both.

        The key is checked with a one-item listing request. Nothing is
        saved, and the state does not change, unless that request succeeds
        and both the keyring and the config file take the new values.
        """
        url = validate_server_url(server_url)
        if not secret or not secret.strip():
            raise ValidationError("API key must not be empty")

        config = self.store.load()

        secret = secret.strip()
        updated = config.model_copy(update={"server_url": url})
        probe = APIClient(url, secret, timeout=self.settings.timeout, transport=self._transport)
        try:
            probe.list_page(1, 1)
            self.vault.store(url, secret)
            try:
                self.store.save(updated)
            except ConfigError:
                self._forget_key(url)
                raise
        except Exception:
            probe.close()
            raise

        self.config = updated
        self._set_client(probe)
        logger.info("Logged in to %s", url)

    def logout(self) -> None:
        """Forget the API key of the current server. The server URL is kept."""
        server_url = self.config.server_url or self.store.load().server_url
        if server_url:
            try:
                self.vault.delete(server_url)
            except CredentialNotFound:
                logger.debug("No API key stored for %s", server_url)
        self.close()
        self.state = SessionState.UNAUTHENTICATED
        logger.info("Logged out")

    def update_config(self, **changes) -> Config:
        """Apply changes to the saved config, e.g. ``default_page_size=25``."""
        current = self.store.load()
        try:
            updated = Config.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid config value: {e.errors()[0]['msg']}") from None
        self.store.save(updated)
        self.config = updated
        return updated

    def _forget_key(self, server_url: str) -> None:
        try:
            self.vault.delete(server_url)
        except CredentialError as e:
            logger.warning("Could not remove API key for %s: %s", server_url, e.message)

    def _set_client(self, client: APIClient) -> None:
        self.close()
        self._client = client
        self.state = SessionState.AUTHENTICATED
