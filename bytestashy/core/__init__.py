"""Core components - configuration, keyring, API client, session and snippet service."""

from bytestashy.core.api_client import APIClient
from bytestashy.core.config import Config, ConfigStore
from bytestashy.core.service import SnippetService
from bytestashy.core.session import Session, SessionState
from bytestashy.core.vault import CredentialVault

__all__ = [
    "APIClient",
    "Config",
    "ConfigStore",
    "CredentialVault",
    "Session",
    "SessionState",
    "SnippetService",
]
