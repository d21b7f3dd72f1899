"""Error types raised by the bytestashy core."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class BytestashyError(Exception):
    """Base class for every expected failure.

    ``hint`` is a short remedy the UI shows under the message.
    """

    hint: str = ""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint


class ConfigError(BytestashyError):
    """Config file could not be read, parsed or written."""

    hint = "Check the permissions and contents of the config file."


class CredentialError(BytestashyError):
    """Keyring store/retrieve/delete failed."""

    hint = "Make sure a keyring backend (Secret Service, Keychain, Credential Manager) is available."


class CredentialNotFound(CredentialError):
    """No API key stored for the given server."""

    hint = "Run `bytestashy login <url>` to store an API key."


class AuthRequired(BytestashyError):
    """A snippet operation was attempted without a session."""

    hint = "Run `bytestashy login <url>` first."

    def __init__(self, message: str = "Not logged in.", hint: Optional[str] = None):
        super().__init__(message, hint)


class ValidationError(BytestashyError):
    """Input rejected before anything was sent to the server."""

    hint = "Fix the input and try again."


class ApiErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    NETWORK = "network"
    INVALID_RESPONSE = "invalid_response"


_HINTS = {
    ApiErrorKind.UNAUTHORIZED: "The API key was rejected. Run `bytestashy login <url>` to replace it.",
    ApiErrorKind.NOT_FOUND: "Check the snippet id with `bytestashy list`.",
    ApiErrorKind.RATE_LIMITED: "Wait a moment before retrying.",
    ApiErrorKind.SERVER_ERROR: "The server failed to handle the request. Try again later.",
    ApiErrorKind.CLIENT_ERROR: "The server rejected the request.",
    ApiErrorKind.NETWORK: "Check the server URL and your network connection.",
    ApiErrorKind.INVALID_RESPONSE: "The server returned data this client does not understand.",
}


class ApiError(BytestashyError):
    """A request failed, classified by ``kind``."""

    def __init__(
        self,
        kind: ApiErrorKind,
        message: str,
        status: int = 0,
        body: str = "",
        retry_after: Optional[str] = None,
    ):
        hint = _HINTS[kind]
        if kind is ApiErrorKind.RATE_LIMITED and retry_after:
            hint = f"Server asks to retry after: {retry_after}"
        super().__init__(message, hint)
        self.kind = kind
        self.status = status
        self.body = body
        self.retry_after = retry_after

    @classmethod
    def from_status(
        cls,
        status: int,
        body: str,
        retry_after: Optional[str] = None,
    ) -> "ApiError":
        """Classify an HTTP error status."""
        if status == 401:
            return cls(ApiErrorKind.UNAUTHORIZED, "Unauthorized (401): invalid API key.", status, body)
        if status == 404:
            return cls(ApiErrorKind.NOT_FOUND, "Not found (404).", status, body)
        if status == 429:
            return cls(
                ApiErrorKind.RATE_LIMITED,
                "Rate limited (429).",
                status,
                body,
                retry_after=retry_after,
            )
        if status >= 500:
            return cls(ApiErrorKind.SERVER_ERROR, f"Server error: HTTP {status} - {body}", status, body)
        return cls(ApiErrorKind.CLIENT_ERROR, f"Request rejected: HTTP {status} - {body}", status, body)

    @classmethod
    def network(cls, message: str) -> "ApiError":
        return cls(ApiErrorKind.NETWORK, message)

    @classmethod
    def invalid_response(cls, message: str, body: str = "") -> "ApiError":
        return cls(ApiErrorKind.INVALID_RESPONSE, message, body=body)


class ListingAborted(ApiError):
    """A page request failed while walking every page.

    The partial items are discarded; ``last_page`` is the last page that
    was fetched successfully (0 if none) and ``fetched`` the number of
    items it had accumulated.
    """

    def __init__(self, cause: ApiError, last_page: int, fetched: int):
        super().__init__(
            cause.kind,
            f"Listing aborted after page {last_page}: {cause.message}",
            status=cause.status,
            body=cause.body,
            retry_after=cause.retry_after,
        )
        self.cause = cause
        self.last_page = last_page
        self.fetched = fetched
        self.hint = f"{cause.hint} Re-run the listing; it restarts at page 1."
