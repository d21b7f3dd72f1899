"""API Client for communicating with a ByteStash server."""

from __future__ import annotations

import logging
import mimetypes
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError

from bytestashy import __version__
from bytestashy.core.config import Config
from bytestashy.core.errors import ApiError, AuthRequired
from bytestashy.core.models import Page, SearchQuery, Snippet, SnippetDraft
from bytestashy.core.vault import CredentialVault

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_SNIPPET_LIST = TypeAdapter(list[Snippet])


class APIClient:
    """HTTP client for the ByteStash snippet API.

    Every request is authenticated with ``Authorization: Bearer <token>``.
    Failures are raised as :class:`ApiError`; nothing is retried.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_vault(
        cls,
        config: Config,
        vault: CredentialVault,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "APIClient":
        """Build a client from the saved server URL and its keyring entry."""
        if not config.server_url:
            raise AuthRequired("No server configured.")
        token = vault.retrieve(config.server_url)
        return cls(config.server_url, token, timeout=timeout, transport=transport)

    def __repr__(self) -> str:
        return f"APIClient(base_url={self.base_url!r})"

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Accept": "application/json",
                    "User-Agent": f"bytestashy/{__version__}",
                },
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        draft: Optional[SnippetDraft] = None,
    ) -> httpx.Response:
        """Send one request and classify the outcome.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path, relative to the base URL
            params: Query parameters
            draft: Encoded as a multipart body when given

        Raises:
            ApiError: On transport failure or any status >= 400
        """
        kwargs: dict[str, Any] = {"params": params}
        if draft is not None:
            kwargs["data"] = draft.form_fields()
            kwargs["files"] = encode_files(draft)

        logger.debug("API request %s %s", method, endpoint)
        try:
            response = self.client.request(method, endpoint, **kwargs)
        except httpx.TimeoutException:
            raise ApiError.network(
                f"Request timed out after {self.timeout:g}s ({method} {endpoint})"
            ) from None
        except httpx.TransportError as e:
            raise ApiError.network(
                f"Connection to {self.base_url} failed: {type(e).__name__}: {e}"
            ) from e

        logger.debug("API response %s %s -> %s", method, endpoint, response.status_code)

        if response.status_code >= 400:
            raise ApiError.from_status(
                response.status_code,
                response.text,
                retry_after=response.headers.get("Retry-After"),
            )
        return response

    def _parse(self, response: httpx.Response, model: type[T]) -> T:
        try:
            return model.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise ApiError.invalid_response(
                f"Unexpected {model.__name__} payload: {e.error_count()} error(s)",
                body=response.text,
            ) from e

    # Snippets
    def create_snippet(self, draft: SnippetDraft) -> Snippet:
        """Upload a new snippet (multipart POST)."""
        return self._parse(self._request("POST", "/snippets", draft=draft), Snippet)

    def list_page(self, page: int, page_size: int) -> Page:
        """Fetch one page of snippet summaries."""
        response = self._request("GET", "/snippets", params={"page": page, "page_size": page_size})
        return self._parse(response, Page)

    def get_snippet(self, snippet_id: int) -> Snippet:
        """Fetch a snippet including file contents."""
        return self._parse(self._request("GET", f"/snippets/{snippet_id}"), Snippet)

    def update_snippet(self, snippet_id: int, draft: SnippetDraft) -> Snippet:
        """Replace a snippet entirely (multipart PUT)."""
        return self._parse(self._request("PUT", f"/snippets/{snippet_id}", draft=draft), Snippet)

    def delete_snippet(self, snippet_id: int) -> None:
        self._request("DELETE", f"/snippets/{snippet_id}")

    def search_snippets(self, query: SearchQuery) -> list[Snippet]:
        response = self._request(
            "GET",
            "/snippets/search",
            params={
                "q": query.text,
                "sort": query.sort.value,
                "search_code": "true" if query.search_code else "false",
            },
        )
        try:
            return _SNIPPET_LIST.validate_json(response.content)
        except PydanticValidationError as e:
            raise ApiError.invalid_response(
                f"Unexpected search payload: {e.error_count()} error(s)",
                body=response.text,
            ) from e


def encode_files(draft: SnippetDraft) -> list[tuple[str, tuple[str, bytes, str]]]:
    """One ``files`` part per file, in the order the draft holds them."""
    parts = []
    for f in draft.files:
        content_type = mimetypes.guess_type(f.filename)[0] or "application/octet-stream"
        parts.append(("files", (f.filename, f.payload, content_type)))
    return parts
