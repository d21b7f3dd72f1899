"""Tests for the HTTP layer: headers, multipart encoding and error mapping."""

import logging

import httpx
import pytest

from bytestashy.core.api_client import APIClient
from bytestashy.core.config import Config
from bytestashy.core.errors import ApiError, ApiErrorKind, AuthRequired, CredentialNotFound
from bytestashy.core.models import SearchQuery, SnippetDraft, SnippetFile, SortOrder
from conftest import parse_multipart

SNIPPET_JSON = {"id": 3, "title": "t", "visibility": "private", "categories": [], "files": []}


def client_for(handler, **kwargs) -> APIClient:
    return APIClient("https://x.tld/", "tok-123", transport=httpx.MockTransport(handler), **kwargs)


@pytest.fixture
def draft():
    return SnippetDraft.build(
        title="Title",
        description="Desc",
        visibility="public",
        categories="zeta,alpha",
        files=[
            SnippetFile(filename="z.py", content="print('z')"),
            SnippetFile(filename="a.txt", content="a"),
            SnippetFile(filename="m.unknownext", content="m"),
        ],
    )


class TestRequests:
    """Test what the client puts on the wire."""

    def test_bearer_header(self):
        """Every request carries the bearer token."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        with client_for(handler) as client:
            client.delete_snippet(3)

        assert seen[0].headers["authorization"] == "Bearer tok-123"
        assert seen[0].method == "DELETE"
        assert seen[0].url == "https://x.tld/snippets/3"

    def test_list_page_query(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"items": [], "page": 2, "page_size": 5, "total": 0})

        with client_for(handler) as client:
            page = client.list_page(2, 5)

        assert dict(seen[0].url.params) == {"page": "2", "page_size": "5"}
        assert page.page_number == 2

    def test_multipart_body_preserves_file_order(self, draft):
        """One part per field and one ordered part per file."""
        captured = {}

        def handler(request):
            captured["fields"], captured["files"] = parse_multipart(request)
            captured["method"] = request.method
            return httpx.Response(201, json=SNIPPET_JSON)

        with client_for(handler) as client:
            snippet = client.create_snippet(draft)

        assert snippet.id == 3
        assert captured["method"] == "POST"
        assert captured["fields"] == {
            "title": ["Title"],
            "description": ["Desc"],
            "visibility": ["public"],
            "categories": ["alpha", "zeta"],
        }
        assert [(name, content) for name, _, content in captured["files"]] == [
            ("z.py", b"print('z')"),
            ("a.txt", b"a"),
            ("m.unknownext", b"m"),
        ]
        assert captured["files"][1][1] == "text/plain"
        assert captured["files"][2][1] == "application/octet-stream"

    def test_update_uses_put(self, draft):
        methods = []

        def handler(request):
            methods.append((request.method, request.url.path))
            return httpx.Response(200, json=SNIPPET_JSON)

        with client_for(handler) as client:
            client.update_snippet(3, draft)

        assert methods == [("PUT", "/snippets/3")]

    def test_search_params(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[SNIPPET_JSON])

        with client_for(handler) as client:
            results = client.search_snippets(SearchQuery(text="foo", sort=SortOrder.ALPHA_DESC, search_code=True))

        assert dict(seen[0].url.params) == {"q": "foo", "sort": "alpha-desc", "search_code": "true"}
        assert [r.id for r in results] == [3]

    def test_token_not_logged(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with client_for(lambda r: httpx.Response(204)) as client:
                client.delete_snippet(1)
        assert "tok-123" not in caplog.text
        assert "tok-123" not in repr(client)


class TestErrorMapping:
    """Test HTTP status and transport failure classification."""

    @pytest.mark.parametrize(
        "status,kind",
        [
            (401, ApiErrorKind.UNAUTHORIZED),
            (404, ApiErrorKind.NOT_FOUND),
            (429, ApiErrorKind.RATE_LIMITED),
            (500, ApiErrorKind.SERVER_ERROR),
            (503, ApiErrorKind.SERVER_ERROR),
            (400, ApiErrorKind.CLIENT_ERROR),
        ],
    )
    def test_status_mapping(self, status, kind):
        with client_for(lambda r: httpx.Response(status, text="boom")) as client:
            with pytest.raises(ApiError) as exc_info:
                client.get_snippet(1)

        assert exc_info.value.kind is kind
        assert exc_info.value.status == status

    def test_server_error_keeps_body(self):
        with client_for(lambda r: httpx.Response(502, text="bad gateway")) as client:
            with pytest.raises(ApiError) as exc_info:
                client.get_snippet(1)
        assert exc_info.value.body == "bad gateway"

    def test_rate_limit_carries_retry_hint_verbatim(self):
        handler = lambda r: httpx.Response(429, headers={"Retry-After": "120"}, text="slow down")  # noqa: E731
        with client_for(handler) as client:
            with pytest.raises(ApiError) as exc_info:
                client.list_page(1, 10)

        assert exc_info.value.retry_after == "120"
        assert "120" in exc_info.value.hint

    def test_connection_failure_is_network(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with client_for(handler) as client:
            with pytest.raises(ApiError) as exc_info:
                client.get_snippet(1)
        assert exc_info.value.kind is ApiErrorKind.NETWORK

    def test_timeout_is_network(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with client_for(handler, timeout=1.5) as client:
            with pytest.raises(ApiError) as exc_info:
                client.get_snippet(1)
        assert exc_info.value.kind is ApiErrorKind.NETWORK
        assert "1.5s" in exc_info.value.message

    def test_malformed_json_is_invalid_response(self):
        with client_for(lambda r: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(ApiError) as exc_info:
                client.get_snippet(1)
        assert exc_info.value.kind is ApiErrorKind.INVALID_RESPONSE

    def test_wrong_shape_is_invalid_response(self):
        with client_for(lambda r: httpx.Response(200, json={"snippets": []})) as client:
            with pytest.raises(ApiError) as exc_info:
                client.list_page(1, 10)
        assert exc_info.value.kind is ApiErrorKind.INVALID_RESPONSE

    def test_no_retry(self):
        """A failed request is surfaced after exactly one attempt."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with client_for(handler) as client:
            with pytest.raises(ApiError):
                client.get_snippet(1)
        assert len(calls) == 1


class TestFromVault:
    def test_builds_from_saved_state(self, vault):
        vault.store("https://x.tld", "tok")
        client = APIClient.from_vault(Config(server_url="https://x.tld"), vault)
        assert client.base_url == "https://x.tld"

    def test_requires_server(self, vault):
        with pytest.raises(AuthRequired):
            APIClient.from_vault(Config(), vault)

    def test_requires_credential(self, vault):
        with pytest.raises(CredentialNotFound):
            APIClient.from_vault(Config(server_url="https://x.tld"), vault)
