"""Pytest configuration and shared fixtures."""

import json
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx
import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from bytestashy.core.config import ConfigStore
from bytestashy.core.service import SnippetService
from bytestashy.core.session import Session
from bytestashy.core.settings import Settings
from bytestashy.core.vault import CredentialVault

SERVER_URL = "https://x.tld"
VALID_KEY = "valid-key"


class MemoryKeyring(KeyringBackend):
    """Keyring backend holding passwords in a dict."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.passwords = {}

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise PasswordDeleteError("not found") from None


def parse_multipart(request: httpx.Request) -> tuple[dict, list]:
    """Split a multipart request into form fields and (filename, content_type, raw bytes) files."""
    boundary = request.headers["content-type"].split("boundary=", 1)[1].strip('"').encode()
    body = request.read()

    fields = {}
    files = []
    # first chunk is the empty preamble, last one the closing "--\r\n"
    for chunk in body.split(b"--" + boundary)[1:-1]:
        head, payload = chunk[2:-2].split(b"\r\n\r\n", 1)
        headers = head.decode("utf-8")
        name = re.search(r'name="([^"]*)"', headers).group(1)
        filename = re.search(r'filename="([^"]*)"', headers)
        if filename is not None:
            ctype = re.search(r"Content-Type: (\S+)", headers, re.IGNORECASE)
            files.append((filename.group(1), ctype.group(1) if ctype else None, payload))
        else:
            fields.setdefault(name, []).append(payload.decode("utf-8"))
    return fields, files


class FakeSnippetServer:
    """In-memory ByteStash API served through httpx.MockTransport."""

    def __init__(self, token: str = VALID_KEY):
        self.token = token
        self.snippets = {}
        self.requests = []
        self.next_id = 1
        self.clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        # page number -> (status, headers) to fail with
        self.page_failures = {}
        # (filename, bytes) of every uploaded file, as received
        self.uploads = []

    def tick(self) -> str:
        self.clock += timedelta(minutes=1)
        return self.clock.isoformat()

    def add(self, title, description="", visibility="private", categories=(), files=(), updated_at=None):
        """Seed a snippet directly, bypassing the API."""
        snippet_id = self.next_id
        self.next_id += 1
        stamp = updated_at or self.tick()
        self.snippets[snippet_id] = {
            "id": snippet_id,
            "title": title,
            "description": description,
            "visibility": visibility,
            "categories": list(categories),
            "files": [
                {"filename": name, "content": content, "language": None}
                for name, content in files
            ],
            "created_at": stamp,
            "updated_at": stamp,
        }
        return snippet_id

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"error": "Invalid API key"})

        path = request.url.path
        params = request.url.params

        if path == "/snippets" and request.method == "GET":
            return self._list(int(params["page"]), int(params["page_size"]))
        if path == "/snippets" and request.method == "POST":
            return self._save(None, request)
        if path == "/snippets/search" and request.method == "GET":
            return self._search(params["q"], params.get("search_code") == "true")

        snippet_id = int(path.rsplit("/", 1)[-1])
        if snippet_id not in self.snippets:
            return httpx.Response(404, json={"error": "Snippet not found"})
        if request.method == "GET":
            return httpx.Response(200, json=self.snippets[snippet_id])
        if request.method == "PUT":
            return self._save(snippet_id, request)
        if request.method == "DELETE":
            del self.snippets[snippet_id]
            return httpx.Response(204)
        return httpx.Response(405)

    def _list(self, page: int, page_size: int) -> httpx.Response:
        if page in self.page_failures:
            status, headers = self.page_failures[page]
            return httpx.Response(status, headers=headers, text="failure")
        ordered = [self.snippets[k] for k in sorted(self.snippets)]
        chunk = ordered[(page - 1) * page_size: page * page_size]
        items = [
            {**s, "files": [{"filename": f["filename"]} for f in s["files"]]}
            for s in chunk
        ]
        return httpx.Response(200, json={
            "items": items,
            "page": page,
            "page_size": page_size,
            "total": len(ordered),
        })

    def _save(self, snippet_id, request: httpx.Request) -> httpx.Response:
        fields, files = parse_multipart(request)
        created = snippet_id is None
        if created:
            snippet_id = self.next_id
            self.next_id += 1
        stamp = self.tick()
        previous = self.snippets.get(snippet_id, {})
        self.uploads.extend((name, payload) for name, _, payload in files)
        self.snippets[snippet_id] = {
            "id": snippet_id,
            "title": fields["title"][0],
            "description": fields.get("description", [""])[0],
            "visibility": fields["visibility"][0],
            "categories": fields.get("categories", []),
            "files": [
                {"filename": name, "content": payload.decode("utf-8", errors="replace"), "language": None}
                for name, _, payload in files
            ],
            "created_at": previous.get("created_at", stamp),
            "updated_at": stamp,
        }
        return httpx.Response(201 if created else 200, json=self.snippets[snippet_id])

    def _search(self, text: str, search_code: bool) -> httpx.Response:
        needle = text.lower()
        matches = []
        # newest id first, so clients have to order results themselves
        for s in sorted(self.snippets.values(), key=lambda s: -s["id"]):
            haystack = [s["title"], s["description"]]
            if search_code:
                haystack += [f["content"] for f in s["files"]]
            if any(needle in h.lower() for h in haystack):
                matches.append(s)
        return httpx.Response(200, content=json.dumps(matches).encode(), headers={"content-type": "application/json"})


@pytest.fixture
def memory_keyring():
    return MemoryKeyring()


@pytest.fixture
def vault(memory_keyring):
    return CredentialVault(service="bytestashy-test", backend=memory_keyring)


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "config")


@pytest.fixture
def server():
    return FakeSnippetServer()


@pytest.fixture
def session(store, vault, server):
    with Session(store, vault, Settings(timeout=5.0), transport=server.transport) as s:
        yield s


@pytest.fixture
def logged_in(session, server):
    """A session that went through login; the probe request is forgotten."""
    session.login(SERVER_URL, VALID_KEY)
    server.requests.clear()
    return session


@pytest.fixture
def service(logged_in):
    return SnippetService(logged_in)


@pytest.fixture
def make_file(tmp_path):
    """Write a text file under tmp_path/files and return its path."""
    root = tmp_path / "files"
    root.mkdir()

    def _make(name: str, content: str) -> Path:
        path = root / name
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def platform_keyring(memory_keyring):
    """Install the in-memory backend as the process-wide keyring."""
    previous = keyring.get_keyring()
    keyring.set_keyring(memory_keyring)
    yield memory_keyring
    keyring.set_keyring(previous)
