"""Tests for domain models and input normalization."""

from datetime import timezone

import pytest

from bytestashy.core.errors import ValidationError
from bytestashy.core.models import (
    Page,
    SearchQuery,
    Snippet,
    SnippetDraft,
    SnippetFile,
    SortOrder,
    Visibility,
    parse_categories,
)


class TestSnippetParsing:
    """Test parsing server JSON into Snippet."""

    def test_bytestash_field_names(self):
        """is_public, fragments, file_name and code are understood."""
        snippet = Snippet.model_validate({
            "id": 7,
            "title": "hello",
            "description": None,
            "is_public": True,
            "categories": ["python", "cli"],
            "fragments": [{"file_name": "a.py", "code": "print(1)", "language": "python"}],
            "updated_at": "2024-03-01 10:00:00",
        })

        assert snippet.visibility is Visibility.PUBLIC
        assert snippet.description == ""
        assert snippet.categories == {"python", "cli"}
        assert snippet.files == (SnippetFile(filename="a.py", content="print(1)", language="python"),)

    def test_naive_timestamps_are_utc(self):
        snippet = Snippet.model_validate({"id": 1, "title": "t", "updated_at": "2024-03-01T10:00:00"})
        assert snippet.updated_at.tzinfo == timezone.utc

    def test_page_accepts_page_field(self):
        page = Page.model_validate({"items": [{"id": 1, "title": "t"}], "page": 2, "page_size": 5, "total": 6})
        assert page.page_number == 2
        assert [i.id for i in page.items] == [1]


class TestVisibility:
    @pytest.mark.parametrize("raw", ["public", "PUBLIC", "yes", "y", True])
    def test_public_answers(self, raw):
        assert Visibility.parse(raw) is Visibility.PUBLIC

    @pytest.mark.parametrize("raw", ["private", "no", "", False])
    def test_private_answers(self, raw):
        assert Visibility.parse(raw) is Visibility.PRIVATE

    def test_unknown_value(self):
        with pytest.raises(ValidationError):
            Visibility.parse("friends-only")


class TestParseCategories:
    def test_comma_separated(self):
        """Whitespace and empty entries are dropped."""
        assert parse_categories(" python, cli,,python ") == frozenset({"python", "cli"})

    def test_iterable_and_none(self):
        assert parse_categories(["a,b", "c"]) == frozenset({"a", "b", "c"})
        assert parse_categories(None) == frozenset()


class TestSnippetFileFromPath:
    def test_reads_name_and_content(self, make_file):
        path = make_file("hello.py", "print('hi')")
        f = SnippetFile.from_path(path)
        assert f.filename == "hello.py"
        assert f.content == "print('hi')"

    def test_missing_file(self):
        with pytest.raises(ValidationError, match="File does not exist"):
            SnippetFile.from_path("/nonexistent/file.txt")

    def test_path_traversal_rejected(self):
        """Paths with '..' components are refused before touching the disk."""
        with pytest.raises(ValidationError, match=r"\.\."):
            SnippetFile.from_path("../../../etc/passwd")

    def test_directory_rejected(self, tmp_path):
        with pytest.raises(ValidationError, match="Not a regular file"):
            SnippetFile.from_path(tmp_path)

    def test_bytes_kept_verbatim(self, tmp_path):
        """CRLF endings and non-UTF-8 bytes are read without translation."""
        crlf = tmp_path / "win.txt"
        crlf.write_bytes(b"line1\r\nline2\r\n")
        latin = tmp_path / "cafe.txt"
        latin.write_bytes(b"caf\xe9")

        assert SnippetFile.from_path(crlf).payload == b"line1\r\nline2\r\n"
        assert SnippetFile.from_path(latin).payload == b"caf\xe9"
        assert SnippetFile.from_path(latin).content == "caf\ufffd"

    def test_payload_of_server_file_is_utf8(self):
        assert SnippetFile(filename="a", content="café").payload == "café".encode("utf-8")


class TestSnippetDraft:
    """Test normalizing loose input into a draft."""

    def test_build_normalizes_input(self, make_file):
        a = make_file("a.py", "A")
        b = make_file("b.md", "B")

        draft = SnippetDraft.build(
            title="  My snippet ",
            files=[b, a],
            visibility="yes",
            categories="x, y",
        )

        assert draft.title == "My snippet"
        assert draft.visibility is Visibility.PUBLIC
        assert draft.categories == {"x", "y"}
        assert [f.filename for f in draft.files] == ["b.md", "a.py"]

    def test_title_required(self):
        with pytest.raises(ValidationError, match="title"):
            SnippetDraft.build(title="   ", files=[SnippetFile(filename="a", content="")])

    def test_files_required(self):
        with pytest.raises(ValidationError, match="at least one file"):
            SnippetDraft.build(title="t", files=[])

    def test_form_fields(self):
        """Categories are sent sorted, visibility as its string value."""
        draft = SnippetDraft.build(
            title="t",
            description="d",
            categories="b,a",
            files=[SnippetFile(filename="a", content="")],
        )
        assert draft.form_fields() == {
            "title": "t",
            "description": "d",
            "visibility": "private",
            "categories": ["a", "b"],
        }


class TestSearchQuery:
    def test_defaults_to_newest(self):
        query = SearchQuery.build("needle")
        assert query.sort is SortOrder.NEWEST
        assert query.search_code is False

    def test_unknown_sort(self):
        with pytest.raises(ValidationError):
            SearchQuery.build("needle", sort="random")

    def test_empty_text(self):
        with pytest.raises(ValidationError):
            SearchQuery.build("  ")
