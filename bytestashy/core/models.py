"""Domain types shared by the API client, the service layer and the commands."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from bytestashy.core.errors import ValidationError


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: Union[str, bool, "Visibility"]) -> "Visibility":
        """Accept enum values, booleans (True = public) and yes/no answers."""
        if isinstance(value, Visibility):
            return value
        if isinstance(value, bool):
            return cls.PUBLIC if value else cls.PRIVATE
        normalized = str(value).strip().lower()
        if normalized in ("public", "yes", "y", "true", "1"):
            return cls.PUBLIC
        if normalized in ("private", "no", "n", "false", "0", ""):
            return cls.PRIVATE
        raise ValidationError(f"Unknown visibility: {value!r} (expected public or private)")


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    ALPHA_ASC = "alpha-asc"
    ALPHA_DESC = "alpha-desc"


class SnippetFile(BaseModel):
    """One file (ByteStash calls it a fragment) of a snippet."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    filename: str = Field(validation_alias=AliasChoices("filename", "file_name"))
    content: str = Field(default="", validation_alias=AliasChoices("content", "code"))
    language: Optional[str] = None
    # exact bytes of a local file, sent as-is on upload
    data: Optional[bytes] = Field(default=None, exclude=True, repr=False)

    @property
    def payload(self) -> bytes:
        return self.data if self.data is not None else self.content.encode("utf-8")

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SnippetFile":
        """Read a local file for upload.

        Rejects paths containing ``..`` components, missing files and
        anything that is not a regular file. The bytes are uploaded
        unchanged; ``content`` is only a decoded view for display.
        """
        raw = str(path)
        candidate = Path(raw)
        if ".." in candidate.parts:
            raise ValidationError(f"Refusing path with '..' component: {raw}")
        if not candidate.exists():
            raise ValidationError(f"File does not exist: {raw}")
        if not candidate.is_file():
            raise ValidationError(f"Not a regular file: {raw}")
        try:
            data = candidate.read_bytes()
        except OSError as e:
            raise ValidationError(f"Couldn't read file: {raw} ({e})") from e
        return cls(
            filename=candidate.name,
            content=data.decode("utf-8", errors="replace"),
            data=data,
        )


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SnippetSummary(BaseModel):
    """A snippet as it appears in listings; file bodies may be empty."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    title: str
    description: str = ""
    visibility: Visibility = Visibility.PRIVATE
    categories: frozenset[str] = frozenset()
    files: tuple[SnippetFile, ...] = Field(
        default=(),
        validation_alias=AliasChoices("files", "fragments"),
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_visibility(cls, data: Any) -> Any:
        # ByteStash reports is_public instead of visibility
        if isinstance(data, dict) and "visibility" not in data and "is_public" in data:
            data = dict(data)
            data["visibility"] = Visibility.parse(bool(data.pop("is_public")))
        return data

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _utc(value)

    @property
    def filenames(self) -> list[str]:
        return [f.filename for f in self.files]


class Snippet(SnippetSummary):
    """A snippet with full file contents, as returned by get/create/update."""


class Page(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    items: tuple[SnippetSummary, ...] = ()
    page_number: int = Field(validation_alias=AliasChoices("page", "page_number"))
    page_size: int
    total: int


class SearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    sort: SortOrder = SortOrder.NEWEST
    search_code: bool = False

    @field_validator("text")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("search text must not be empty")
        return value

    @classmethod
    def build(cls, text: str, sort: Optional[str] = None, search_code: bool = False) -> "SearchQuery":
        """Build from raw CLI input, raising our ValidationError."""
        try:
            return cls(text=text, sort=sort or SortOrder.NEWEST, search_code=search_code)
        except PydanticValidationError as e:
            raise ValidationError(_describe(e)) from None


def parse_categories(value: Union[str, Iterable[str], None]) -> frozenset[str]:
    """Split ``"a, b,c"`` (or an iterable of such strings) into a set of names."""
    if value is None:
        return frozenset()
    chunks = [value] if isinstance(value, str) else list(value)
    return frozenset(
        part.strip()
        for chunk in chunks
        for part in chunk.split(",")
        if part.strip()
    )


class SnippetDraft(BaseModel):
    """Validated input for create and update.

    Update uses the draft as a full replacement: whatever ``files`` holds
    becomes the snippet's entire file set.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    visibility: Visibility = Visibility.PRIVATE
    categories: frozenset[str] = frozenset()
    files: tuple[SnippetFile, ...]

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title is required")
        return value

    @field_validator("files")
    @classmethod
    def _files_required(cls, value: tuple[SnippetFile, ...]) -> tuple[SnippetFile, ...]:
        if not value:
            raise ValueError("provide at least one file")
        return value

    @classmethod
    def build(
        cls,
        title: str,
        files: Iterable[Union[SnippetFile, str, Path]],
        description: str = "",
        visibility: Union[str, bool, Visibility] = Visibility.PRIVATE,
        categories: Union[str, Iterable[str], None] = None,
    ) -> "SnippetDraft":
        """Normalize loosely-typed prompt/CLI input into a draft.

        Paths in ``files`` are read from disk in the order given.
        """
        loaded = tuple(
            f if isinstance(f, SnippetFile) else SnippetFile.from_path(f)
            for f in files
        )
        try:
            return cls(
                title=title or "",
                description=description or "",
                visibility=Visibility.parse(visibility),
                categories=parse_categories(categories),
                files=loaded,
            )
        except PydanticValidationError as e:
            raise ValidationError(_describe(e)) from None

    def form_fields(self) -> dict[str, Union[str, list[str]]]:
        """Multipart text fields; categories are sent one part each, sorted."""
        return {
            "title": self.title,
            "description": self.description,
            "visibility": self.visibility.value,
            "categories": sorted(self.categories),
        }


def _describe(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "input"
        msg = item.get("msg", "invalid value")
        parts.append(f"{loc}: {msg.removeprefix('Value error, ')}")
    return "; ".join(parts)
