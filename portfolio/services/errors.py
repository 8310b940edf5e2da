"""Errors raised and collected while loading blog posts.

``DirectoryUnreadable`` aborts a whole load. ``MalformedPost`` and
``MarkdownRenderError`` are per-file: the loader collects them next to the
posts that did load and lets the caller decide what to do.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MissingDelimiter:
    """The file has no ``---`` frontmatter block."""

    def __str__(self) -> str:
        return "missing frontmatter delimiter"


@dataclass(frozen=True)
class MissingRequiredField:
    name: str

    def __str__(self) -> str:
        return f"missing required field '{self.name}'"


@dataclass(frozen=True)
class InvalidDate:
    value: str

    def __str__(self) -> str:
        return f"invalid date '{self.value}' (expected YYYY-MM-DD)"


@dataclass(frozen=True)
class DuplicateSlug:
    slug: str
    first_path: str = ""

    def __str__(self) -> str:
        if self.first_path:
            return f"duplicate slug '{self.slug}' (already used by {self.first_path})"
        return f"duplicate slug '{self.slug}'"


@dataclass(frozen=True)
class InvalidField:
    name: str
    detail: str

    def __str__(self) -> str:
        return f"invalid field '{self.name}': {self.detail}"


@dataclass(frozen=True)
class UnreadableFile:
    detail: str

    def __str__(self) -> str:
        return f"unreadable file: {self.detail}"


MalformedReason = (
    MissingDelimiter
    | MissingRequiredField
    | InvalidDate
    | DuplicateSlug
    | InvalidField
    | UnreadableFile
)


class PostLoadError(Exception):
    """Base class for post loading errors."""

    kind = "error"

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

    def to_dict(self) -> dict:
        return {"path": self.path, "kind": self.kind, "message": self.message}


class DirectoryUnreadable(PostLoadError):
    """The posts directory is missing or cannot be listed."""

    kind = "directory_unreadable"

    def __init__(self, path: str, detail: str = "") -> None:
        super().__init__(path, detail or "directory is not readable")
        self.detail = detail


class MalformedPost(PostLoadError):
    """A single markdown file failed to parse."""

    kind = "malformed_post"

    def __init__(self, path: str, reason: MalformedReason) -> None:
        super().__init__(path, str(reason))
        self.reason = reason

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MalformedPost):
            return NotImplemented
        return self.path == other.path and self.reason == other.reason

    def __hash__(self) -> int:
        return hash((self.path, self.reason))

    def __repr__(self) -> str:
        return f"MalformedPost({self.path!r}, {self.reason!r})"


class MarkdownRenderError(PostLoadError):
    """The markdown converter produced no output for a file."""

    kind = "markdown_render_error"

    def __init__(self, path: str, detail: str = "") -> None:
        super().__init__(path, detail or "markdown could not be rendered")
        self.detail = detail
