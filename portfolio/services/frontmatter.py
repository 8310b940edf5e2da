"""Frontmatter parsing for markdown post files.

A post file opens with a ``---`` line, a block of ``key: value`` lines and a
second ``---`` line; everything after that is the markdown body.

The block grammar is deliberately strict:

- blank lines and ``#`` comment lines are skipped
- every other line is ``key: value``; keys are unique within a block
- scalar values are trimmed and lose one pair of matching quotes
- ``tags`` is empty, ``[]`` or a bracketed list of quoted, non-empty strings
  separated by commas, e.g. ``["rust", 'web dev']``
"""

import logging
import re

from pydantic import ValidationError

from portfolio.models.post import Frontmatter
from portfolio.services.errors import (
    InvalidDate,
    InvalidField,
    MalformedPost,
    MissingDelimiter,
    MissingRequiredField,
)

logger = logging.getLogger(__name__)

DELIMITER = "---"

SCALAR_KEYS = ("title", "date", "description", "excerpt")
SEQUENCE_KEYS = ("tags",)

_LINE_RE = re.compile(r"^(?P<key>[A-Za-z_][A-Za-z0-9_-]*)\s*:\s*(?P<value>.*)$")
_QUOTED = r"""(?:"[^"]*"|'[^']*')"""
_TAG_LIST_RE = re.compile(rf"^\[\s*(?:{_QUOTED}(?:\s*,\s*{_QUOTED})*)?\s*\]$")
_TAG_ITEM_RE = re.compile(r""""([^"]*)"|'([^']*)'""")


def split_frontmatter(text: str, path: str) -> tuple[str, str]:
    """Split a post file into its frontmatter block and markdown body.

    Raises:
        MalformedPost: with ``MissingDelimiter`` if the file does not open
            with a delimiter line or never closes the block.
    """
    lines = text.lstrip("\ufeff").splitlines(keepends=True)

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start == len(lines) or lines[start].rstrip() != DELIMITER:
        raise MalformedPost(path, MissingDelimiter())

    for end in range(start + 1, len(lines)):
        if lines[end].rstrip() == DELIMITER:
            block = "".join(lines[start + 1 : end])
            body = "".join(lines[end + 1 :])
            return block, body

    raise MalformedPost(path, MissingDelimiter())


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].strip()
    return value


def parse_tags(value: str, path: str) -> tuple[str, ...]:
    """Parse a ``tags`` value into an ordered tuple of tag names."""
    value = value.strip()
    if not value:
        return ()
    if not _TAG_LIST_RE.match(value):
        raise MalformedPost(
            path, InvalidField("tags", "expected a bracketed list of quoted strings")
        )

    tags = []
    for match in _TAG_ITEM_RE.finditer(value):
        tag = (match.group(1) if match.group(1) is not None else match.group(2)).strip()
        if not tag:
            raise MalformedPost(path, InvalidField("tags", "empty tag"))
        tags.append(tag)
    return tuple(tags)


def parse_fields(block: str, path: str) -> dict[str, str]:
    """Parse a frontmatter block into a flat key/value mapping."""
    fields: dict[str, str] = {}
    for lineno, raw in enumerate(block.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        match = _LINE_RE.match(line)
        if not match:
            raise MalformedPost(
                path, InvalidField(f"line {lineno}", f"not a key: value pair: {line!r}")
            )

        key = match.group("key")
        if key in fields:
            raise MalformedPost(path, InvalidField(key, "duplicate key"))
        fields[key] = (match.group("value") or "").strip()
    return fields


def parse_frontmatter(block: str, path: str) -> Frontmatter:
    """Validate a frontmatter block into a ``Frontmatter`` record.

    Raises:
        MalformedPost: ``MissingRequiredField`` for an absent or empty
            title, date or description; ``InvalidDate`` for a date that is
            not a real ``YYYY-MM-DD`` day; ``InvalidField`` for grammar errors.
    """
    fields = parse_fields(block, path)

    data: dict[str, object] = {}
    for key, value in fields.items():
        if key in SCALAR_KEYS:
            data[key] = _unquote(value)
        elif key in SEQUENCE_KEYS:
            data[key] = parse_tags(value, path)
        else:
            logger.debug("Ignoring unknown frontmatter key %r in %s", key, path)

    # An empty excerpt means "derive one"
    if data.get("excerpt") == "":
        data.pop("excerpt")

    try:
        return Frontmatter(**data)
    except ValidationError as exc:
        errors = exc.errors()
        # Missing fields outrank a bad date, in title, date, description order
        for error in errors:
            if error["type"] in ("missing", "string_too_short"):
                name = str(error["loc"][0]) if error["loc"] else "frontmatter"
                raise MalformedPost(path, MissingRequiredField(name)) from exc
        if any(error["loc"] and error["loc"][0] == "date" for error in errors):
            raise MalformedPost(path, InvalidDate(str(data.get("date", "")))) from exc
        first = errors[0]
        raise MalformedPost(
            path, InvalidField(str(first["loc"][0]), first["msg"])
        ) from exc


def parse_document(text: str, path: str) -> tuple[Frontmatter, str]:
    """Split and validate a post file, returning its frontmatter and body."""
    block, body = split_frontmatter(text, path)
    return parse_frontmatter(block, path), body
