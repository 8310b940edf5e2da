"""Markdown rendering and plain-text helpers for post bodies."""

import html
import math
import re

from markdown_it import MarkdownIt

# CommonMark plus GFM tables and strikethrough. Raw HTML passes through.
_md = MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 200

_PRE_RE = re.compile(r"<pre\b.*?</pre>", re.DOTALL | re.IGNORECASE)
_HIDDEN_RE = re.compile(
    r"<(script|style)\b.*?</\1\s*>|<!--.*?-->", re.DOTALL | re.IGNORECASE
)
_BLOCK_TAG_RE = re.compile(
    r"</?(?:p|div|h[1-6]|li|ul|ol|blockquote|pre|table|thead|tbody|tr|td|th"
    r"|br|hr|section|article|header|footer|figure|figcaption|dl|dt|dd)\b[^>]*>",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_SLUG_SEP_RE = re.compile(r"[\W_]+")


def render_markdown(text: str) -> str:
    """Render a CommonMark body to HTML.

    Fenced code keeps its info string as ``class="language-<lang>"`` so a
    client-side highlighter can pick it up.
    """
    return _md.render(text)


def plain_text(rendered: str, *, include_code: bool = True) -> str:
    """Strip tags from rendered HTML and collapse whitespace.

    Block-level tags become word breaks; inline tags are removed outright so
    ``<strong>Bold</strong>ly`` stays one word. Script and style bodies and
    HTML comments are dropped.
    """
    rendered = _HIDDEN_RE.sub(" ", rendered)
    if not include_code:
        rendered = _PRE_RE.sub(" ", rendered)
    text = _BLOCK_TAG_RE.sub(" ", rendered)
    text = html.unescape(_TAG_RE.sub("", text))
    return _WS_RE.sub(" ", text).strip()


def slugify(title: str) -> str:
    """Lowercase *title* and join its alphanumeric runs with single hyphens.

    >>> slugify("Hello, World!")
    'hello-world'
    """
    return _SLUG_SEP_RE.sub("-", title.lower()).strip("-")


def reading_time(text: str) -> int:
    """Minutes to read *text* at 200 words per minute, never less than 1."""
    words = len(text.split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def make_excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    """Truncate *text* to at most *length* characters at a word boundary."""
    if len(text) <= length:
        return text
    cut = text[: length + 1]
    if " " in cut:
        cut = cut[: cut.rindex(" ")]
    else:
        cut = text[:length]
    return cut.rstrip(" ,.;:") + "..."
