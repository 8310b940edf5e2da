"""Post loader: reads a directory of markdown posts into a PostLibrary.

Each load is a single synchronous pass: every ``*.md`` file in the directory
is parsed, rendered and checked for slug collisions. Files that fail are
reported next to the posts that loaded; only an unreadable directory aborts
the whole load.
"""

import logging
import os
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from portfolio.models.post import Post, TagCount, parse_post_date
from portfolio.services.errors import (
    DirectoryUnreadable,
    DuplicateSlug,
    MalformedPost,
    MarkdownRenderError,
    PostLoadError,
    UnreadableFile,
)
from portfolio.services.frontmatter import parse_document
from portfolio.services.rendering import (
    make_excerpt,
    plain_text,
    reading_time,
    render_markdown,
    slugify,
)

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = (".md", ".markdown")


@dataclass(frozen=True)
class PostLibrary:
    """Result of one load cycle: posts newest first, plus per-file errors."""

    directory: str
    posts: tuple[Post, ...] = ()
    errors: tuple[PostLoadError, ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return not self.errors

    def get(self, slug: str) -> Post | None:
        """Find a post by slug, or by source file stem."""
        for post in self.posts:
            if post.slug == slug:
                return post
        for post in self.posts:
            if post.path == slug:
                return post
        return None

    def with_tag(self, tag: str) -> list[Post]:
        wanted = tag.lower()
        return [p for p in self.posts if any(t.lower() == wanted for t in p.tags)]

    def tag_counts(self) -> list[TagCount]:
        """Posts per tag, matched case-insensitively like `with_tag`.

        Each tag is shown with the spelling of its newest post.
        """
        counts: Counter[str] = Counter()
        labels: dict[str, str] = {}
        for post in self.posts:
            seen = {tag.lower(): tag for tag in reversed(post.tags)}
            for key, tag in seen.items():
                counts[key] += 1
                labels.setdefault(key, tag)
        return [
            TagCount(tag=labels[key], count=count)
            for key, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        ]


def build_post(text: str, path: str) -> Post:
    """Parse one post file's text into a Post.

    Raises:
        MalformedPost: if the frontmatter is missing or invalid.
        MarkdownRenderError: if the body cannot be rendered.
    """
    meta, body = parse_document(text, path)

    try:
        content = render_markdown(body)
    except Exception as exc:
        raise MarkdownRenderError(path, str(exc)) from exc

    stem = Path(path).stem
    slug = slugify(meta.title) or slugify(stem)
    text_content = plain_text(content)
    excerpt = meta.excerpt or make_excerpt(plain_text(content, include_code=False))

    return Post(
        title=meta.title,
        date=meta.date,
        published_at=parse_post_date(meta.date),
        description=meta.description,
        slug=slug,
        path=stem,
        tags=meta.tags,
        excerpt=excerpt,
        reading_time=reading_time(text_content),
        content=content,
    )


def _list_markdown_files(directory: Path) -> list[Path]:
    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as exc:
        raise DirectoryUnreadable(str(directory), exc.strerror or str(exc)) from exc

    return [
        Path(entry.path)
        for entry in entries
        if entry.name.lower().endswith(MARKDOWN_EXTENSIONS) and entry.is_file()
    ]


def load_posts(directory: str | os.PathLike[str]) -> PostLibrary:
    """Load every markdown post in *directory* (non-recursive).

    Files are visited in name order, so when two titles share a slug the
    file that sorts later is the one reported as ``DuplicateSlug``.

    Returns:
        A PostLibrary with posts sorted by date descending (ties by slug).

    Raises:
        DirectoryUnreadable: if the directory is missing or cannot be listed.
    """
    root = Path(directory)
    if not root.is_dir():
        raise DirectoryUnreadable(str(root), "not a directory")

    posts: list[Post] = []
    errors: list[PostLoadError] = []
    seen: dict[str, str] = {}

    for file_path in _list_markdown_files(root):
        path = str(file_path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            errors.append(MalformedPost(path, UnreadableFile(str(exc))))
            logger.warning("Could not read post %s: %s", path, exc)
            continue

        try:
            post = build_post(text, path)
        except (MalformedPost, MarkdownRenderError) as exc:
            errors.append(exc)
            logger.warning("Skipping post %s", exc)
            continue

        if post.slug in seen:
            error = MalformedPost(path, DuplicateSlug(post.slug, seen[post.slug]))
            errors.append(error)
            logger.warning("Skipping post %s", error)
            continue

        seen[post.slug] = path
        posts.append(post)

    posts.sort(key=lambda p: p.slug)
    posts.sort(key=lambda p: p.published_at, reverse=True)

    logger.info(
        "Loaded %d posts from %s (%d failed)", len(posts), root, len(errors)
    )
    return PostLibrary(directory=str(root), posts=tuple(posts), errors=tuple(errors))


def resolve_content_dir(primary: str, fallback: str | None = None) -> str:
    """Return *primary* if it is a directory, else *fallback* when that one is."""
    if os.path.isdir(primary) or not fallback:
        return primary
    if os.path.isdir(fallback):
        logger.info("Content directory %s not found, using %s", primary, fallback)
        return fallback
    return primary
