"""Write feed.xml and sitemap.xml for the blog posts.

Usage:
    python -m scripts.export_feeds --out public
    python -m scripts.export_feeds content/posts --out public
"""

import argparse
import logging
import sys
from pathlib import Path

from portfolio.config import get_settings
from portfolio.services.errors import DirectoryUnreadable
from portfolio.services.feeds import generate_rss, generate_sitemap
from portfolio.services.post_loader import load_posts, resolve_content_dir

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export RSS feed and sitemap")
    parser.add_argument("directory", nargs="?", help="Posts directory")
    parser.add_argument("--out", default="public", help="Output directory")
    args = parser.parse_args(argv)

    settings = get_settings()
    directory = args.directory or resolve_content_dir(
        settings.content_dir, settings.fallback_content_dir
    )

    try:
        library = load_posts(directory)
    except DirectoryUnreadable as exc:
        logger.error("Cannot export feeds: %s", exc)
        return 1

    for error in library.errors:
        logger.warning("Not exported: %s", error)

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    (out / "feed.xml").write_text(generate_rss(settings, library.posts), encoding="utf-8")
    (out / "sitemap.xml").write_text(
        generate_sitemap(settings, library.posts), encoding="utf-8"
    )
    logger.info("Wrote feed.xml and sitemap.xml for %d posts to %s", len(library.posts), out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
