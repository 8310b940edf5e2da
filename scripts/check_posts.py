"""Check a directory of blog posts from the command line.

Usage:
    python -m scripts.check_posts                 # Configured content directory
    python -m scripts.check_posts content/posts   # Explicit directory

Exits 1 if the directory is unreadable or any post failed to load.
"""

import argparse
import logging
import sys

from portfolio.config import get_settings
from portfolio.services.errors import DirectoryUnreadable
from portfolio.services.post_loader import load_posts, resolve_content_dir

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate markdown blog posts")
    parser.add_argument("directory", nargs="?", help="Posts directory to check")
    args = parser.parse_args(argv)

    settings = get_settings()
    directory = args.directory or resolve_content_dir(
        settings.content_dir, settings.fallback_content_dir
    )

    try:
        library = load_posts(directory)
    except DirectoryUnreadable as exc:
        print(f"ERROR: {exc}")
        return 1

    print(f"\nChecked {directory}:")
    print(f"  Loaded:  {len(library.posts)}")
    print(f"  Failed:  {len(library.errors)}")

    for post in library.posts:
        print(f"  {post.date}  {post.slug}  ({post.reading_time} min)")

    if library.errors:
        print("\nErrors:")
        for error in library.errors:
            print(f"  {error.path}: {error.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
