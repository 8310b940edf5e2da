"""Startup-scoped post library, owned by the FastAPI application state."""

import logging

from fastapi import FastAPI, HTTPException, Request

from portfolio.config import Settings
from portfolio.services.errors import DirectoryUnreadable
from portfolio.services.post_loader import PostLibrary, load_posts, resolve_content_dir

logger = logging.getLogger(__name__)


def load_library(settings: Settings) -> PostLibrary:
    """Run a full load cycle for the configured content directory."""
    directory = resolve_content_dir(settings.content_dir, settings.fallback_content_dir)
    return load_posts(directory)


def install_library(app: FastAPI, settings: Settings) -> PostLibrary | None:
    """Load posts and store the result on ``app.state``.

    An unreadable directory leaves the previous library (if any) in place
    and records the failure on ``app.state.load_error``.
    """
    try:
        library = load_library(settings)
    except DirectoryUnreadable as exc:
        logger.error("Could not load posts: %s", exc)
        app.state.load_error = exc
        return None

    app.state.library = library
    app.state.load_error = None
    return library


def get_library(request: Request) -> PostLibrary:
    """FastAPI dependency returning the currently installed library."""
    library = getattr(request.app.state, "library", None)
    if library is None:
        raise HTTPException(status_code=503, detail="Posts are not loaded")
    return library
