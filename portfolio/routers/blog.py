"""Blog post endpoints."""

import html
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Path, Query, Request
from fastapi.responses import HTMLResponse

from portfolio.config import get_settings
from portfolio.models.post import Post, PostIndex, TagCount
from portfolio.services.feeds import post_url
from portfolio.services.post_loader import PostLibrary
from portfolio.state import get_library, install_library

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog", tags=["blog"])


def _find_post(library: PostLibrary, slug: str) -> Post:
    post = library.get(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post


@router.get("", response_model=PostIndex)
async def list_blog_posts(
    tag: str | None = Query(
        default=None,
        description="Filter posts by tag (case-insensitive)",
    ),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    library: PostLibrary = Depends(get_library),
):
    """Get the blog post index, newest first."""
    posts = library.with_tag(tag) if tag else list(library.posts)
    page = posts[offset : offset + limit]
    return PostIndex(posts=[p.summary() for p in page], total=len(posts))


@router.get("/tags", response_model=list[TagCount])
async def list_tags(library: PostLibrary = Depends(get_library)):
    """Tags used across all posts, most used first."""
    return library.tag_counts()


@router.get("/errors")
async def list_load_errors(library: PostLibrary = Depends(get_library)):
    """Files that failed to load in the current library."""
    return {
        "directory": library.directory,
        "loaded_at": library.loaded_at.isoformat(),
        "errors": [e.to_dict() for e in library.errors],
    }


@router.post("/reload")
async def reload_blog_posts(request: Request, x_admin_key: str = Header(default="")):
    """Reload every post from disk, replacing the current library.

    Protected by the admin API key.
    """
    settings = get_settings()
    if not settings.admin_api_key or x_admin_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Invalid admin key")

    library = install_library(request.app, settings)
    if library is None:
        raise HTTPException(status_code=500, detail="Posts directory is not readable")

    logger.info("Reloaded %d posts", len(library.posts))
    return {
        "status": "reloaded",
        "posts": len(library.posts),
        "errors": len(library.errors),
    }


@router.get("/{slug}", response_model=Post)
async def get_blog_post(
    slug: str = Path(..., min_length=1, max_length=200),
    library: PostLibrary = Depends(get_library),
):
    """Get a single post, including its rendered HTML, by slug or file name."""
    return _find_post(library, slug)


@router.get("/{slug}/og")
async def get_blog_post_og(
    slug: str = Path(..., min_length=1, max_length=200),
    library: PostLibrary = Depends(get_library),
):
    """Serve a minimal HTML page with OpenGraph meta tags for social sharing.

    Crawlers get the per-post title, description and publish time; browsers
    are redirected to the canonical post page.
    """
    post = _find_post(library, slug)
    settings = get_settings()

    canonical = post_url(settings, post)
    title_esc = html.escape(post.title)
    desc_esc = html.escape(post.description)
    site_esc = html.escape(settings.site_title)
    tag_meta = "".join(
        f'<meta property="article:tag" content="{html.escape(t)}" />\n'
        for t in post.tags
    )

    page = f"""<!DOCTYPE html>
<html lang="{html.escape(settings.site_language)}">
<head>
<meta charset="utf-8" />
<title>{title_esc} | {site_esc}</title>
<meta name="description" content="{desc_esc}" />
<meta property="og:type" content="article" />
<meta property="og:title" content="{title_esc}" />
<meta property="og:description" content="{desc_esc}" />
<meta property="og:url" content="{canonical}" />
<meta property="og:site_name" content="{site_esc}" />
<meta property="article:published_time" content="{post.iso_date}" />
{tag_meta}<meta name="twitter:card" content="summary" />
<meta name="twitter:title" content="{title_esc}" />
<meta name="twitter:description" content="{desc_esc}" />
<link rel="canonical" href="{canonical}" />
<meta http-equiv="refresh" content="0;url={canonical}" />
</head>
<body>
<p>Redirecting to <a href="{canonical}">{title_esc}</a>...</p>
</body>
</html>"""
    return HTMLResponse(
        content=page, headers={"Cache-Control": settings.cache_control_html}
    )
