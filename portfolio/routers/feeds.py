"""Site-level endpoints: RSS feed, sitemap, robots.txt and web manifest."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from portfolio.config import get_settings
from portfolio.services.feeds import generate_rss, generate_sitemap
from portfolio.services.post_loader import PostLibrary
from portfolio.state import get_library

router = APIRouter(tags=["feeds"])


def _xml_response(body: str, media_type: str) -> Response:
    settings = get_settings()
    return Response(
        content=body,
        media_type=media_type,
        headers={"Cache-Control": settings.cache_control_html},
    )


@router.get("/feed.xml")
async def rss_feed(library: PostLibrary = Depends(get_library)):
    """RSS 2.0 feed of the most recent posts."""
    body = generate_rss(get_settings(), library.posts)
    return _xml_response(body, "application/rss+xml")


@router.get("/sitemap.xml")
async def sitemap(library: PostLibrary = Depends(get_library)):
    """XML sitemap of the site pages and every post."""
    body = generate_sitemap(get_settings(), library.posts)
    return _xml_response(body, "application/xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt():
    settings = get_settings()
    body = f"User-agent: *\nAllow: /\n\nSitemap: {settings.site_url}/sitemap.xml\n"
    return PlainTextResponse(
        body, headers={"Cache-Control": settings.cache_control_static}
    )


@router.get("/manifest.json")
async def web_manifest():
    """Web app manifest built from the site metadata."""
    settings = get_settings()
    words = settings.site_title.split()
    manifest = {
        "name": settings.site_title,
        "short_name": words[0] if words else "Site",
        "description": settings.site_description,
        "start_url": "/",
        "display": "standalone",
        "background_color": "#ffffff",
        "theme_color": "#2563eb",
        "icons": [],
    }
    return JSONResponse(
        manifest,
        media_type="application/manifest+json",
        headers={"Cache-Control": settings.cache_control_static},
    )
