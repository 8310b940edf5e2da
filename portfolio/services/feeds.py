"""RSS feed and XML sitemap generation for loaded posts."""

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from datetime import datetime, timezone
from email.utils import format_datetime

from portfolio.config import Settings
from portfolio.models.post import Post

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
RSS_DOCS_URL = "https://www.rssboard.org/rss-specification"
FEED_TTL_MINUTES = "1440"


def post_url(settings: Settings, post: Post) -> str:
    return f"{settings.site_url}/blog/{post.slug}"


def _to_xml(root: ET.Element) -> str:
    ET.indent(root)
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def generate_rss(
    settings: Settings,
    posts: Sequence[Post],
    now: datetime | None = None,
) -> str:
    """Build an RSS 2.0 document for the newest ``feed_max_items`` posts.

    *posts* must already be sorted newest first, as the loader returns them.
    """
    now = now or datetime.now(timezone.utc)
    editor = f"{settings.site_email} ({settings.site_author})"

    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = settings.site_title
    ET.SubElement(channel, "link").text = settings.site_url
    ET.SubElement(channel, "description").text = settings.site_description
    ET.SubElement(channel, "language").text = settings.site_language
    ET.SubElement(channel, "managingEditor").text = editor
    ET.SubElement(channel, "webMaster").text = editor
    ET.SubElement(channel, "copyright").text = (
        f"© {now.year} {settings.site_author}. All rights reserved."
    )
    ET.SubElement(channel, "lastBuildDate").text = format_datetime(now)
    ET.SubElement(channel, "docs").text = RSS_DOCS_URL
    ET.SubElement(channel, "ttl").text = FEED_TTL_MINUTES

    for post in posts[: settings.feed_max_items]:
        link = post_url(settings, post)
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = post.title
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "description").text = post.description
        ET.SubElement(item, "pubDate").text = format_datetime(post.published_at)
        ET.SubElement(item, "guid", isPermaLink="true").text = link
        ET.SubElement(item, "author").text = editor
        for tag in post.tags:
            ET.SubElement(item, "category").text = tag

    return _to_xml(rss)


def _sitemap_priority(index: int) -> str:
    if index < 5:
        return "0.8"
    if index < 10:
        return "0.7"
    return "0.6"


def generate_sitemap(settings: Settings, posts: Sequence[Post]) -> str:
    """Build a sitemap listing the site pages and every post, newest first."""
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)

    def add(loc: str, changefreq: str, priority: str, lastmod: str | None = None) -> None:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = loc
        if lastmod:
            ET.SubElement(url, "lastmod").text = lastmod
        ET.SubElement(url, "changefreq").text = changefreq
        ET.SubElement(url, "priority").text = priority

    add(settings.site_url, "weekly", "1.0")
    add(f"{settings.site_url}/blog", "weekly", "0.9")
    add(f"{settings.site_url}/feed.xml", "daily", "0.5")

    for index, post in enumerate(posts):
        add(
            post_url(settings, post),
            "monthly",
            _sitemap_priority(index),
            lastmod=post.published_at.strftime("%Y-%m-%d"),
        )

    return _to_xml(urlset)
