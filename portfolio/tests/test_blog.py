"""Tests for the blog post endpoints.

Covers listing, tag filtering, lookup by slug, share pages, load errors and
the reload endpoint.
"""

from httpx import ASGITransport, AsyncClient


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def test_list_blog_posts(mock_settings, write_post, install):
    write_post("first.md", title="First Blog Post", date="2024-02-20")
    write_post("second.md", title="Second Blog Post", date="2024-02-19")
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [p["slug"] for p in data["posts"]] == ["first-blog-post", "second-blog-post"]
    assert "content" not in data["posts"][0]
    assert data["posts"][0]["formatted_date"] == "February 20, 2024"


async def test_list_blog_posts_with_pagination(mock_settings, write_post, install):
    for day in range(1, 6):
        write_post(f"{day}.md", title=f"Post {day}", date=f"2024-03-0{day}")
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog", params={"limit": 2, "offset": 1})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 5
    assert [p["title"] for p in data["posts"]] == ["Post 4", "Post 3"]


async def test_list_blog_posts_by_tag(mock_settings, write_post, install):
    write_post("a.md", title="Rusty", tags='["Rust"]')
    write_post("b.md", title="Pythonic", tags='["python"]')
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog", params={"tag": "rust"})

    data = response.json()
    assert data["total"] == 1
    assert data["posts"][0]["title"] == "Rusty"


async def test_list_tags(mock_settings, write_post, install):
    write_post("a.md", title="A", tags='["rust", "web"]')
    write_post("b.md", title="B", tags='["rust"]')
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog/tags")

    assert response.status_code == 200
    assert response.json() == [
        {"tag": "rust", "count": 2},
        {"tag": "web", "count": 1},
    ]


async def test_get_blog_post_by_slug(mock_settings, write_post, install):
    write_post("hello.md", title="Hello World", body="Some **bold** words.")
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog/hello-world")

    assert response.status_code == 200
    data = response.json()
    assert data["slug"] == "hello-world"
    assert data["content"] == "<p>Some <strong>bold</strong> words.</p>\n"
    assert data["reading_time"] == 1
    assert data["tags"] == ["intro"]


async def test_get_blog_post_by_file_name(mock_settings, write_post, install):
    write_post("2024-01-01-hello.md", title="Hello World")
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog/2024-01-01-hello")

    assert response.status_code == 200
    assert response.json()["slug"] == "hello-world"


async def test_get_blog_post_not_found(mock_settings, install):
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog/nonexistent")

    assert response.status_code == 404
    assert "not found" in response.json()["detail"].lower()


async def test_blog_unavailable_without_library(mock_settings):
    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog")

    assert response.status_code == 503


async def test_load_errors_listed(mock_settings, write_post, install):
    write_post("good.md", title="Good")
    bad = write_post("bad.md", title="Bad", date=None)
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog/errors")

    assert response.status_code == 200
    errors = response.json()["errors"]
    assert errors == [
        {
            "path": str(bad),
            "kind": "malformed_post",
            "message": "missing required field 'date'",
        }
    ]


async def test_og_page(mock_settings, write_post, install):
    write_post(
        "og.md",
        title="Tips & Tricks",
        description='Quotes "and" brackets <ok>',
        date="2024-04-02",
        tags='["rust"]',
    )
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog/tips-tricks/og")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    body = response.text
    assert '<meta property="og:title" content="Tips &amp; Tricks" />' in body
    assert "&quot;and&quot; brackets &lt;ok&gt;" in body
    assert 'content="https://example.test/blog/tips-tricks"' in body
    assert 'content="2024-04-02T00:00:00+00:00"' in body
    assert '<meta property="article:tag" content="rust" />' in body


async def test_og_page_not_found(mock_settings, install):
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.get("/api/blog/missing/og")

    assert response.status_code == 404


async def test_reload_requires_admin_key(mock_settings, install):
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.post(
            "/api/blog/reload", headers={"X-Admin-Key": "wrong"}
        )

    assert response.status_code == 403


async def test_reload_without_key_header_forbidden(mock_settings, install):
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.post("/api/blog/reload")

    assert response.status_code == 403
    assert response.json() == {"detail": "Invalid admin key"}


async def test_reload_disabled_without_configured_key(mock_settings, install):
    mock_settings.admin_api_key = ""
    install()

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.post("/api/blog/reload", headers={"X-Admin-Key": ""})

    assert response.status_code == 403


async def test_reload_replaces_library(mock_settings, write_post, install):
    write_post("one.md", title="One")
    before = install()

    write_post("two.md", title="Two", date="2024-06-01")

    from portfolio.main import app

    async with _client(app) as client:
        response = await client.post(
            "/api/blog/reload", headers={"X-Admin-Key": "test-admin-key"}
        )
        listing = await client.get("/api/blog")

    assert response.status_code == 200
    assert response.json() == {"status": "reloaded", "posts": 2, "errors": 0}
    assert [p["title"] for p in listing.json()["posts"]] == ["Two", "One"]
    assert app.state.library is not before
    assert len(before.posts) == 1
