"""Shared fixtures for portfolio tests."""

import textwrap

import pytest


def _make_post(
    title: str | None = "Hello World",
    date: str | None = "2024-01-01",
    description: str | None = "A first post",
    tags: str | None = '["intro"]',
    body: str = "Hello from the blog.",
    excerpt: str | None = None,
) -> str:
    """Build the text of a post file. Pass ``None`` to omit a field."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if description is not None:
        lines.append(f"description: {description}")
    if tags is not None:
        lines.append(f"tags: {tags}")
    if excerpt is not None:
        lines.append(f"excerpt: {excerpt}")
    lines.append("---")
    lines.append("")
    lines.append(textwrap.dedent(body))
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset the settings cache and any library installed on the app."""
    yield

    from portfolio.config import get_settings

    get_settings.cache_clear()

    import portfolio.main as main_mod

    for attr in ("library", "load_error"):
        if hasattr(main_mod.app.state, attr):
            delattr(main_mod.app.state, attr)


@pytest.fixture
def posts_dir(tmp_path):
    """An empty posts directory; write files with ``write_post``."""
    directory = tmp_path / "posts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_post(posts_dir):
    def _write(filename: str, text: str | None = None, **fields):
        path = posts_dir / filename
        path.write_text(text if text is not None else _make_post(**fields), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def mock_settings(monkeypatch, posts_dir):
    """Provide a Settings object with safe test defaults."""
    from portfolio.config import Settings, get_settings

    test_settings = Settings(
        content_dir=str(posts_dir),
        fallback_content_dir="",
        site_title="Test Site",
        site_domain="example.test",
        site_description="Test description",
        site_author="Test Author",
        site_email="author@example.test",
        admin_api_key="test-admin-key",
    )

    get_settings.cache_clear()
    monkeypatch.setattr("portfolio.config.get_settings", lambda: test_settings)

    # Modules that did ``from portfolio.config import get_settings`` hold
    # their own binding
    for mod_path in [
        "portfolio.main",
        "portfolio.routers.blog",
        "portfolio.routers.feeds",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def install(mock_settings):
    """Load the test posts directory onto the app, as startup would."""
    from portfolio.main import app
    from portfolio.state import install_library

    def _install():
        return install_library(app, mock_settings)

    return _install


@pytest.fixture
def make_post():
    """Return the post-file builder."""
    return _make_post
