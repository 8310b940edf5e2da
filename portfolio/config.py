"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Blog content (fallback_content_dir is the legacy location)
    content_dir: str = "content/posts"
    fallback_content_dir: str = "assets/posts"

    # Site metadata (feed, sitemap, share pages)
    site_title: str = "Juan M. Rada León"
    site_domain: str = "localhost:8080"
    site_description: str = "Personal website and blog"
    site_author: str = "Juan M. Rada León"
    site_email: str = "juan@jrada.dev"
    site_language: str = "en"

    feed_max_items: int = 20
    html_max_age: int = 3600  # seconds
    static_max_age: int = 31536000  # robots.txt, manifest.json

    # Protects POST /api/blog/reload; empty disables the endpoint
    admin_api_key: str = ""

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def site_url(self) -> str:
        return f"https://{self.site_domain}"

    @property
    def cache_control_html(self) -> str:
        return f"public, max-age={self.html_max_age}"

    @property
    def cache_control_static(self) -> str:
        return f"public, max-age={self.static_max_age}, immutable"


@lru_cache
def get_settings() -> Settings:
    return Settings()
