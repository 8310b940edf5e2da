"""
Portfolio site API

Serves the markdown blog as JSON, plus the RSS feed and sitemap.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio.config import get_settings
from portfolio.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from portfolio.routers import blog, feeds
from portfolio.state import install_library

logger = logging.getLogger(__name__)

settings = get_settings()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load posts once at startup."""
    library = install_library(app, get_settings())
    if library is not None and library.errors:
        logger.warning("%d post files failed to load", len(library.errors))
    yield


app = FastAPI(
    title="Portfolio Site API",
    description="Personal portfolio and markdown blog",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware (last added runs outermost)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Admin-Key", "X-Request-ID"],
)

# Routers
app.include_router(blog.router, prefix="/api")
app.include_router(feeds.router)


def _run_health_checks(app: FastAPI) -> dict[str, Any]:
    """Summarize the state of the installed post library."""
    library = getattr(app.state, "library", None)
    load_error = getattr(app.state, "load_error", None)

    checks = {
        "directory": "fail" if load_error is not None else "ok",
        "posts": "ok" if library is not None and library.ok else "fail",
    }
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded, failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    return {
        "status": overall,
        "service": "portfolio-site-api",
        "version": VERSION,
        "checks": checks,
        "posts": len(library.posts) if library is not None else 0,
        "errors": len(library.errors) if library is not None else 0,
    }


@app.get("/api/health")
async def health_check(request: Request) -> JSONResponse:
    """Health check reporting post load status."""
    result = _run_health_checks(request.app)
    status_code = 503 if getattr(request.app.state, "library", None) is None else 200
    return JSONResponse(content=result, status_code=status_code)
