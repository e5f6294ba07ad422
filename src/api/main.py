import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.api.deps import get_settings
from src.app_shell.config import validate_ops_rules
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError) as e:
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)

    validate_ops_rules(rules, settings)
    logger.info("Rules %s loaded from %s", rules.rules_version, settings.rules_path)

    yield
    # Shutdown cleanup if needed


app = FastAPI(
    title="Content Lifecycle Manager API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import posts, projects, trash  # noqa: E402

app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(trash.router, prefix="/api/trash", tags=["Trash"])
app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
