"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request

from enorett.config import settings
from enorett.database import init_db
from enorett.logging_config import setup_logging
from enorett.routes import lookup_router
from enorett.services.lookup import LookupOrchestrator, build_orchestrator

VERSION = "0.1.0"

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Starting EnorEtt...")

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db()
    logger.info("Database initialized")

    # Load static resources before serving
    orchestrator = build_orchestrator(settings)
    orchestrator.dictionary.load_full()
    orchestrator.pronunciations.load()
    app.state.orchestrator = orchestrator

    yield

    logger.info("Shutting down EnorEtt...")


app = FastAPI(
    title="EnorEtt",
    description="Swedish en/ett article lookup service",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(lookup_router)


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Health check endpoint."""
    orchestrator: LookupOrchestrator | None = getattr(request.app.state, "orchestrator", None)
    return {
        "status": "healthy",
        "version": VERSION,
        "dictionary_entries": len(orchestrator.dictionary) if orchestrator else 0,
        "pronunciation_entries": orchestrator.pronunciations.size if orchestrator else 0,
        "morphology_enabled": bool(orchestrator and orchestrator.morphology),
        "corpus_enabled": bool(orchestrator and orchestrator.corpus),
    }


def run() -> None:
    """Run the application (for use with `enorett-server` command)."""
    import uvicorn

    uvicorn.run(
        "enorett.main:app",
        host="0.0.0.0",  # noqa: S104  # nosec B104 - Development server
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    run()
