"""
Snippetbox — FastAPI Host & Application Factory
==================================================

What:  Creates the FastAPI instance that hosts the snippetbox pipeline.
How:   create_app() builds the engine, stores, session store and pipeline
       from Settings, registers the health route, and mounts the pipeline at
       the root. The FastAPI layer owns lifespan (logging setup, optional
       schema creation, engine disposal) and operational endpoints; every
       other request goes through the pipeline's own chains and router.
Who:   uvicorn (`uvicorn snippetbox.main:app`) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │ FastAPI host                                             │
    │   GET /health                 (operational probe)        │
    │   Mount "/" → Application                                │
    │      standard chain: recover_panic → log_request →       │
    │                      secure_headers                      │
    │      Router → dynamic chain (session_enable) → handler   │
    │                 → SnippetStore / UserStore → database    │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  setup logging, create tables when AUTO_CREATE_SCHEMA is set
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from snippetbox import __version__
from snippetbox.application import Application
from snippetbox.config import Settings, get_settings
from snippetbox.database import (
    create_engine,
    create_schema,
    create_session_factory,
    dispose_engine,
)
from snippetbox.observability import FaultReporter
from snippetbox.routes import health
from snippetbox.security import BcryptHasher, PasswordHasher
from snippetbox.sessions import MemorySessionStore, SessionStore
from snippetbox.stores import SnippetStore, UserStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The pipeline writes its own access log.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("Snippetbox %s starting up...", __version__)

    if settings.auto_create_schema:
        await create_schema(app.state.engine)
        logger.info("Database schema created")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Snippetbox shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    *,
    sessions: Optional[SessionStore] = None,
    hasher: Optional[PasswordHasher] = None,
    reporter: Optional[FaultReporter] = None,
) -> FastAPI:
    """
    Assemble the host application.

    Every collaborator can be replaced: tests pass their own settings,
    session store, hasher and fault reporter.
    """
    settings = settings or get_settings()

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    snippets = SnippetStore(session_factory)
    users = UserStore(session_factory, hasher or BcryptHasher(rounds=settings.bcrypt_rounds))
    pipeline = Application(
        settings=settings,
        snippets=snippets,
        users=users,
        sessions=sessions or MemorySessionStore(),
        reporter=reporter,
    )

    app = FastAPI(
        title="Snippetbox",
        description="Share short-lived text snippets.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.started_at = time.time()
    app.state.pipeline = pipeline

    # ── Register Routes ───────────────────────────────────────────────────
    # Host routes are matched before the mount; everything else falls
    # through to the pipeline.
    app.include_router(health.router)
    app.mount("/", pipeline)

    return app


app = create_app()
