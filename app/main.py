"""FastAPI application entrypoint. No business logic; only wiring, middleware and startup."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as v1_router
from app.bootstrap import run_bootstrap
from app.core.config import settings
from app.core.exceptions import BootstrapError
from app.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Ensure the default admin exists before serving; a failure aborts startup."""
    if settings.CREATE_DEFAULT_ADMIN:
        try:
            await anyio.to_thread.run_sync(run_bootstrap, settings)
        except BootstrapError as e:
            logger.critical("Startup aborted: %s", e)
            raise
    yield


app = FastAPI(
    title="Academy API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Academy API"}
