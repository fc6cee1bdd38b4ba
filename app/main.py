"""FastAPI application entry point for the API Tester service.

Define the FastAPI application instance, register middleware and routers,
and configure the application lifespan. The health flags stay down until
the lifespan has loaded configuration and logging; only then are they
raised, so probes fail while the service is still starting.
"""

import logging.config
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from app.api import info, load, probes
from app.api.middleware import RequestCorrelationMiddleware
from app.apitester.core.health import HealthState
from app.apitester.core.logging_config import (
    configure_structlog_wrapper,
    get_logger,
    get_logging_config,
)
from app.apitester.core.stress import CpuBurster, MemoryAccumulator
from app.config import get_settings, load_datasource


def init_state(app: FastAPI) -> None:
    """Attach fresh process-wide collaborators to ``app.state``."""
    app.state.health = HealthState()
    app.state.memory = MemoryAccumulator(app.state.health)
    app.state.cpu = CpuBurster()
    app.state.datasource = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle events.

    Configure logging, resolve the datasource secret, then mark the
    instance ready and live.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control returns to the application after startup completes.
    """
    # === STARTUP SEQUENCE ===

    settings = get_settings()

    logging.config.dictConfig(get_logging_config(settings))
    configure_structlog_wrapper()

    logger = get_logger("lifespan")
    logger.info(
        "API Tester startup initiated",
        env=settings.ENVIRONMENT,
        version=settings.APPLICATION_VERSION,
        port=settings.PORT,
    )

    app.state.datasource = load_datasource(settings)
    app.state.health.mark_started()
    logger.info("Startup complete, probes now succeed")

    yield

    # === SHUTDOWN SEQUENCE ===

    logger.info("API Tester shutdown initiated")


app = FastAPI(
    title="API Tester",
    description="Diagnostic service for exercising probes and autoscaling",
    lifespan=lifespan,
)
init_state(app)

app.add_middleware(RequestCorrelationMiddleware)
app.include_router(probes.router)
app.include_router(load.router)
app.include_router(info.router)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions globally.

    Log the error with its request context and return a generic plain text
    500 so internal details never reach the client.
    """
    logger = get_logger("exception_handler")
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )
    return PlainTextResponse(
        "Internal Server Error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def run() -> None:
    """Serve the application with uvicorn.

    A failure to bind the port ends the process with a non-zero status.
    """
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
