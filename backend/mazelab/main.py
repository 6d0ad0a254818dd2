"""Maze Lab API - Main FastAPI Application."""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from mazelab.api.routes import comparison, maze, runs, strategies
from mazelab.config import get_settings
from mazelab.services.maze_service import get_maze_catalog

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("mazelab")


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors."""
    logger.warning(
        f"Rate limit exceeded for {request.client.host if request.client else 'unknown'} "
        f"on {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please slow down.",
            "retry_after": str(exc.detail),
        },
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests with correlation IDs."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        request.state.request_id = request_id

        logger.info(
            f"[{request_id}] --> {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] <-- ERROR: {type(e).__name__}: {e} "
                f"({process_time:.2f}ms)"
            )
            raise

        process_time = (time.time() - start_time) * 1000
        logger.info(f"[{request_id}] <-- {response.status_code} ({process_time:.2f}ms)")
        response.headers["X-Request-ID"] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Maze Lab API...")

    catalog = get_maze_catalog()
    logger.info(f"Maze catalog ready: {', '.join(catalog.names())}")

    yield

    logger.info("Shutting down Maze Lab API...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Maze exploration strategy evaluation engine",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# The comparison router owns the limiter its decorators are bound to
app.state.limiter = comparison.limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": settings.app_version}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


@app.get("/config")
async def get_config() -> dict:
    """Simulation limits clients need to drive runs."""
    return {
        "max_advance_steps": settings.max_advance_steps,
        "flag_exit_from_start": settings.flag_exit_from_start,
        "comparison_iteration_factor": settings.comparison_iteration_factor,
        "debug": settings.debug,
    }


# Include routers
app.include_router(maze.router, prefix="/v1")
app.include_router(strategies.router, prefix="/v1")
app.include_router(runs.router, prefix="/v1")
app.include_router(comparison.router, prefix="/v1")
