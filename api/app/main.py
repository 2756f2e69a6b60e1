"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.v1 import api_router
from app.config import settings
from app.logging_config import setup_logging
from app.middleware.body_limit import BodySizeLimitMiddleware

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Path(settings.assets_root).mkdir(parents=True, exist_ok=True)
    logger.info(f"Serving assets from {Path(settings.assets_root).resolve()} at {settings.assets_url_path}")
    yield


app = FastAPI(
    title="Tubely Media Service",
    description="Video and thumbnail ingestion",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    BodySizeLimitMiddleware,
    max_thumbnail_bytes=settings.max_thumbnail_bytes,
    max_video_bytes=settings.max_video_bytes,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as 400 rather than 422."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# Include API router
app.include_router(api_router, prefix=settings.api_prefix)

app.mount(
    settings.assets_url_path,
    StaticFiles(directory=settings.assets_root, check_dir=False),
    name="assets",
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
