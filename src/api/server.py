#!/usr/bin/env python
"""FastAPI server for the TubeHub API."""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Add src directory to Python path for imports
src_dir = Path(__file__).parent.parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import close_video_store, get_video_store
from api.routers import core, videos
from utils.config import load_config, validate_config
from utils.logging import clear_request_context, get_logger, set_request_context, setup_logging

config = load_config()
setup_logging(config["log_level"], json_output=config["log_json"])
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Open the video store on startup and close it on shutdown."""
    errors = validate_config(config)
    for error in errors:
        logger.warning("config_error", error=error)

    await get_video_store()
    logger.info("server_started", db_path=config["video_db_path"])
    try:
        yield
    finally:
        await close_video_store()


app = FastAPI(title="TubeHub API", version=core.API_VERSION, lifespan=lifespan)

# CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=config["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with its request ID."""
    request_id = set_request_context(request.headers.get("X-Request-ID"))
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(core.router)
app.include_router(videos.router)
