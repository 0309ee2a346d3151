from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import make_asgi_app

from api.api import api_router
from core.config import configs
from core.logger import setup_logging
from gallery.errors import GalleryError

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    Path(configs.MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
    logger.info(f"🔧 Gallery starting. Media root: {configs.MEDIA_ROOT}, timezone: {configs.TIMEZONE}")
    yield
    # Shutdown
    logger.info("🛑 Shutting down gallery...")

app = FastAPI(
    title=configs.PROJECT_NAME,
    description="One photo a day, browsable by calendar",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=configs.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GalleryError)
async def gallery_error_handler(request: Request, exc: GalleryError):
    if exc.status_code >= 500:
        logger.error(f"💥 {request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"⚠️ {request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    message = f"Invalid {field}: {first.get('msg', 'malformed request')}"
    logger.warning(f"⚠️ {request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content={"success": False, "error": message})


app.include_router(api_router, prefix="/api")
app.mount("/metrics", make_asgi_app())
app.mount(configs.MEDIA_URL, StaticFiles(directory=configs.MEDIA_ROOT, check_dir=False), name="uploads")

@app.get("/")
async def root():
    return {"message": "Daily Photo Gallery Running"}

@app.get("/health")
async def health_check():
    return {"status": "ok"}
