"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings
from .api import door_router
from .door import close_door_client

# Configure logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    if settings.device_configured:
        logger.info(f"doorctl starting, device: {settings.get_base_url()}")
    else:
        logger.warning("doorctl starting without device configuration")
    yield
    await close_door_client()
    logger.info("doorctl shutting down")


# Create FastAPI app
app = FastAPI(
    title="doorctl",
    description="Door control service for Digest-protected access-control devices",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(door_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report invalid request bodies as 400 with the validation errors."""
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": jsonable_encoder(exc.errors())},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
