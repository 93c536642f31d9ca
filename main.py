# bandwidth-hero-proxy/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from proxy_engine.routes.api_routes import router
from proxy_engine.data.settings import load_settings
from proxy_engine.data.http_client import open_http_client, close_http_client
from proxy_engine.utils import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings and open the upstream client; close it on shutdown."""
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        open_http_client()
        logger.info(f"Proxy starting up with '{settings.option_strategy.value}' options.")
    except Exception as e:
        logger.critical(f"Critical error during startup: {e}")
        raise
    yield
    logger.info("Proxy shutting down...")
    await close_http_client()


app = FastAPI(title="Bandwidth Hero Proxy", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)
app.include_router(router)


@app.get("/health", summary="Health Check")
async def health_check():
    """
    Simple health check endpoint to verify the API is running.
    """
    return {"status": "ok", "message": "Bandwidth Hero Proxy is running."}
