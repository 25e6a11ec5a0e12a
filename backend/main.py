"""
Main FastAPI Application
=======================

Entry point for the artifact catalog search API server.
"""

import logging
import sys
import time

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()  # settings read the environment at import time

from api.router import api_router
from services.catalog_services import get_engine_capability, get_store
from services.logging_service import init_logging
from utils.health_monitor import get_health_monitor


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors and emojis for better log readability"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }

    EMOJIS = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️',
        'WARNING': '⚠️',
        'ERROR': '❌',
        'CRITICAL': '🚨'
    }

    def format(self, record):
        emoji = self.EMOJIS.get(record.levelname, '')
        color = self.COLORS.get(record.levelname, '')
        reset = self.COLORS['RESET']
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{emoji} {record.levelname}{reset}"
        return super().format(record)


def setup_logging():
    """Console logging with visual indicators"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter("%(levelname)s %(name)s: %(message)s"))

    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)

    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.error').setLevel(logging.WARNING)
    logging.getLogger('elastic_transport.transport').setLevel(logging.WARNING)


setup_logging()
try:
    # Add rotating file + ring buffer handlers
    init_logging()
except OSError as e:
    logging.getLogger(__name__).warning(f"⚠️ File logging unavailable: {e}")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Artifact Catalog API",
    description="Faceted search over the archaeological artifact catalog",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Starting Artifact Catalog API Server")

    get_store().create_schema()

    capability = get_engine_capability()
    status = capability.status()
    logger.info(f"🔎 Search engine: {status['engine']} (mode={status['mode']})")

    health_status = get_health_monitor().check_system_health()
    logger.info(f"🏥 Initial health check: {health_status['overall_status']}")

    logger.info("✅ Artifact Catalog API Server started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("🛑 Shutting down Artifact Catalog API Server")
    get_store().engine.dispose()
    logger.info("✅ Artifact Catalog API Server shutdown complete")


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to responses"""
    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = str(time.time() - start_time)
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled exception on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if app.debug else "An unexpected error occurred"
        }
    )


@app.get("/")
async def root():
    return {
        "message": "Artifact Catalog API v1.0",
        "status": "running",
        "docs": "/docs",
        "health": "/api/health"
    }


if __name__ == "__main__":
    logger.info("🔧 Starting Artifact Catalog API Server in development mode")
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=False,
        log_level="info",
        access_log=True
    )
