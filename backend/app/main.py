"""
Burn Watch - Backend API
========================
FastAPI application that stores and serves smoke/fire reports for the map.

ARCHITECTURE:
    The frontend never talks to Firestore directly. Every read and write
    goes through this backend, which validates the data and holds the
    Firebase Admin credentials.

    [Map Frontend] --HTTPS--> [This Backend] --Admin SDK--> [Firestore]
                                                             |- sensorData
                                                             |- citizenReports
                                                             |- preReports

RECORD KINDS:
    1. Sensor readings - smoke, temperature, humidity from field sensors
    2. Citizen reports - smoke sightings from people using the map
    3. Pre-reports - planned open burns, shown until their end date

HOW TO RUN:
    # Install dependencies
    pip install -e .

    # Copy environment config
    cp env.example.txt .env
    # Edit .env with your service account

    # Run the server
    cd backend
    uvicorn app.main:app --reload --port 8000

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc
"""

import os
import sys
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from app.exceptions import ConfigurationError, StoreError, ValidationError
from app.routers import reports_router, maintenance_router
from app.services import StoreHandle, connect_store
from app.services.eraser import DEFAULT_BATCH_SIZE
from app.services.query_filter import DEFAULT_WINDOW_HOURS


# Load environment variables from .env file
load_dotenv()


# =============================================================================
# CONFIGURATION
# =============================================================================

class Config:
    """
    Application configuration loaded from environment variables.

    Environment Variables:
        FIREBASE_SERVICE_ACCOUNT: Service account JSON (whole document)
        GOOGLE_APPLICATION_CREDENTIALS: Path to a service account file
        FIREBASE_PROJECT_ID: Project override (optional)
        DELETE_BATCH_SIZE: Documents per batch for /api/delete/all (default: 300)
        RECENCY_WINDOW_HOURS: How far back /api/data looks (default: 24)
        FRONTEND_URL: URL of the frontend for CORS
        LOG_LEVEL: Logging level (default: INFO)
    """

    FIREBASE_SERVICE_ACCOUNT = os.getenv("FIREBASE_SERVICE_ACCOUNT")
    GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

    DELETE_BATCH_SIZE = int(os.getenv("DELETE_BATCH_SIZE", str(DEFAULT_BATCH_SIZE)))
    RECENCY_WINDOW_HOURS = float(os.getenv("RECENCY_WINDOW_HOURS", str(DEFAULT_WINDOW_HOURS)))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Frontend URL for CORS
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Allowed CORS origins
    CORS_ORIGINS = [
        FRONTEND_URL,
        "http://localhost:5173",    # Vite dev server
        "http://localhost:3000",    # Create React App
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]


logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
    datefmt='%H:%M:%S',
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        1. Connect to Firestore (unless a store handle was injected)
        2. Print startup information

    SHUTDOWN:
        Nothing to clean up; the Admin SDK owns its channels.
    """
    config = app.state.config

    print("=" * 60)
    print("🔥 BURN WATCH - Starting Backend")
    print("=" * 60)

    if getattr(app.state, "store", None) is None:
        app.state.store = connect_store(
            service_account_json=config.FIREBASE_SERVICE_ACCOUNT,
            credentials_path=config.GOOGLE_APPLICATION_CREDENTIALS,
            project_id=config.FIREBASE_PROJECT_ID,
        )

    store = app.state.store
    if store.is_available:
        print(f"✅ Firestore connected (project: {store.project_id})")
    else:
        print(f"❌ Firestore unavailable: {store.reason}")
        print("   Every /api request will answer 500 until this is fixed.")
    print(f"   Recency window: {config.RECENCY_WINDOW_HOURS} hours")
    print(f"   Delete batch size: {config.DELETE_BATCH_SIZE}")
    print(f"   CORS origins: {len(config.CORS_ORIGINS)} configured")
    print("📖 API Documentation: http://localhost:8000/docs")
    print("=" * 60)

    yield  # Application runs here

    print("🛑 Shutting down...")


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def handle_validation_error(request: Request, exc: ValidationError):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={
            "error": str(exc),
            "kind": getattr(exc.kind, "value", exc.kind),
            "missing": exc.missing,
            "invalid": exc.invalid,
        },
    )


async def handle_store_error(request: Request, exc: StoreError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": f"Error during {exc.operation} on {exc.kind.collection}"},
    )


def configuration_error_response(reason: Optional[str]) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Server configuration error (document store)",
            "message": (
                "The backend could not connect to Firestore, so no data can be read or "
                "written. Check the service account settings on the server. "
                f"Reason: {reason or 'not initialized'}"
            ),
        },
    )


async def handle_configuration_error(request: Request, exc: ConfigurationError):
    logger.error(f"{request.method} {request.url.path} refused: {exc}")
    return configuration_error_response(str(exc))


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

def create_app(store: Optional[StoreHandle] = None, config=Config) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        store: Pre-built store handle. If None, one is created at startup
               from `config`.
        config: Configuration class (swap for tests)
    """
    app = FastAPI(
        title="Burn Watch API",
        description="""
## Overview

Backend for the smoke and open-burn map. Stores sensor readings, citizen
reports and pre-burn notifications in Firestore and serves what is
currently relevant.

## What `/api/data` returns

| Collection | Shown when |
|------------|------------|
| **sensorData** | `time` is within the last 24 hours |
| **citizenReports** | `time` is within the last 24 hours |
| **preReports** | `endDate` is still in the future |
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.config = config
    app.state.store = store

    @app.middleware("http")
    async def require_store(request: Request, call_next):
        """Refuse every /api call while Firestore is unavailable."""
        if request.url.path.startswith("/api"):
            handle = getattr(request.app.state, "store", None)
            if handle is None or not handle.is_available:
                reason = getattr(handle, "reason", None)
                logger.error(
                    f"Refusing {request.method} {request.url.path}: Firestore unavailable ({reason})"
                )
                return configuration_error_response(reason)
        return await call_next(request)

    # CORS goes on last so it wraps the store guard too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(StoreError, handle_store_error)
    app.add_exception_handler(ConfigurationError, handle_configuration_error)

    app.include_router(reports_router)
    app.include_router(maintenance_router)

    @app.get("/", summary="API Information")
    async def root():
        """Root endpoint with API overview."""
        return {
            "name": "Burn Watch API",
            "version": "1.0.0",
            "documentation": {
                "swagger": "/docs",
                "redoc": "/redoc",
                "openapi": "/openapi.json"
            },
            "endpoints": {
                "data": "GET /api/data",
                "add_sensor": "POST /api/add/sensor",
                "add_citizen": "POST /api/add/citizen",
                "add_pre": "POST /api/add/pre",
                "delete_all": "DELETE /api/delete/all",
            }
        }

    @app.get("/health", summary="Health Check")
    async def health():
        """Health check endpoint."""
        handle = app.state.store
        if handle is not None and handle.is_available:
            return {"status": "healthy", "store": "available"}
        return {
            "status": "degraded",
            "store": "unavailable",
            "reason": getattr(handle, "reason", None) or "not initialized",
        }

    return app


app = create_app()
