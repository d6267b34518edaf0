"""
Soil Moisture Collector - Backend API
=====================================
FastAPI application that receives soil-moisture readings from field devices,
stores them, and serves them to the dashboard.

ARCHITECTURE:
    [Arduino + SIM800L] --HTTP POST--> [This Backend] ---> [Database]
                                             ^
                                             |
                                      [Dashboard (map + 3D view)]

    Devices post readings (moisture plus optional humidity, temperature,
    tilt and GPS). The dashboard reads them back, places devices on a map
    and draws each one with an uploaded 3D model (.glb/.gltf).

HOW TO RUN:
    # Install
    pip install -e .

    # Point it at a database (or put the URL in database_url.txt)
    export DATABASE_URL=sqlite:///./moisture.db

    # Run the server (exits with status 1 if the database is unreachable)
    moisture-api

    # ...or with auto-reload while developing
    uvicorn moisture_api.main:create_app --factory --reload --port 3000

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:3000/docs
    - ReDoc: http://localhost:3000/redoc
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from moisture_api.config import Config
from moisture_api.middleware import log_api_calls
from moisture_api.routers import (
    devices_router,
    legacy_readings_router,
    readings_router,
    uploads_router,
)
from moisture_api.services import ModelUploadService, MoistureService, MoistureStore
from moisture_api.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(message)s',
        datefmt='%H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        1. Connect the store (unless run() already did) - a failure here
           aborts startup
        2. Build the MoistureService on top of it

    SHUTDOWN:
        1. Close pooled database connections
    """
    config: Config = app.state.config

    # ========== STARTUP ==========
    store = app.state.store
    if store is None:
        store = MoistureStore(config.database_url, connect_timeout=config.db_connect_timeout)
    store.connect()

    app.state.store = store
    app.state.moisture_service = MoistureService(store)

    logger.info("=" * 60)
    logger.info("SOIL MOISTURE COLLECTOR - backend ready")
    logger.info(f"   Uploads directory: {config.uploads_dir}")
    logger.info(f"   CORS origins: {', '.join(config.cors_origins)}")
    logger.info("=" * 60)

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    store.dispose()
    logger.info("Shutdown complete")


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

def create_app(config: Optional[Config] = None, store: Optional[MoistureStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings (read from the environment when omitted)
        store: An already connected store; one is created at startup if omitted
    """
    config = config or Config()
    configure_logging(config.log_level)

    app = FastAPI(
        title="Soil Moisture Collector API",
        description="""
## Overview

Receives soil-moisture readings from field devices and serves them to the
dashboard, together with each device's location and 3D model.

## Endpoints

| Area | Routes |
|------|--------|
| **Readings** | `POST /api/readings`, `GET /api/readings`, `GET /api/readings/latest` |
| **Devices** | `GET/POST /api/device/{deviceId}/location`, `GET/POST /api/device/{deviceId}/model` |
| **Uploads** | `GET/POST /api/uploads`, files served at `/uploads/<name>` |

## Authentication

None. Run it on a trusted network.
        """,
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    upload_service = ModelUploadService(config.uploads_dir, max_bytes=config.max_upload_bytes)

    app.state.config = config
    app.state.store = store
    app.state.moisture_service = None
    app.state.upload_service = upload_service

    # CORS so the hosted dashboard can call us
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_api_calls)
    register_error_handlers(app)

    app.include_router(readings_router)
    app.include_router(legacy_readings_router)
    app.include_router(devices_router)
    app.include_router(uploads_router)

    # Uploaded models, 1:1 with the files on disk
    app.mount("/uploads", StaticFiles(directory=config.uploads_dir), name="uploads")

    @app.get("/", summary="API Information")
    async def root():
        """Root endpoint with API overview."""
        return {
            "name": "Soil Moisture Collector API",
            "version": VERSION,
            "documentation": {
                "swagger": "/docs",
                "redoc": "/redoc",
                "openapi": "/openapi.json"
            },
            "endpoints": {
                "readings": {
                    "add": "POST /api/readings",
                    "history": "GET /api/readings?limit=&deviceId=",
                    "latest": "GET /api/readings/latest?deviceId="
                },
                "device": {
                    "location": "GET/POST /api/device/{deviceId}/location",
                    "model": "GET/POST /api/device/{deviceId}/model"
                },
                "uploads": {
                    "list": "GET /api/uploads",
                    "upload": "POST /api/uploads",
                    "files": "GET /uploads/{name}"
                }
            }
        }

    @app.get("/health", summary="Health Check")
    def health(request: Request):
        """Is the app up, and does the database answer?"""
        store = request.app.state.store
        db_ok = store is not None and store.ping()
        return JSONResponse(
            status_code=200 if db_ok else 500,
            content={"app": "ok", "db": "ok" if db_ok else "error"},
        )

    return app


def run():
    """
    Entry point for ``moisture-api``.

    Connects to the database first and exits with status 1 if that fails,
    then serves until killed.
    """
    config = Config()
    configure_logging(config.log_level)

    try:
        store = MoistureStore(config.database_url, connect_timeout=config.db_connect_timeout)
        store.connect()
    except Exception as e:
        logger.critical(f"Database connection failed: {e}")
        sys.exit(1)

    uvicorn.run(create_app(config, store=store), host=config.host, port=config.port)


if __name__ == "__main__":
    run()
