"""
Readings API Router
===================

Where the sensors send their measurements and the dashboard reads them back.

ALL ENDPOINTS:
-------------
POST   /api/readings           - Store a reading from a sensor
GET    /api/readings/latest    - Newest reading (optionally ?deviceId=)
GET    /api/readings           - Recent readings (?limit=&deviceId=)

The same three routes are also mounted under /api/moisture, which is where
the deployed Arduino firmware posts (see ``legacy_router``).

Example (what the Arduino sends):
    POST /api/readings
    {
        "value": 512,
        "deviceId": "field-3",
        "humidity": 61,
        "temperature": 29.5,
        "lat": 14.5995,
        "lng": 120.9842
    }
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from moisture_api.models import Reading, ReadingCreate
from moisture_api.routers.dependencies import get_moisture_service
from moisture_api.utils.errors import InternalError

logger = logging.getLogger(__name__)


# =============================================================================
# ENDPOINTS
# =============================================================================

def create_reading(body: ReadingCreate, service=Depends(get_moisture_service)):
    """
    Store one reading.

    - value (required): the moisture value, must be a number
    - deviceId (optional): defaults to "default-device"
    - source (optional): defaults to "arduino"
    - lat/lng (optional): when both are sent, the device's map pin moves here
    - humidity, temperature, tilt (optional): extra sensor values

    Returns the stored reading (201).
    """
    try:
        return service.save_moisture(
            body.value,
            source=body.source,
            device_id=body.device_id,
            lat=body.lat,
            lng=body.lng,
            humidity=body.humidity,
            temperature=body.temperature,
            tilt=body.tilt,
        )
    except Exception:
        logger.exception("[API] saving reading failed")
        raise InternalError("Failed to save moisture reading")


def latest_reading(
    device_id: Optional[str] = Query(None, alias="deviceId"),
    service=Depends(get_moisture_service),
):
    """
    The newest reading for a device (or across all devices).

    Returns ``{}`` when there are no readings yet, not a 404.
    """
    try:
        reading = service.get_latest_moisture(device_id)
    except Exception:
        logger.exception("[API] loading latest reading failed")
        raise InternalError("Failed to get latest reading")

    logger.info(
        f"[API] latest deviceId={device_id} "
        f"value={reading.value if reading else None} "
        f"createdAt={reading.created_at if reading else None}"
    )
    return reading.to_response() if reading else {}


def list_readings(
    limit: Optional[str] = Query(None, description="How many (1-500, default 50)"),
    device_id: Optional[str] = Query(None, alias="deviceId"),
    service=Depends(get_moisture_service),
):
    """
    Recent readings, newest first.

    ``limit`` is clamped to 1..500 and never rejected.
    """
    try:
        readings = service.get_moisture_readings(limit, device_id)
    except Exception:
        logger.exception("[API] loading readings failed")
        raise InternalError("Failed to get readings")

    logger.info(f"[API] history deviceId={device_id} limit={limit} count={len(readings)}")
    return readings


# =============================================================================
# ROUTERS
# =============================================================================

def build_router(prefix: str, include_in_schema: bool = True) -> APIRouter:
    """Mount the reading endpoints under ``prefix``."""
    router = APIRouter(prefix=prefix, tags=["readings"], include_in_schema=include_in_schema)
    router.add_api_route(
        "",
        create_reading,
        methods=["POST"],
        status_code=201,
        response_model=Reading,
        response_model_exclude_none=True,
        summary="Store a reading",
    )
    router.add_api_route("/latest", latest_reading, methods=["GET"], summary="Latest reading")
    router.add_api_route(
        "",
        list_readings,
        methods=["GET"],
        response_model=list[Reading],
        response_model_exclude_none=True,
        summary="Reading history",
    )
    return router


router = build_router("/api/readings")

# What the Arduino firmware already in the field talks to
legacy_router = build_router("/api/moisture", include_in_schema=False)
