"""
Devices API Router
==================

Per-device state the dashboard manages: where the device is on the map and
which 3D model draws it.

ALL ENDPOINTS:
-------------
GET    /api/device/{deviceId}/location  - Where is it? (404 if unknown)
POST   /api/device/{deviceId}/location  - Set lat/lng (and optionally name)
GET    /api/device/{deviceId}/model     - Its 3D model (404 if none)
POST   /api/device/{deviceId}/model     - Set modelUrl (and optionally modelName)
"""

import logging

from fastapi import APIRouter, Depends

from moisture_api.models import Device, DeviceModel, LocationUpdate, ModelUpdate
from moisture_api.routers.dependencies import get_moisture_service
from moisture_api.utils.errors import ApiError, InternalError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/device", tags=["devices"])


# =============================================================================
# LOCATION
# =============================================================================

@router.get("/{device_id}/location", summary="Get device location")
def get_location(device_id: str, service=Depends(get_moisture_service)):
    """
    The device's stored location.

    If nobody ever set one, the newest reading from this device that had GPS
    coordinates is used instead.
    """
    try:
        location = service.get_device_location(device_id)
    except Exception:
        logger.exception(f"[API] loading location for {device_id} failed")
        raise InternalError("Failed to get device location")

    if location is None:
        raise NotFoundError("Location not found")
    return location.to_response()


@router.post(
    "/{device_id}/location",
    response_model=Device,
    response_model_exclude_none=True,
    summary="Set device location",
)
def set_location(device_id: str, body: LocationUpdate, service=Depends(get_moisture_service)):
    """
    Set where the device is.

    - lat, lng (required): numbers
    - name (optional): only replaces the current name when given
    """
    try:
        return service.set_device_location(device_id, body.lat, body.lng, body.name)
    except Exception:
        logger.exception(f"[API] saving location for {device_id} failed")
        raise InternalError("Failed to set device location")


# =============================================================================
# 3D MODEL
# =============================================================================

@router.get(
    "/{device_id}/model",
    response_model=DeviceModel,
    response_model_exclude_none=True,
    summary="Get device 3D model",
)
def get_model(device_id: str, service=Depends(get_moisture_service)):
    """The model used to draw this device, or 404 if none has been set."""
    try:
        model = service.get_device_model(device_id)
    except Exception:
        logger.exception(f"[API] loading model for {device_id} failed")
        raise InternalError("Failed to get device model")

    if model is None:
        raise NotFoundError("Model not set")
    return model


@router.post(
    "/{device_id}/model",
    response_model=DeviceModel,
    response_model_exclude_none=True,
    summary="Set device 3D model",
)
def set_model(device_id: str, body: ModelUpdate, service=Depends(get_moisture_service)):
    """
    Point the device at a 3D model.

    - modelUrl (required): usually the url returned by POST /api/uploads
    - modelName (optional)
    """
    try:
        return service.set_device_model(device_id, body.model_url, body.model_name)
    except ApiError:
        raise
    except Exception:
        logger.exception(f"[API] saving model for {device_id} failed")
        raise InternalError("Failed to set device model")
