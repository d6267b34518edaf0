"""
Router Dependencies
===================

Give the endpoints access to the services built at startup.

The services live on ``app.state`` (set in the lifespan handler in main.py),
so every app instance - including the ones the tests make - has its own.
"""

from fastapi import Request

from moisture_api.services import ModelUploadService, MoistureService
from moisture_api.utils.errors import InternalError


def get_moisture_service(request: Request) -> MoistureService:
    """The MoistureService for this app. Fails if startup hasn't finished."""
    service = getattr(request.app.state, "moisture_service", None)
    if service is None:
        raise InternalError("Server not fully started yet")
    return service


def get_upload_service(request: Request) -> ModelUploadService:
    """The ModelUploadService for this app."""
    service = getattr(request.app.state, "upload_service", None)
    if service is None:
        raise InternalError("Server not fully started yet")
    return service
