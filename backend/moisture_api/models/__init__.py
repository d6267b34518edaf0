"""
Models Package
==============

- records.py = database tables (SQLAlchemy)
- schemas.py = request/response shapes (pydantic)

Example:
    from moisture_api.models import Reading, ReadingCreate
"""

from .records import Base, MoistureReadingRow, DeviceRow
from .schemas import (
    DEFAULT_DEVICE_ID,
    DEFAULT_SOURCE,

    # What sensors and the dashboard send us
    ReadingCreate,
    LocationUpdate,
    ModelUpdate,

    # What we send back
    Reading,
    Device,
    DeviceLocation,
    DeviceModel,
    UploadedModel,
)

__all__ = [
    "Base",
    "MoistureReadingRow",
    "DeviceRow",
    "DEFAULT_DEVICE_ID",
    "DEFAULT_SOURCE",
    "ReadingCreate",
    "LocationUpdate",
    "ModelUpdate",
    "Reading",
    "Device",
    "DeviceLocation",
    "DeviceModel",
    "UploadedModel",
]
