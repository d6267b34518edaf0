"""
API Models
==========
Pydantic models for request validation and the JSON shapes we send back.

- Request models: what a sensor or the dashboard sends us
- Response models: plain data returned by the data layer and the routers

Everything goes over the wire in camelCase (``deviceId``, ``createdAt``,
``modelUrl``) because that is what the Arduino firmware and the dashboard
speak. In Python the fields stay snake_case.

Example reading:
    {
        "id": 17,
        "value": 512,
        "source": "arduino",
        "deviceId": "field-3",
        "humidity": 61.0,
        "temperature": 29.5,
        "createdAt": "2024-05-01T08:30:00Z",
        "updatedAt": "2024-05-01T08:30:00Z"
    }
"""

from datetime import datetime, timezone
from typing import Annotated, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from moisture_api.utils.validation import is_number


DEFAULT_DEVICE_ID = "default-device"
DEFAULT_SOURCE = "arduino"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back without tzinfo; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


def _whole_as_int(value):
    # The value column is a float, so a posted 512 comes back as 512.0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


WholeOrFloat = Annotated[Union[int, float], AfterValidator(_whole_as_int)]


class ApiModel(BaseModel):
    """Base for every model here: camelCase aliases, readable from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )

    def to_response(self) -> dict:
        """JSON-ready dict with camelCase keys and empty fields left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class ReadingCreate(ApiModel):
    """
    Body of POST /api/readings (and the legacy POST /api/moisture).

    Only ``value`` is required. Optional numeric extras that aren't real
    numbers are ignored rather than rejected - the firmware sometimes sends
    "nan" when the DHT sensor hiccups.
    """
    value: Union[StrictInt, StrictFloat] = Field(..., description="Soil moisture value (raw ADC units)")
    source: Optional[str] = Field(default=None, description="Who sent it (default: arduino)")
    device_id: str = Field(default=DEFAULT_DEVICE_ID, description="Sensor device identifier")
    lat: Optional[float] = Field(default=None, description="Latitude")
    lng: Optional[float] = Field(default=None, description="Longitude")
    humidity: Optional[float] = Field(default=None, description="Air humidity (%)")
    temperature: Optional[float] = Field(default=None, description="Air temperature (C)")
    tilt: Optional[float] = Field(default=None, description="Tilt angle (degrees)")

    @field_validator("value", mode="before")
    @classmethod
    def _value_must_be_number(cls, value):
        if not is_number(value):
            raise ValueError("value (number) is required")
        return value

    @field_validator("lat", "lng", "humidity", "temperature", "tilt", mode="before")
    @classmethod
    def _ignore_non_numbers(cls, value):
        return value if is_number(value) else None

    @field_validator("source", mode="before")
    @classmethod
    def _ignore_non_strings(cls, value):
        return value if isinstance(value, str) else None

    @field_validator("device_id", mode="before")
    @classmethod
    def _default_device(cls, value):
        return DEFAULT_DEVICE_ID if value in (None, "") else value


class LocationUpdate(ApiModel):
    """Body of POST /api/device/{deviceId}/location."""
    lat: float = Field(..., description="Latitude")
    lng: float = Field(..., description="Longitude")
    name: Optional[str] = Field(default=None, description="Display name for the device")

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _must_be_number(cls, value):
        if not is_number(value):
            raise ValueError("lat and lng (numbers) are required")
        return value


class ModelUpdate(ApiModel):
    """Body of POST /api/device/{deviceId}/model."""
    model_url: str = Field(..., description="URL of the .glb/.gltf model, usually /uploads/<name>")
    model_name: Optional[str] = Field(default=None, description="Human readable model name")

    @field_validator("model_url", mode="before")
    @classmethod
    def _must_be_non_empty_string(cls, value):
        if not isinstance(value, str) or not value:
            raise ValueError("modelUrl (string) is required")
        return value


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class Reading(ApiModel):
    id: int
    value: WholeOrFloat
    source: str
    device_id: str
    humidity: Optional[float] = None
    temperature: Optional[float] = None
    tilt: Optional[float] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class Device(ApiModel):
    id: Optional[int] = None
    device_id: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    name: Optional[str] = None
    model_url: Optional[str] = None
    model_name: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class DeviceLocation(ApiModel):
    """Location worked out from the newest geotagged reading."""
    device_id: str
    lat: float
    lng: float
    updated_at: UtcDatetime


class DeviceModel(ApiModel):
    device_id: str
    model_url: str
    model_name: Optional[str] = None


class UploadedModel(ApiModel):
    """One stored 3D model file."""
    name: str = Field(..., description="Stored filename, e.g. 1714550400000_tractor.glb")
    url: str = Field(..., description="Public URL, e.g. /uploads/1714550400000_tractor.glb")
    display_name: str = Field(..., description="Original filename shown to users")
