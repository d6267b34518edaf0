"""
Moisture Service
================

The data access layer: everything that reads or writes readings and devices.

WHAT IT DOES:
------------
1. Saves readings sent by sensors (and moves the device's pin on the map
   when the reading carries GPS coordinates)
2. Returns the latest reading / recent history, newest first
3. Stores a device's location, name and 3D model (upsert by deviceId)
4. Works out a device's location from its readings when nobody set one

EVERY CALL IS ITS OWN ROUND TRIP:
--------------------------------
Nothing here is transactional across calls. Saving a geotagged reading is
two separate writes (the reading, then the device); if the second one fails
the reading is still saved and still returned.

Device upserts are last-write-wins. Two requests updating the same device at
the same time (say a location and a model) don't see each other; whichever
commits last decides the shared columns it touched.
"""

import logging
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from moisture_api.models import (
    DEFAULT_DEVICE_ID,
    DEFAULT_SOURCE,
    Device,
    DeviceLocation,
    DeviceModel,
    DeviceRow,
    MoistureReadingRow,
    Reading,
)
from moisture_api.services.store import MoistureStore
from moisture_api.utils.errors import ValidationError
from moisture_api.utils.validation import DEFAULT_LIMIT, clamp_limit

logger = logging.getLogger(__name__)


class MoistureService:
    """Reads and writes readings and devices through a MoistureStore."""

    def __init__(self, store: MoistureStore):
        self.store = store

    # =========================================================================
    # READINGS
    # =========================================================================

    def save_moisture(
        self,
        value: float,
        source: Optional[str] = None,
        device_id: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        humidity: Optional[float] = None,
        temperature: Optional[float] = None,
        tilt: Optional[float] = None,
    ) -> Reading:
        """
        Append a reading.

        If both lat and lng are given, the device's location is overwritten
        too (name and model are left alone).

        Returns:
            The stored reading with its id and timestamps
        """
        source = DEFAULT_SOURCE if source is None else source
        device_id = device_id or DEFAULT_DEVICE_ID

        row = MoistureReadingRow(
            value=value,
            source=source,
            device_id=device_id,
            lat=lat,
            lng=lng,
            humidity=humidity,
            temperature=temperature,
            tilt=tilt,
        )
        with self.store.session() as s:
            s.add(row)
            s.commit()
            s.refresh(row)
            saved = Reading.model_validate(row)

        logger.info(
            f"[{device_id}] saved reading id={saved.id} value={value} "
            f"humidity={humidity} temperature={temperature} tilt={tilt}"
        )

        if lat is not None and lng is not None:
            try:
                self._upsert_device(device_id, lat=lat, lng=lng)
            except SQLAlchemyError:
                # The reading is already stored and is what the caller gets back
                logger.exception(f"[{device_id}] reading saved but device location update failed")

        return saved

    def get_latest_moisture(self, device_id: Optional[str] = None) -> Optional[Reading]:
        """Newest reading for one device (or for all of them). None if there are none."""
        query = self._readings_query(device_id).limit(1)
        with self.store.session() as s:
            row = s.execute(query).scalar_one_or_none()
            return Reading.model_validate(row) if row is not None else None

    def get_moisture_readings(
        self,
        limit: Union[int, str, None] = DEFAULT_LIMIT,
        device_id: Optional[str] = None,
    ) -> list[Reading]:
        """
        Recent readings, newest first.

        Args:
            limit: How many (clamped to 1..500, default 50, never rejected)
            device_id: Only this device's readings; all devices if empty
        """
        query = self._readings_query(device_id).limit(clamp_limit(limit))
        with self.store.session() as s:
            rows = s.execute(query).scalars().all()
            return [Reading.model_validate(row) for row in rows]

    @staticmethod
    def _readings_query(device_id: Optional[str]):
        query = select(MoistureReadingRow)
        if device_id:
            query = query.where(MoistureReadingRow.device_id == device_id)
        # id breaks ties between readings stored within the same clock tick
        return query.order_by(MoistureReadingRow.created_at.desc(), MoistureReadingRow.id.desc())

    # =========================================================================
    # DEVICES
    # =========================================================================

    def set_device_location(
        self,
        device_id: str,
        lat: float,
        lng: float,
        name: Optional[str] = None,
    ) -> Device:
        """Overwrite lat/lng; the name only changes when a non-empty one is given."""
        fields = {"lat": lat, "lng": lng}
        if name:
            fields["name"] = name
        device = self._upsert_device(device_id, **fields)
        logger.info(f"[{device_id}] location set to ({lat}, {lng})")
        return device

    def get_device_location(self, device_id: str) -> Optional[Union[Device, DeviceLocation]]:
        """
        Where is this device?

        1. The device record, if there is one
        2. Otherwise the newest reading from it that has both lat and lng
        3. Otherwise None
        """
        with self.store.session() as s:
            device = self._find_device(s, device_id)
            if device is not None:
                return Device.model_validate(device)

            reading = s.execute(
                self._readings_query(device_id)
                .where(MoistureReadingRow.lat.is_not(None), MoistureReadingRow.lng.is_not(None))
                .limit(1)
            ).scalar_one_or_none()

        if reading is None:
            return None
        return DeviceLocation(
            device_id=device_id,
            lat=reading.lat,
            lng=reading.lng,
            updated_at=reading.created_at,
        )

    def set_device_model(
        self,
        device_id: str,
        model_url: str,
        model_name: Optional[str] = None,
    ) -> DeviceModel:
        """
        Point a device at a 3D model.

        Raises:
            ValidationError: If model_url is empty or not a string
        """
        if not model_url or not isinstance(model_url, str):
            raise ValidationError("modelUrl is required")

        fields = {"model_url": model_url}
        if model_name:
            fields["model_name"] = model_name
        device = self._upsert_device(device_id, **fields)
        logger.info(f"[{device_id}] model set to {model_url}")
        return DeviceModel(
            device_id=device.device_id,
            model_url=device.model_url,
            model_name=device.model_name,
        )

    def get_device_model(self, device_id: str) -> Optional[DeviceModel]:
        """The device's model, or None if the device doesn't exist or has no model."""
        with self.store.session() as s:
            device = self._find_device(s, device_id)
            if device is None or not device.model_url:
                return None
            return DeviceModel(
                device_id=device.device_id,
                model_url=device.model_url,
                model_name=device.model_name,
            )

    @staticmethod
    def _find_device(s, device_id: str) -> Optional[DeviceRow]:
        return s.execute(
            select(DeviceRow).where(DeviceRow.device_id == device_id)
        ).scalar_one_or_none()

    def _upsert_device(self, device_id: str, **fields) -> Device:
        """
        Create the device if it's new, then overwrite the given fields.

        If another request creates the same device between our SELECT and
        INSERT, the unique index on device_id rejects our row and we apply the
        fields to the one that won instead.
        """
        with self.store.session() as s:
            device = self._find_device(s, device_id)
            if device is None:
                device = DeviceRow(device_id=device_id, **fields)
                s.add(device)
            else:
                for key, value in fields.items():
                    setattr(device, key, value)

            try:
                s.commit()
            except IntegrityError:
                s.rollback()
                device = self._find_device(s, device_id)
                if device is None:
                    raise
                for key, value in fields.items():
                    setattr(device, key, value)
                s.commit()

            s.refresh(device)
            return Device.model_validate(device)
