"""
Database Tables
===============

SQLAlchemy ORM mapping for the two things we persist:

- MoistureReadingRow: one reading sent by a sensor. Written once, never changed.
- DeviceRow: the latest known state of a device (location, name, 3D model).
  One row per device_id, overwritten field by field.

Nothing links the two tables: a reading can name a device that has no
DeviceRow yet.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class MoistureReadingRow(Base):
    __tablename__ = "moisture_readings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False, default="arduino")
    device_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    humidity:    Mapped[float | None] = mapped_column(Float)
    temperature: Mapped[float | None] = mapped_column(Float)
    tilt:        Mapped[float | None] = mapped_column(Float)
    lat:         Mapped[float | None] = mapped_column(Float)
    lng:         Mapped[float | None] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("idx_readings_created_desc", text("created_at DESC")),
        Index("idx_readings_device_created", "device_id", text("created_at DESC")),
    )


class DeviceRow(Base):
    __tablename__ = "devices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    lat:        Mapped[float | None] = mapped_column(Float)
    lng:        Mapped[float | None] = mapped_column(Float)
    name:       Mapped[str | None] = mapped_column(String)
    model_url:  Mapped[str | None] = mapped_column(String)
    model_name: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
