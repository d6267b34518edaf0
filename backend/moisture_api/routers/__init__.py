"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .readings import router as readings_router, legacy_router as legacy_readings_router
from .devices import router as devices_router
from .uploads import router as uploads_router

__all__ = [
    "readings_router",
    "legacy_readings_router",
    "devices_router",
    "uploads_router",
]
