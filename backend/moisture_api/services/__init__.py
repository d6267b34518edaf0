"""
Services Package
================

These are the "workers" that do the actual work.

- MoistureStore: The shared database handle (connects once)
- MoistureService: Saves and looks up readings and devices
- ModelUploadService: Stores and lists uploaded 3D model files
"""

from .store import MoistureStore
from .moisture_service import MoistureService
from .upload_service import ModelUploadService

__all__ = [
    "MoistureStore",
    "MoistureService",
    "ModelUploadService",
]
