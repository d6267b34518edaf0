"""
Uploads API Router
==================

3D model files for the dashboard.

ALL ENDPOINTS:
-------------
GET    /api/uploads   - List stored .glb/.gltf files
POST   /api/uploads   - Upload one (multipart, field "file", max 50 MiB)

Stored files are served back at /uploads/<name> (see main.py).

Example:
    curl -F "file=@tractor.glb" http://localhost:3000/api/uploads
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from moisture_api.models import UploadedModel
from moisture_api.routers.dependencies import get_upload_service
from moisture_api.utils.errors import ApiError, InternalError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.get("", response_model=list[UploadedModel], summary="List uploaded models")
def list_uploads(uploads=Depends(get_upload_service)):
    """Every stored model with its URL and original filename."""
    try:
        return uploads.list_models()
    except Exception:
        logger.exception("[API] listing uploads failed")
        raise InternalError("Failed to list uploads")


@router.post(
    "",
    status_code=201,
    response_model=UploadedModel,
    summary="Upload a 3D model",
)
async def upload_model(
    file: UploadFile = File(..., description=".glb or .gltf file"),
    uploads=Depends(get_upload_service),
):
    """
    Upload a .glb or .gltf file.

    Anything else (or anything over the size limit) gets a 400.
    Returns the stored name, its public URL and the original filename.
    """
    try:
        return await uploads.save(file)
    except ApiError:
        raise
    except Exception:
        logger.exception("[API] storing upload failed")
        raise InternalError("Failed to upload file")
    finally:
        await file.close()
