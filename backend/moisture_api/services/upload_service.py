"""
Model Upload Service
====================

Stores 3D model files (.glb / .gltf) that the dashboard uses to draw devices.

HOW FILES ARE NAMED:
-------------------
    <milliseconds since epoch>_<original name, sanitized>

    "Tractor v2.glb" uploaded at 1714550400000 -> "1714550400000_Tractor_v2.glb"

The directory is flat and served as-is under /uploads, so the stored name is
also the URL. When listing, the timestamp prefix is stripped again to get a
name people recognise.
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from moisture_api.models import UploadedModel
from moisture_api.utils.errors import ValidationError
from moisture_api.utils.validation import is_model_file, sanitize_filename

logger = logging.getLogger(__name__)


STORED_NAME_PATTERN = re.compile(r'^(\d+)_(.+)$')


class ModelUploadService:
    """Saves and lists uploaded model files in one directory."""

    CHUNK_SIZE = 1024 * 1024  # 1 MiB per read

    def __init__(
        self,
        uploads_dir: Path,
        max_bytes: int = 50 * 1024 * 1024,
        public_prefix: str = "/uploads",
    ):
        """
        Args:
            uploads_dir: Where files go (created if missing)
            max_bytes: Largest accepted upload
            public_prefix: URL path the directory is served under
        """
        self.uploads_dir = Path(uploads_dir)
        self.max_bytes = max_bytes
        self.public_prefix = public_prefix.rstrip("/")
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def url_for(self, name: str) -> str:
        return f"{self.public_prefix}/{name}"

    @staticmethod
    def storage_name(original_name: str, now_ms: Optional[int] = None) -> str:
        """Build the on-disk name: ``{epoch_ms}_{sanitized original}``."""
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return f"{now_ms}_{sanitize_filename(original_name)}"

    @staticmethod
    def display_name(stored_name: str) -> str:
        """Strip the timestamp prefix; names without one are shown as-is."""
        match = STORED_NAME_PATTERN.match(stored_name)
        return match.group(2) if match else stored_name

    async def save(self, upload: UploadFile) -> UploadedModel:
        """
        Stream an upload to disk.

        Raises:
            ValidationError: Wrong extension, or bigger than max_bytes
                             (the partial file is removed)
        """
        original_name = upload.filename or ""
        if not is_model_file(original_name):
            raise ValidationError("Only .glb or .gltf files are allowed")

        name = self.storage_name(original_name)
        path = self.uploads_dir / name
        size = 0

        # Disk I/O runs in the threadpool so a 50 MiB write doesn't block the loop
        try:
            out = await run_in_threadpool(open, path, "wb")
            try:
                while chunk := await upload.read(self.CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise ValidationError(
                            f"File too large (max {self.max_bytes // (1024 * 1024)} MiB)"
                        )
                    await run_in_threadpool(out.write, chunk)
            finally:
                await run_in_threadpool(out.close)
        except Exception:
            path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored model {original_name} as {name} ({size} bytes)")
        return UploadedModel(name=name, url=self.url_for(name), display_name=original_name)

    def list_models(self) -> list[UploadedModel]:
        """Every stored .glb/.gltf file, sorted by stored name."""
        models = []
        for path in sorted(self.uploads_dir.iterdir()):
            if not path.is_file() or not is_model_file(path.name):
                continue
            models.append(UploadedModel(
                name=path.name,
                url=self.url_for(path.name),
                display_name=self.display_name(path.name),
            ))
        return models
